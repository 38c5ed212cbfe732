"""
预订管理路由
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hotelops.database import get_db
from hotelops.models.ontology import Booking, BookingStatus
from hotelops.models.schemas import BookingCreate, BookingResponse
from hotelops.routers.deps import Page, pagination
from hotelops.security.auth import CurrentActor, get_current_actor, require_staff_or_admin
from hotelops.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["预订管理"])


def _get_visible_booking(service: BookingService, booking_id: int, actor: CurrentActor) -> Booking:
    """客人只能访问自己的预订"""
    booking = service.get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="预订不存在")
    if not actor.is_privileged and booking.user_id != actor.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="权限不足")
    return booking


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """创建预订"""
    return BookingService(db).create_booking(actor.id, data.room_id, data.start_date, data.end_date)


@router.get("", response_model=List[BookingResponse])
def list_bookings(
    user_id: Optional[int] = None,
    room_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    page: Page = Depends(pagination),
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """获取预订列表；客人只看到自己的预订"""
    if not actor.is_privileged:
        user_id = actor.id
    return BookingService(db).list_bookings(user_id, room_id, status, page.limit, page.offset)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """获取预订详情"""
    return _get_visible_booking(BookingService(db), booking_id, actor)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """取消预订"""
    service = BookingService(db)
    _get_visible_booking(service, booking_id, actor)
    return service.cancel_booking(booking_id)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
def complete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """完成预订"""
    return BookingService(db).complete_booking(booking_id)
