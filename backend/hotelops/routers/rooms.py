"""
房间管理路由
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hotelops.database import get_db
from hotelops.models.ontology import RoomStatus
from hotelops.models.schemas import RoomCreate, RoomUpdate, RoomResponse, RoomStatusUpdate
from hotelops.routers.deps import Page, pagination
from hotelops.security.auth import CurrentActor, get_current_actor, require_admin, require_staff_or_admin
from hotelops.services.room_service import RoomService

router = APIRouter(prefix="/rooms", tags=["房间管理"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    status: Optional[RoomStatus] = None,
    floor: Optional[int] = None,
    page: Page = Depends(pagination),
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """获取房间列表"""
    return RoomService(db).get_rooms(status, floor, page.limit, page.offset)


@router.get("/available", response_model=List[RoomResponse])
def list_available_rooms(
    start_date: datetime,
    end_date: datetime,
    page: Page = Depends(pagination),
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """查询时段内可预订的房间"""
    return RoomService(db).list_available_rooms(start_date, end_date, page.limit, page.offset)


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """获取房间详情"""
    room = RoomService(db).get_room(room_id)
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="房间不存在")
    return room


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """创建房间"""
    return RoomService(db).create_room(data)


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """更新房间"""
    return RoomService(db).update_room(room_id, data)


@router.patch("/{room_id}/status", response_model=RoomResponse)
def update_room_status(
    room_id: int,
    data: RoomStatusUpdate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """更新房间状态"""
    return RoomService(db).update_room_status(room_id, data.status)


@router.delete("/{room_id}")
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """删除房间"""
    RoomService(db).delete_room(room_id)
    return {"message": "删除成功"}
