"""
预订服务 - 本体操作层
管理 Booking 对象的创建、取消和完成

“检查可用性 + 插入预订”在房间键锁和房间行锁下的同一事务内完成，
并发的重叠请求只有一个能成功
"""
import logging
import math
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from hotelops.clock import Clock, utcnow
from hotelops.database import transaction
from hotelops.domain.state_machine import BOOKING_STATE_MACHINE
from hotelops.exceptions import ConflictError, NotFoundError, ValidationError
from hotelops.locks import room_locks
from hotelops.models.ontology import Booking, BookingStatus, Room, RoomStatus
from hotelops.services.availability_service import AvailabilityService, normalize_interval

logger = logging.getLogger(__name__)

SECONDS_PER_NIGHT = 24 * 60 * 60


def calculate_nights(start: datetime, end: datetime) -> int:
    """按整天向上取整计算晚数"""
    return math.ceil((end - start).total_seconds() / SECONDS_PER_NIGHT)


class BookingService:
    """预订服务"""

    def __init__(self, db: Session, clock: Clock = None):
        self.db = db
        self._now = clock or utcnow
        self.availability = AvailabilityService(db, clock=self._now)

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        """获取单个预订"""
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def list_bookings(self, user_id: Optional[int] = None, room_id: Optional[int] = None,
                      status: Optional[BookingStatus] = None,
                      limit: int = 50, offset: int = 0) -> List[Booking]:
        """获取预订列表，按入住日期倒序"""
        query = self.db.query(Booking)
        if user_id is not None:
            query = query.filter(Booking.user_id == user_id)
        if room_id is not None:
            query = query.filter(Booking.room_id == room_id)
        if status:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.start_date.desc()).offset(offset).limit(limit).all()

    def create_booking(self, user_id: int, room_id: int,
                       start: datetime, end: datetime) -> Booking:
        """创建预订"""
        start, end = normalize_interval(start, end, self._now())

        with room_locks.hold(room_id):
            with transaction(self.db):
                room = self.db.query(Room).filter(Room.id == room_id).with_for_update().first()
                if not room:
                    raise NotFoundError("房间不存在")
                if room.status != RoomStatus.AVAILABLE:
                    raise ConflictError(f"房间 {room.number} 当前不可预订 ({room.status.value})")

                if not self.availability.is_room_available(room_id, start, end):
                    logger.warning(
                        f"Booking rejected: room {room.number} already booked in [{start}, {end})"
                    )
                    raise ConflictError(f"房间 {room.number} 在该时段已被预订")

                nights = calculate_nights(start, end)
                total_price = Decimal(room.price_per_night) * nights

                booking = Booking(
                    room_id=room_id,
                    user_id=user_id,
                    start_date=start,
                    end_date=end,
                    total_price=total_price,
                    status=BookingStatus.CONFIRMED,
                )
                self.db.add(booking)
                self.db.flush()

        self.db.refresh(booking)
        logger.info(
            f"Booking {booking.id} created: room {room_id}, user {user_id}, "
            f"{nights} night(s), total {total_price}"
        )
        return booking

    def _load_for_update(self, booking_id: int) -> Booking:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).with_for_update().first()
        if not booking:
            raise NotFoundError("预订不存在")
        return booking

    def cancel_booking(self, booking_id: int) -> Booking:
        """取消预订：仅限已确认且尚未开始的预订"""
        with transaction(self.db):
            booking = self._load_for_update(booking_id)
            BOOKING_STATE_MACHINE.validate_transition(booking.status, BookingStatus.CANCELLED)
            if booking.start_date <= self._now():
                raise ValidationError("预订已开始，无法取消")
            booking.status = BookingStatus.CANCELLED

        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} cancelled")
        return booking

    def complete_booking(self, booking_id: int) -> Booking:
        """完成预订：入住开始后才能标记完成"""
        with transaction(self.db):
            booking = self._load_for_update(booking_id)
            BOOKING_STATE_MACHINE.validate_transition(booking.status, BookingStatus.COMPLETED)
            if booking.start_date > self._now():
                raise ValidationError("预订尚未开始，无法完成")
            booking.status = BookingStatus.COMPLETED

        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} completed")
        return booking
