"""
房间时段冲突检测
只有 confirmed 预订参与冲突判断；区间为 [start, end)，首尾相接不算冲突
"""
from datetime import datetime
from typing import List, Optional, Tuple
import logging

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from hotelops.clock import Clock, utcnow, to_naive_utc
from hotelops.exceptions import ValidationError
from hotelops.models.ontology import Booking, BookingStatus, Room, RoomStatus

logger = logging.getLogger(__name__)


def normalize_interval(start: datetime, end: datetime, now: datetime) -> Tuple[datetime, datetime]:
    """统一为 naive UTC 并校验区间：start < end 且 start 晚于当前时间"""
    start, end = to_naive_utc(start), to_naive_utc(end)
    if start >= end:
        raise ValidationError("开始日期必须早于结束日期")
    if start <= now:
        raise ValidationError("开始日期必须晚于当前时间")
    return start, end


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """两个 [start, end) 区间是否重叠"""
    return start_a < end_b and end_a > start_b


class AvailabilityService:
    """房间可用性服务"""

    def __init__(self, db: Session, clock: Clock = None):
        self.db = db
        self._now = clock or utcnow

    def _conflict_query(self, room_id: int, start: datetime, end: datetime):
        return self.db.query(Booking).filter(
            Booking.room_id == room_id,
            Booking.status == BookingStatus.CONFIRMED,
            and_(Booking.start_date < end, Booking.end_date > start)
        )

    def find_conflicts(self, room_id: int, start: datetime, end: datetime,
                       exclude_booking_id: Optional[int] = None) -> List[Booking]:
        """返回与给定区间冲突的已确认预订"""
        query = self._conflict_query(room_id, to_naive_utc(start), to_naive_utc(end))
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.order_by(Booking.start_date).all()

    def is_room_available(self, room_id: int, start: datetime, end: datetime) -> bool:
        """房间在 [start, end) 内没有任何已确认预订时返回 True"""
        count = self._conflict_query(room_id, to_naive_utc(start), to_naive_utc(end)).count()
        return count == 0

    def list_available_rooms(self, start: datetime, end: datetime,
                             limit: int = 50, offset: int = 0) -> List[Room]:
        """列出指定区间可预订的房间，按房间号排序"""
        start, end = normalize_interval(start, end, self._now())

        busy_room_ids = select(Booking.room_id).where(
            Booking.status == BookingStatus.CONFIRMED,
            Booking.start_date < end,
            Booking.end_date > start
        )
        return self.db.query(Room).filter(
            Room.status == RoomStatus.AVAILABLE,
            Room.id.not_in(busy_room_ids)
        ).order_by(Room.number.asc()).offset(offset).limit(limit).all()
