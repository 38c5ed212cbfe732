"""
房间服务 - 本体操作层
管理 Room 对象；房间时段可用性见 AvailabilityService
"""
from datetime import datetime
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from hotelops.clock import Clock, utcnow
from hotelops.database import transaction
from hotelops.exceptions import ConflictError, NotFoundError
from hotelops.locks import room_locks
from hotelops.models.ontology import Booking, Room, RoomStatus
from hotelops.models.schemas import RoomCreate, RoomUpdate
from hotelops.services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)


class RoomService:
    """房间服务"""

    def __init__(self, db: Session, clock: Clock = None):
        self.db = db
        self._now = clock or utcnow

    def get_rooms(self, status: Optional[RoomStatus] = None, floor: Optional[int] = None,
                  limit: int = 50, offset: int = 0) -> List[Room]:
        """获取房间列表"""
        query = self.db.query(Room)
        if status:
            query = query.filter(Room.status == status)
        if floor is not None:
            query = query.filter(Room.floor == floor)
        return query.order_by(Room.number).offset(offset).limit(limit).all()

    def get_room(self, room_id: int) -> Optional[Room]:
        """获取单个房间"""
        return self.db.query(Room).filter(Room.id == room_id).first()

    def get_room_by_number(self, number: str) -> Optional[Room]:
        """根据房间号获取房间"""
        return self.db.query(Room).filter(Room.number == number).first()

    def create_room(self, data: RoomCreate) -> Room:
        """创建房间"""
        if self.get_room_by_number(data.number):
            raise ConflictError(f"房间号 {data.number} 已存在")

        room = Room(**data.model_dump())
        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        logger.info(f"Room {room.number} created")
        return room

    def update_room(self, room_id: int, data: RoomUpdate) -> Room:
        """更新房间信息"""
        room = self.get_room(room_id)
        if not room:
            raise NotFoundError("房间不存在")

        update_data = data.model_dump(exclude_unset=True)
        new_number = update_data.get("number")
        if new_number and new_number != room.number and self.get_room_by_number(new_number):
            raise ConflictError(f"房间号 {new_number} 已存在")

        for key, value in update_data.items():
            setattr(room, key, value)

        self.db.commit()
        self.db.refresh(room)
        return room

    def update_room_status(self, room_id: int, status: RoomStatus) -> Room:
        """更新房间状态"""
        room = self.get_room(room_id)
        if not room:
            raise NotFoundError("房间不存在")

        old_status = room.status
        room.status = RoomStatus(status)
        self.db.commit()
        self.db.refresh(room)
        logger.info(f"Room {room.number} status {old_status.value} → {room.status.value}")
        return room

    def delete_room(self, room_id: int) -> bool:
        """删除房间，存在任何预订记录时拒绝；与创建预订共用房间锁"""
        with room_locks.hold(room_id):
            with transaction(self.db):
                room = self.db.query(Room).filter(Room.id == room_id).with_for_update().first()
                if not room:
                    raise NotFoundError("房间不存在")

                if self.db.query(Booking).filter(Booking.room_id == room_id).count() > 0:
                    raise ConflictError("房间存在预订记录，无法删除")

                self.db.delete(room)

        logger.info(f"Room {room_id} deleted")
        return True

    def list_available_rooms(self, start: datetime, end: datetime,
                             limit: int = 50, offset: int = 0) -> List[Room]:
        """指定时段内可预订的房间"""
        return AvailabilityService(self.db, clock=self._now).list_available_rooms(start, end, limit, offset)
