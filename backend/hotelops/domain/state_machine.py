"""
状态机定义 - 预订 / 餐饮订单 / 采购订单

每个实体的状态是封闭枚举，只允许转换表中列出的边；
终态（final_states）不允许任何转换
"""
from dataclasses import dataclass, field
from typing import List, Optional, Set, Union
from enum import Enum
import logging

from hotelops.exceptions import ConflictError, StateError, ValidationError
from hotelops.models.ontology import BookingStatus, FoodOrderStatus, PurchaseOrderStatus

logger = logging.getLogger(__name__)

StateLike = Union[str, Enum]


def _value(state: StateLike) -> str:
    return state.value if isinstance(state, Enum) else str(state)


@dataclass
class StateTransition:
    """状态转换定义"""
    from_state: str
    to_state: str
    trigger: str


@dataclass
class StateMachine:
    """状态机定义"""
    entity: str
    states: List[str]
    transitions: List[StateTransition]
    initial_state: str
    final_states: Set[str] = field(default_factory=set)

    def get_valid_transitions(self, current_state: StateLike) -> List[StateTransition]:
        """获取当前状态的有效转移"""
        current = _value(current_state)
        return [t for t in self.transitions if t.from_state == current]

    def find_transition(self, from_state: StateLike, to_state: StateLike) -> Optional[StateTransition]:
        source, target = _value(from_state), _value(to_state)
        for t in self.transitions:
            if t.from_state == source and t.to_state == target:
                return t
        return None

    def is_valid_transition(self, from_state: StateLike, to_state: StateLike) -> bool:
        """检查转移是否有效"""
        return self.find_transition(from_state, to_state) is not None

    def is_final(self, state: StateLike) -> bool:
        return _value(state) in self.final_states

    def validate_transition(self, current_state: StateLike, target_state: StateLike) -> StateTransition:
        """
        校验一次状态转换

        Raises:
            ValidationError: 目标状态不属于该实体
            StateError: 当前状态为终态
            ConflictError: 同状态转换或转换表中不存在该边
        """
        current, target = _value(current_state), _value(target_state)

        if target not in self.states:
            raise ValidationError(f"{self.entity} 无效状态: {target}")

        if current in self.final_states:
            raise StateError(f"{self.entity} is in a terminal state: {current}")

        if current == target:
            raise ConflictError(f"{self.entity} 已处于 {current} 状态")

        transition = self.find_transition(current, target)
        if transition is None:
            logger.warning(f"Rejected {self.entity} transition '{current}' → '{target}'")
            raise ConflictError(f"{self.entity} 不允许从 {current} 转换到 {target}")
        return transition


# ============== 预订 ==============

BOOKING_STATE_MACHINE = StateMachine(
    entity="Booking",
    states=[s.value for s in BookingStatus],
    transitions=[
        StateTransition(BookingStatus.CONFIRMED.value, BookingStatus.CANCELLED.value, "cancel"),
        StateTransition(BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value, "complete"),
    ],
    initial_state=BookingStatus.CONFIRMED.value,
    final_states={BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value},
)


# ============== 餐饮订单 ==============

FOOD_ORDER_STATE_MACHINE = StateMachine(
    entity="FoodOrder",
    states=[s.value for s in FoodOrderStatus],
    transitions=[
        StateTransition(FoodOrderStatus.PENDING.value, FoodOrderStatus.PREPARING.value, "prepare"),
        StateTransition(FoodOrderStatus.PREPARING.value, FoodOrderStatus.DELIVERED.value, "deliver"),
        StateTransition(FoodOrderStatus.PENDING.value, FoodOrderStatus.CANCELLED.value, "cancel"),
        StateTransition(FoodOrderStatus.PREPARING.value, FoodOrderStatus.CANCELLED.value, "cancel"),
    ],
    initial_state=FoodOrderStatus.PENDING.value,
    final_states={FoodOrderStatus.DELIVERED.value, FoodOrderStatus.CANCELLED.value},
)


# ============== 采购订单 ==============

PURCHASE_ORDER_STATE_MACHINE = StateMachine(
    entity="PurchaseOrder",
    states=[s.value for s in PurchaseOrderStatus],
    transitions=[
        StateTransition(PurchaseOrderStatus.PENDING.value, PurchaseOrderStatus.APPROVED.value, "approve"),
        StateTransition(PurchaseOrderStatus.PENDING.value, PurchaseOrderStatus.CANCELLED.value, "cancel"),
        StateTransition(PurchaseOrderStatus.APPROVED.value, PurchaseOrderStatus.RECEIVED.value, "receive"),
        StateTransition(PurchaseOrderStatus.APPROVED.value, PurchaseOrderStatus.CANCELLED.value, "cancel"),
    ],
    initial_state=PurchaseOrderStatus.PENDING.value,
    final_states={PurchaseOrderStatus.RECEIVED.value, PurchaseOrderStatus.CANCELLED.value},
)
