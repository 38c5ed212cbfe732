# Domain state machines
from hotelops.domain.state_machine import (
    StateMachine, StateTransition,
    BOOKING_STATE_MACHINE, FOOD_ORDER_STATE_MACHINE, PURCHASE_ORDER_STATE_MACHINE
)

__all__ = [
    'StateMachine', 'StateTransition',
    'BOOKING_STATE_MACHINE', 'FOOD_ORDER_STATE_MACHINE', 'PURCHASE_ORDER_STATE_MACHINE'
]
