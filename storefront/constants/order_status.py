from enum import Enum


class OrderStatus(str, Enum):
    awaiting_payment = "awaiting_payment"
    payment_received = "payment_received"


ALLOWED_TRANSITIONS = {
    OrderStatus.awaiting_payment: [OrderStatus.payment_received],
    OrderStatus.payment_received: [],
}


def can_transition(current: str, target: str) -> bool:
    return OrderStatus(target) in ALLOWED_TRANSITIONS.get(OrderStatus(current), [])
