from typing import List, Optional

from sqlmodel import Session, select

from storefront.models.order import Order
from storefront.models.order_event import OrderEvent


def record_order_event(
    session: Session,
    order: Order,
    event_type: str,
    *,
    from_status: Optional[str] = None,
    external_event_id: Optional[str] = None,
    meta: Optional[dict] = None,
) -> OrderEvent:
    """
    Append a timeline row for ``order`` in its current status.
    Added to the session only; the caller commits with the state change.
    """
    event = OrderEvent(
        order_id=order.id,
        event_type=event_type,
        from_status=from_status,
        to_status=order.status,
        external_event_id=external_event_id,
        meta=meta,
    )
    session.add(event)
    return event


def get_order_timeline(session: Session, order_id: int) -> List[OrderEvent]:
    return session.exec(
        select(OrderEvent)
        .where(OrderEvent.order_id == order_id)
        .order_by(OrderEvent.id)
    ).all()
