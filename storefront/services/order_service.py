import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from storefront.constants.order_status import OrderStatus, can_transition
from storefront.exceptions import NotFoundError, PersistenceError
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.user import User
from storefront.schemas.webhook_events import CheckoutSessionRef
from storefront.services.cart_service import cart_snapshot, clear_cart
from storefront.services.checkout_service import clear_pending_session
from storefront.services.order_event_service import record_order_event
from storefront.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


def get_order_by_session(session: Session, external_session_id: str) -> Optional[Order]:
    return session.exec(
        select(Order).where(Order.external_session_id == external_session_id)
    ).first()


def get_orders_for_user(session: Session, user_id: int) -> List[Order]:
    return session.exec(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all()


def _resolve_user(session: Session, client_reference_id: Optional[str]) -> User:
    user = None
    if client_reference_id and client_reference_id.isdigit():
        user = session.get(User, int(client_reference_id))

    if user is None:
        raise NotFoundError(f"No user for correlation token {client_reference_id!r}")
    return user


def _line_items_for(session: Session, user: User, external_session_id: str) -> List[dict]:
    if user.pending_session_id == external_session_id and user.pending_session_items:
        return user.pending_session_items

    logger.warning(
        f"No pending snapshot for session {external_session_id} "
        f"(user {user.id}), falling back to live cart"
    )
    return cart_snapshot(session, user.id)


def create_order(
    session: Session,
    session_ref: CheckoutSessionRef,
    event_id: Optional[str] = None,
) -> Order:
    """
    Materialize the order for a completed checkout session.

    Idempotent per external session id: a redelivered event returns the
    order created the first time.
    """
    existing = get_order_by_session(session, session_ref.session_id)
    if existing:
        logger.info(f"Order {existing.id} already exists for session {session_ref.session_id}")
        return existing

    user = _resolve_user(session, session_ref.client_reference_id)
    line_items = _line_items_for(session, user, session_ref.session_id)

    if not line_items:
        raise NotFoundError(f"No line items to record for session {session_ref.session_id}")

    order = Order(
        user_id=user.id,
        user_email=user.email,
        external_session_id=session_ref.session_id,
        status=OrderStatus.awaiting_payment.value,
    )
    order.items = [
        OrderItem(
            product_id=item.get("product_id"),
            title=item["title"],
            description=item.get("description") or "",
            price=item["price"],
            quantity=item["quantity"],
        )
        for item in line_items
    ]
    session.add(order)

    try:
        session.flush()
    except IntegrityError:
        # unique external_session_id: a concurrent delivery won the race
        session.rollback()
        existing = get_order_by_session(session, session_ref.session_id)
        if existing:
            return existing
        raise PersistenceError(f"Could not store order for session {session_ref.session_id}")

    record_order_event(
        session,
        order,
        "created",
        external_event_id=event_id,
        meta={"external_session_id": session_ref.session_id, "items": len(order.items)},
    )

    clear_cart(session, user.id, commit=False)
    session.commit()

    clear_pending_session(session, user.id, session_ref.session_id)

    session.refresh(order)
    logger.info(f"Created order {order.id} for user {user.id} (session {session_ref.session_id})")
    return order


def fulfill_order(
    session: Session,
    session_ref: CheckoutSessionRef,
    event_id: Optional[str] = None,
) -> None:
    order = get_order_by_session(session, session_ref.session_id)

    if order is None:
        logger.warning(f"No order yet for session {session_ref.session_id}, nothing to fulfill")
        return

    if not can_transition(order.status, OrderStatus.payment_received.value):
        logger.info(f"Order {order.id} already {order.status}, skipping fulfillment")
        return

    previous_status = order.status
    order.status = OrderStatus.payment_received.value
    order.updated_at = utcnow()
    session.add(order)

    record_order_event(
        session,
        order,
        "payment_received",
        from_status=previous_status,
        external_event_id=event_id,
    )

    session.commit()
    logger.info(f"Order {order.id} marked {order.status}")
