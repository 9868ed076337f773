import logging
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session

from storefront.exceptions import (
    CheckoutConflictError,
    EmptyCartError,
    SessionNotExpirableError,
    UpstreamError,
)
from storefront.models.user import User
from storefront.services.cart_service import cart_snapshot
from storefront.services.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)


def to_minor_units(price: float) -> int:
    return int(round(price * 100))


def swap_pending_session(
    session: Session,
    user_id: int,
    expected_session_id: Optional[str],
    new_session_id: Optional[str],
    new_items: Optional[List[dict]] = None,
) -> bool:
    """
    Compare-and-swap on User.pending_session_*.

    Writes only if the stored session id still equals ``expected_session_id``
    (None meaning "no pending session"). Returns False when another writer
    got there first.
    """
    stmt = update(User).where(User.id == user_id)

    if expected_session_id is None:
        stmt = stmt.where(User.pending_session_id.is_(None))
    else:
        stmt = stmt.where(User.pending_session_id == expected_session_id)

    stmt = stmt.values(
        pending_session_id=new_session_id,
        pending_session_items=new_items if new_session_id else None,
    )

    result = session.execute(stmt)
    session.commit()
    return result.rowcount == 1


def clear_pending_session(session: Session, user_id: int, expected_session_id: str) -> bool:
    return swap_pending_session(session, user_id, expected_session_id, None)


def line_items_for(snapshot: List[dict]) -> List[dict]:
    return [
        {
            "name": item["title"],
            "description": item["description"],
            "unit_amount": to_minor_units(item["price"]),
            "quantity": item["quantity"],
        }
        for item in snapshot
    ]


def snapshot_total(snapshot: List[dict]) -> float:
    return round(sum(i["price"] * i["quantity"] for i in snapshot), 2)


def _expire_stale_session(gateway: PaymentGateway, session_id: str):
    # best-effort: the stale reference is replaced either way
    try:
        gateway.expire_session(session_id)
    except SessionNotExpirableError:
        logger.info(f"Pending session {session_id} no longer expirable, dropping it")
    except UpstreamError as e:
        logger.warning(f"Could not expire pending session {session_id}: {e.message}")


def begin_checkout(
    session: Session,
    user: User,
    gateway: PaymentGateway,
    base_url: str,
) -> str:
    """
    Start a hosted checkout for the user's cart and return the redirect URL.

    The new PendingSession (gateway session id + frozen cart snapshot) is
    stored on the user before returning, so the webhook can rebuild the
    order from exactly what was charged.
    """
    snapshot = cart_snapshot(session, user.id)
    if not snapshot:
        raise EmptyCartError("Your cart is empty.")

    previous_session_id = user.pending_session_id
    if previous_session_id:
        _expire_stale_session(gateway, previous_session_id)

    base_url = base_url.rstrip("/")
    checkout = gateway.create_session(
        line_items=line_items_for(snapshot),
        customer_email=user.email,
        client_reference_id=str(user.id),
        success_url=f"{base_url}/checkout/success",
        cancel_url=f"{base_url}/checkout/cancel",
    )

    stored = swap_pending_session(
        session, user.id, previous_session_id, checkout.id, snapshot
    )
    if not stored:
        logger.warning(
            f"Pending session of user {user.id} changed during checkout, "
            f"expiring new session {checkout.id}"
        )
        _expire_stale_session(gateway, checkout.id)
        raise CheckoutConflictError("Another checkout is already in progress.")

    session.refresh(user)

    logger.info(
        f"Checkout started for user {user.id}: session {checkout.id}, "
        f"{len(snapshot)} item(s), total {snapshot_total(snapshot)}"
    )
    return checkout.url
