import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import stripe
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from storefront.config import settings
from storefront.exceptions import WebhookSignatureError
from storefront.models.user import User
from storefront.schemas.webhook_events import (
    AsyncPaymentFailed,
    AsyncPaymentSucceeded,
    SessionCompleted,
    UnhandledEvent,
    WebhookEvent,
    parse_event,
)
from storefront.services.notification_service import send_payment_failed_email
from storefront.services.order_service import (
    create_order,
    fulfill_order,
    get_order_by_session,
)

logger = logging.getLogger(__name__)


@dataclass
class WebhookAck:
    status_code: int
    body: dict = field(default_factory=dict)
    # (func, *args) to run once the response has been sent
    tasks: List[tuple] = field(default_factory=list)


def verify_event(payload: bytes, signature_header: Optional[str]) -> dict:
    """Check the Stripe-Signature header and return the decoded event."""
    if not signature_header:
        raise WebhookSignatureError("Missing Stripe-Signature header")

    try:
        text = payload.decode("utf-8")
        stripe.WebhookSignature.verify_header(
            text,
            signature_header,
            settings.stripe_webhook_secret,
            tolerance=stripe.Webhook.DEFAULT_TOLERANCE,
        )
        return json.loads(text)
    except stripe.SignatureVerificationError as e:
        raise WebhookSignatureError(f"Invalid webhook signature: {e}")
    except ValueError as e:
        # bad utf-8 or json
        raise WebhookSignatureError(f"Invalid webhook payload: {e}")


def deliver_payment_failed_notice(email: Optional[str], order_id: Optional[int]) -> None:
    """Runs after the ack is sent; delivery problems are logged, never raised."""
    try:
        send_payment_failed_email(email, order_id)
    except Exception:
        logger.exception(f"Payment failed notice for order {order_id} could not be sent")


def notify_payment_failed(session: Session, event: AsyncPaymentFailed) -> Optional[tuple]:
    """Resolve who to tell about a failed payment.

    Returns the deferred delivery as ``(func, *args)`` or None when the
    recipient could not be looked up.
    """
    try:
        order = get_order_by_session(session, event.session.session_id)

        email = event.session.customer_email or (order.user_email if order else None)
        reference = event.session.client_reference_id
        if not email and reference and reference.isdigit():
            user = session.get(User, int(reference))
            email = user.email if user else None
    except Exception:
        logger.exception(f"Could not resolve recipient for failed payment {event.session.session_id}")
        session.rollback()
        return None

    return (deliver_payment_failed_notice, email, order.id if order else None)


def dispatch_event(session: Session, event: WebhookEvent, tasks: Optional[List[tuple]] = None) -> str:
    """Apply one event. Work that must not delay the ack is appended to ``tasks``."""
    if tasks is None:
        tasks = []

    if isinstance(event, SessionCompleted):
        create_order(session, event.session, event.event_id)
        if event.session.is_paid:
            fulfill_order(session, event.session, event.event_id)
        return "order_created"

    if isinstance(event, AsyncPaymentSucceeded):
        fulfill_order(session, event.session, event.event_id)
        return "order_fulfilled"

    if isinstance(event, AsyncPaymentFailed):
        task = notify_payment_failed(session, event)
        if task is not None:
            tasks.append(task)
        return "customer_notified"

    logger.info(f"Ignoring webhook event {event.event_id} of type {event.event_type!r}")
    return "ignored"


def handle_event(session: Session, payload: bytes, signature_header: Optional[str]) -> WebhookAck:
    try:
        raw_event = verify_event(payload, signature_header)
        event = parse_event(raw_event)
    except WebhookSignatureError as e:
        logger.warning(e.message)
        return WebhookAck(400, {"received": False, "error": e.message})
    except (KeyError, TypeError, AttributeError, PydanticValidationError) as e:
        logger.warning(f"Malformed webhook event: {e}")
        return WebhookAck(400, {"received": False, "error": "Malformed event"})

    kind = event.event_type if isinstance(event, UnhandledEvent) else event.__class__.__name__
    logger.info(f"Webhook event {event.event_id} received ({kind})")

    tasks = []
    try:
        outcome = dispatch_event(session, event, tasks)
    except Exception:
        # the provider retries on 5xx
        logger.exception(f"Webhook event {event.event_id} failed")
        session.rollback()
        return WebhookAck(500, {"received": False, "error": "Processing failed"})

    return WebhookAck(200, {"received": True, "result": outcome}, tasks)
