from typing import Optional, Union

from pydantic import BaseModel


class CheckoutSessionRef(BaseModel):
    session_id: str
    client_reference_id: Optional[str] = None
    customer_email: Optional[str] = None
    payment_status: Optional[str] = None

    @classmethod
    def from_stripe(cls, obj: dict) -> "CheckoutSessionRef":
        details = obj.get("customer_details") or {}
        return cls(
            session_id=obj["id"],
            client_reference_id=obj.get("client_reference_id"),
            customer_email=obj.get("customer_email") or details.get("email"),
            payment_status=obj.get("payment_status"),
        )

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"


class SessionCompleted(BaseModel):
    event_id: str
    session: CheckoutSessionRef


class AsyncPaymentSucceeded(BaseModel):
    event_id: str
    session: CheckoutSessionRef


class AsyncPaymentFailed(BaseModel):
    event_id: str
    session: CheckoutSessionRef


class UnhandledEvent(BaseModel):
    event_id: str
    event_type: str


WebhookEvent = Union[SessionCompleted, AsyncPaymentSucceeded, AsyncPaymentFailed, UnhandledEvent]

SESSION_EVENTS = {
    "checkout.session.completed": SessionCompleted,
    "checkout.session.async_payment_succeeded": AsyncPaymentSucceeded,
    "checkout.session.async_payment_failed": AsyncPaymentFailed,
}


def parse_event(event: dict) -> WebhookEvent:
    event_type = event.get("type") or ""
    event_id = event.get("id") or ""

    model = SESSION_EVENTS.get(event_type)
    if model is None:
        return UnhandledEvent(event_id=event_id, event_type=event_type)

    obj = (event.get("data") or {}).get("object") or {}
    return model(event_id=event_id, session=CheckoutSessionRef.from_stripe(obj))
