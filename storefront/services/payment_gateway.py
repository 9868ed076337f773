import logging
from dataclasses import dataclass
from typing import Any, Dict, List

import stripe

from storefront.config import settings
from storefront.exceptions import SessionNotExpirableError, UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class GatewaySession:
    id: str
    url: str


class PaymentGateway:
    """Hosted checkout sessions on Stripe."""

    def __init__(self, api_key: str, currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency

    def _line_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        product_data = {"name": item["name"]}
        # stripe rejects empty descriptions
        if item.get("description"):
            product_data["description"] = item["description"]

        return {
            "price_data": {
                "currency": self.currency,
                "unit_amount": item["unit_amount"],
                "product_data": product_data,
            },
            "quantity": item["quantity"],
        }

    def create_session(
        self,
        *,
        line_items: List[Dict[str, Any]],
        customer_email: str,
        client_reference_id: str,
        success_url: str,
        cancel_url: str,
    ) -> GatewaySession:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                mode="payment",
                payment_method_types=["card"],
                line_items=[self._line_item(i) for i in line_items],
                customer_email=customer_email,
                client_reference_id=client_reference_id,
                success_url=success_url,
                cancel_url=cancel_url,
            )
        except stripe.StripeError as e:
            logger.error(f"Checkout session creation failed: {e}")
            raise UpstreamError("Payment provider unavailable, please try again.")

        logger.info(f"Created checkout session {session.id} for user {client_reference_id}")
        return GatewaySession(id=session.id, url=session.url)

    def expire_session(self, session_id: str) -> None:
        try:
            stripe.checkout.Session.expire(session_id, api_key=self.api_key)
        except stripe.InvalidRequestError as e:
            # only `open` sessions can be expired
            raise SessionNotExpirableError(str(e))
        except stripe.StripeError as e:
            raise UpstreamError(f"Could not expire session {session_id}: {e}")

        logger.info(f"Expired checkout session {session_id}")


payment_gateway = PaymentGateway(settings.stripe_secret_key, settings.currency)


def get_payment_gateway() -> PaymentGateway:
    return payment_gateway
