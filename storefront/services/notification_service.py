import logging
from typing import Optional

from jinja2 import TemplateError

from storefront.config import settings
from storefront.services.email_service import EmailMessage, send_email_with_retry
from storefront.utils.template import render_template

logger = logging.getLogger(__name__)


def send_signup_email(email: str) -> bool:
    html = render_template(
        "emails/signup_succeeded.html",
        email=email,
        store_name=settings.store_name,
    )
    return send_email_with_retry(EmailMessage(email, "Signup succeeded!", html))


def send_password_reset_email(email: str, token: str) -> bool:
    html = render_template(
        "emails/password_reset.html",
        reset_link=f"{settings.base_url}/reset/{token}",
        expires_minutes=settings.reset_token_expire_minutes,
    )
    return send_email_with_retry(EmailMessage(email, "Password reset", html))


def send_payment_failed_email(email: Optional[str], order_id: Optional[int] = None) -> bool:
    """
    Tell the customer an asynchronous payment failed.
    Never raises: the webhook acknowledgement must not depend on it.
    """
    if not email:
        logger.warning(f"No email for failed payment (order {order_id}), skipping")
        return False

    try:
        html = render_template(
            "emails/payment_failed.html",
            email=email,
            order_id=order_id,
            checkout_url=f"{settings.base_url}/checkout",
            store_name=settings.store_name,
        )
    except TemplateError:
        logger.exception(f"Could not render payment failed email for order {order_id}")
        return False

    return send_email_with_retry(
        EmailMessage(email, "Your payment could not be completed", html)
    )
