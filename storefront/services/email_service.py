import logging
import random
import re
import time
from dataclasses import dataclass

import requests

from storefront.config import settings

logger = logging.getLogger(__name__)

BREVO_API_URL = "https://api.brevo.com/v3/smtp/email"
EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

# Brevo answers these for a bad or missing api-key; retrying won't help
AUTH_FAILURES = {401, 403}


@dataclass
class EmailMessage:
    to: str
    subject: str
    html: str


class EmailDeliveryError(Exception):
    def __init__(self, message: str, retryable: bool = True):
        super().__init__(message)
        self.retryable = retryable


def is_valid_email(email) -> bool:
    return bool(email) and EMAIL_RE.fullmatch(email) is not None


def _brevo_payload(message: EmailMessage) -> dict:
    return {
        "sender": {"email": settings.mail_from, "name": settings.store_name},
        "to": [{"email": message.to}],
        "subject": message.subject,
        "htmlContent": message.html,
    }


def send_email(message: EmailMessage) -> None:
    """Single delivery attempt through Brevo. Raises EmailDeliveryError."""
    try:
        response = requests.post(
            BREVO_API_URL,
            json=_brevo_payload(message),
            headers={"api-key": settings.brevo_api_key, "accept": "application/json"},
            timeout=10,
        )
    except requests.RequestException as e:
        raise EmailDeliveryError(f"Brevo unreachable: {e}")

    if response.status_code >= 400:
        raise EmailDeliveryError(
            f"Brevo rejected email ({response.status_code}): {response.text}",
            retryable=response.status_code not in AUTH_FAILURES,
        )


def send_email_with_retry(message: EmailMessage, max_retries: int = 3) -> bool:
    if not is_valid_email(message.to):
        logger.warning(f"Invalid email address: {message.to!r}")
        return False

    if not settings.brevo_api_key:
        logger.warning(f"BREVO_API_KEY not set, email to {message.to} skipped")
        return False

    for attempt in range(1, max_retries + 1):
        try:
            send_email(message)
        except EmailDeliveryError as e:
            logger.warning(f"Email to {message.to} failed (attempt {attempt}): {e}")
            if not e.retryable:
                break
            if attempt < max_retries:
                time.sleep(2 ** attempt + random.random())
            continue

        logger.info(f"Email '{message.subject}' sent to {message.to}")
        return True

    logger.error(f"Email to {message.to} permanently failed")
    return False
