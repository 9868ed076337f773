from types import SimpleNamespace

from storefront.config import settings
from storefront.services import email_service
from storefront.services.email_service import EmailMessage, send_email_with_retry
from storefront.services.notification_service import (
    send_password_reset_email,
    send_payment_failed_email,
)


def no_network(*args, **kwargs):
    raise AssertionError("Brevo must not be called")


def brevo_replies(monkeypatch, *status_codes):
    """Patch requests.post to answer with ``status_codes`` in order; returns the sent payloads."""
    replies = [SimpleNamespace(status_code=code, text="reply") for code in status_codes]
    posted = []

    def fake_post(url, json, headers, timeout):
        posted.append(json)
        return replies.pop(0)

    monkeypatch.setattr(settings, "brevo_api_key", "xkeysib-test")
    monkeypatch.setattr(email_service.requests, "post", fake_post)
    monkeypatch.setattr(email_service.time, "sleep", lambda seconds: None)
    return posted


def test_emails_are_skipped_without_api_key(monkeypatch):
    monkeypatch.setattr(settings, "brevo_api_key", "")
    monkeypatch.setattr(email_service.requests, "post", no_network)

    assert send_password_reset_email("buyer@example.com", "abc") is False


def test_reset_email_retries_until_brevo_accepts(monkeypatch):
    posted = brevo_replies(monkeypatch, 500, 201)

    assert send_password_reset_email("buyer@example.com", "abc123") is True

    assert len(posted) == 2
    assert posted[0]["to"] == [{"email": "buyer@example.com"}]
    assert posted[0]["subject"] == "Password reset"
    assert f"{settings.base_url}/reset/abc123" in posted[0]["htmlContent"]


def test_rejected_api_key_is_not_retried(monkeypatch):
    posted = brevo_replies(monkeypatch, 401, 201)

    assert send_email_with_retry(EmailMessage("buyer@example.com", "Hi", "<p>hi</p>")) is False
    assert len(posted) == 1


def test_gives_up_after_max_retries(monkeypatch):
    posted = brevo_replies(monkeypatch, 502, 502, 502)

    assert send_email_with_retry(EmailMessage("buyer@example.com", "Hi", "<p>hi</p>")) is False
    assert len(posted) == 3


def test_invalid_address_is_not_sent(monkeypatch):
    monkeypatch.setattr(settings, "brevo_api_key", "xkeysib-test")
    monkeypatch.setattr(email_service.requests, "post", no_network)

    assert send_email_with_retry(EmailMessage("not-an-email", "Hi", "<p>hi</p>")) is False


def test_payment_failed_email(monkeypatch):
    posted = brevo_replies(monkeypatch, 201)

    assert send_payment_failed_email(None, order_id=3) is False
    assert send_payment_failed_email("buyer@example.com", order_id=3) is True
    assert posted[0]["subject"] == "Your payment could not be completed"
