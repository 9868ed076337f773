import hashlib
import hmac
import json
import time

from storefront.utils.token import create_access_token

WEBHOOK_SECRET = "whsec_test_secret"


def auth_headers(user):
    token = create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp=None) -> str:
    """Stripe-Signature header: t=<ts>,v1=<hmac_sha256(secret, "<ts>.<payload>")>."""
    ts = int(time.time()) if timestamp is None else timestamp
    signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={signature}"


def session_event(event_type, session_id, user_id, payment_status="paid", event_id="evt_test_1"):
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "client_reference_id": str(user_id),
                "customer_email": "buyer@example.com",
                "payment_status": payment_status,
            }
        },
    }).encode("utf-8")


def post_event(client, payload: bytes, signature=None):
    return client.post(
        "/webhooks/stripe",
        content=payload,
        headers={
            "Content-Type": "application/json",
            "Stripe-Signature": signature if signature is not None else sign_payload(payload),
        },
    )
