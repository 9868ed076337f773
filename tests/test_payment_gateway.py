from types import SimpleNamespace

import pytest
import stripe

from storefront.exceptions import SessionNotExpirableError, UpstreamError
from storefront.services.payment_gateway import PaymentGateway

LINE_ITEMS = [
    {"name": "Lamp", "description": "Desk lamp", "unit_amount": 1250, "quantity": 2},
    {"name": "Bulb", "description": "", "unit_amount": 300, "quantity": 1},
]


def create_kwargs(**overrides):
    kwargs = dict(
        line_items=LINE_ITEMS,
        customer_email="buyer@example.com",
        client_reference_id="1",
        success_url="http://shop.test/checkout/success",
        cancel_url="http://shop.test/checkout/cancel",
    )
    kwargs.update(overrides)
    return kwargs


def test_create_session_maps_line_items(monkeypatch):
    calls = []

    def fake_create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(id="cs_live_1", url="https://checkout.stripe.com/c/pay/cs_live_1")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)
    gateway = PaymentGateway("sk_test_123", currency="eur")

    session = gateway.create_session(**create_kwargs())

    assert session.id == "cs_live_1"
    assert session.url.endswith("cs_live_1")

    [call] = calls
    assert call["api_key"] == "sk_test_123"
    assert call["mode"] == "payment"
    assert call["client_reference_id"] == "1"
    assert call["line_items"] == [
        {
            "price_data": {
                "currency": "eur",
                "unit_amount": 1250,
                "product_data": {"name": "Lamp", "description": "Desk lamp"},
            },
            "quantity": 2,
        },
        {
            "price_data": {
                "currency": "eur",
                "unit_amount": 300,
                "product_data": {"name": "Bulb"},
            },
            "quantity": 1,
        },
    ]


def test_create_session_provider_failure(monkeypatch):
    def fake_create(**kwargs):
        raise stripe.APIConnectionError("connection refused")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)

    with pytest.raises(UpstreamError):
        PaymentGateway("sk_test_123").create_session(**create_kwargs())


def test_expire_completed_session_is_not_expirable(monkeypatch):
    def fake_expire(session_id, **kwargs):
        raise stripe.InvalidRequestError("Only open sessions can be expired", None)

    monkeypatch.setattr(stripe.checkout.Session, "expire", fake_expire)

    with pytest.raises(SessionNotExpirableError):
        PaymentGateway("sk_test_123").expire_session("cs_done")


def test_expire_network_failure_is_upstream_error(monkeypatch):
    def fake_expire(session_id, **kwargs):
        raise stripe.APIConnectionError("timeout")

    monkeypatch.setattr(stripe.checkout.Session, "expire", fake_expire)

    with pytest.raises(UpstreamError) as excinfo:
        PaymentGateway("sk_test_123").expire_session("cs_open")

    assert not isinstance(excinfo.value, SessionNotExpirableError)
