import os
import tempfile

TEST_DIR = tempfile.mkdtemp(prefix="storefront-tests-")

# settings are read at import time
os.environ["ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["BREVO_API_KEY"] = ""
os.environ["INVOICE_DIR"] = os.path.join(TEST_DIR, "invoices")
os.environ["UPLOAD_DIR"] = os.path.join(TEST_DIR, "images")
os.environ["ITEMS_PER_PAGE"] = "2"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import storefront.models  # noqa: F401
from storefront.database import get_session
from storefront.main import app
from storefront.models.product import Product
from storefront.models.user import User
from storefront.services.payment_gateway import GatewaySession, get_payment_gateway
from storefront.utils.hash import hash_password


class FakeGateway:
    """Records calls instead of talking to Stripe."""

    def __init__(self):
        self.created = []
        self.expired = []
        self.expire_error = None

    def create_session(self, **kwargs):
        session_id = f"cs_test_{len(self.created) + 1}"
        self.created.append(kwargs)
        return GatewaySession(id=session_id, url=f"https://checkout.stripe.test/c/pay/{session_id}")

    def expire_session(self, session_id):
        self.expired.append(session_id)
        if self.expire_error is not None:
            raise self.expire_error


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(session, gateway):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    def _make_user(email="buyer@example.com", password="secret123"):
        user = User(email=email, password=hash_password(password))
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_product(session, make_user):
    owner = {}

    def _make_product(title="Product A", price=10.0, description="A fine product", user=None):
        if user is None:
            if "admin" not in owner:
                owner["admin"] = make_user(email="admin@example.com")
            user = owner["admin"]

        product = Product(
            title=title,
            price=price,
            description=description,
            image_url="images/placeholder.png",
            user_id=user.id,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product
    return _make_product
