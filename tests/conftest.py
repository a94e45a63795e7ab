import os

# must be set before storefront is imported: the engine is built at import time
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import pytest
import requests
from fastapi.testclient import TestClient

from storefront.api.deps import get_lock_service, get_payment_gateway
from storefront.celery_worker import celery_app
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import (
    CouponModel,
    ProductModel,
    ShippingAddressModel,
    TaxModel,
    UserModel,
)
from storefront.main import app
from storefront.services import mailer
from storefront.services.cart_service import CartService
from storefront.services.coupon_service import CouponService
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService
from storefront.services.payment_service import PaymentService
from storefront.services.tax_service import TaxService

COMPANY = 1


class InMemoryLockService(LockService):
    """Same contract as the redis lock, backed by a dict."""

    def __init__(self, ttl: int = 30):
        self.ttl = ttl
        self.held = {}

    def acquire(self, key: str, token: str) -> bool:
        if key in self.held:
            return False
        self.held[key] = token
        return True

    def release(self, key: str, token: str) -> bool:
        if self.held.get(key) != token:
            return False
        del self.held[key]
        return True


class FakeGateway:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def create_order(self, amount: int, currency: str, receipt: str) -> dict:
        self.calls.append({"amount": amount, "currency": currency, "receipt": receipt})
        if self.fail:
            raise requests.ConnectionError("gateway unreachable")
        return {"id": f"order_gw_{len(self.calls)}", "amount": amount, "currency": currency, "receipt": receipt, "status": "created"}


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(autouse=True)
def eager_celery():
    celery_app.conf.task_always_eager = True
    celery_app.conf.task_eager_propagates = True
    yield


@pytest.fixture(autouse=True)
def sent_mail(monkeypatch):
    outbox = []
    monkeypatch.setattr(mailer, "send_mail", lambda msg: outbox.append(msg))
    return outbox


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lock_service():
    return InMemoryLockService()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def failing_gateway():
    return FakeGateway(fail=True)


@pytest.fixture
def cart_service(db, lock_service):
    return CartService(db, lock_service, COMPANY)


@pytest.fixture
def coupon_service(db, lock_service):
    return CouponService(db, lock_service, COMPANY)


@pytest.fixture
def order_service(db, lock_service):
    return OrderService(db, lock_service, COMPANY)


@pytest.fixture
def tax_service(db):
    return TaxService(db, COMPANY)


@pytest.fixture
def payment_service(db, gateway):
    return PaymentService(db, gateway=gateway, company_id=COMPANY)


@pytest.fixture
def client(lock_service, gateway):
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------- factories ----------
@pytest.fixture
def make_product(db):
    def _make(price="100.00", name="Product", company_id=COMPANY):
        product = ProductModel(company_id=company_id, name=name, price=Decimal(price))
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def make_tax(db):
    def _make(rate="18", name="GST", status="active", company_id=COMPANY):
        tax = TaxModel(company_id=company_id, name=name, rate=Decimal(rate), status=status)
        db.add(tax)
        db.commit()
        return tax

    return _make


@pytest.fixture
def make_coupon(db):
    def _make(code="OFF10", discount_type="fixed", discount="10", status="active", **kw):
        coupon = CouponModel(
            company_id=kw.pop("company_id", COMPANY),
            code=code,
            discount_type=discount_type,
            discount=Decimal(discount),
            status=status,
            **kw,
        )
        db.add(coupon)
        db.commit()
        return coupon

    return _make


@pytest.fixture
def customer(db):
    user = UserModel(name="Asha Rao", email="asha@example.com", phone="+91 98450 00000")
    db.add(user)
    db.flush()
    address = ShippingAddressModel(
        user_id=user.id,
        name="Asha Rao",
        phone="+91 98450 00000",
        address="12 MG Road",
        landmark="Near Metro",
        house_number="4B",
        city="Bengaluru",
        state="Karnataka",
        zip="560001",
        country="India",
        is_default=True,
    )
    db.add(address)
    db.commit()
    return user, address
