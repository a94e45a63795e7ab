import json
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from storefront.data.models import OrderModel, PaymentModel
from storefront.domain.errors import Internal, InvalidInput, NotFound
from storefront.domain.schemas import PaymentIn, ProductSnapshot
from storefront.services.payment_service import PaymentService
from storefront.utils.money import to_minor_units


@pytest.fixture
def order(cart_service, order_service, make_product):
    p1 = make_product("499.99")
    cart_service.add_item("pay", ProductSnapshot(id=p1.id, price=p1.price))
    return order_service.place_order("pay")


def test_record_completed_payment_links_order(db, payment_service, order):
    payment = payment_service.record_payment(
        PaymentIn(order_id=order.id, payment_method="card", status="completed", amount=order.total, payment_id="pay_1")
    )

    assert payment.status == "completed"
    db.expire_all()
    assert db.get(OrderModel, order.id).payment_id == payment.id


def test_second_completed_payment_rejected(payment_service, order):
    data = PaymentIn(order_id=order.id, payment_method="card", status="completed", amount=order.total)
    payment_service.record_payment(data)

    with pytest.raises(InvalidInput):
        payment_service.record_payment(data)


def test_concurrent_completed_payment_rejected_by_index(db, payment_service, order, monkeypatch):
    data = PaymentIn(order_id=order.id, payment_method="card", status="completed", amount=order.total)
    payment_service.record_payment(data)
    # the other request read the order before this one committed
    monkeypatch.setattr(payment_service.repo, "has_completed", lambda order_id: False)

    with pytest.raises(InvalidInput):
        payment_service.record_payment(data)

    assert payment_service.list_payments(status="completed").total == 1


def test_completed_payment_unique_per_order(db, order):
    for _ in range(2):
        db.add(PaymentModel(company_id=1, order_id=order.id, payment_method="card", status="completed", amount=order.total))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_failed_attempts_are_allowed(payment_service, order):
    for _ in range(2):
        payment_service.record_payment(
            PaymentIn(order_id=order.id, payment_method="wallet", status="failed", amount=order.total)
        )

    page = payment_service.list_payments(order_id=order.id)
    # the pending payment from checkout plus two failures
    assert page.total == 3
    assert payment_service.list_payments(status="failed").total == 2


def test_record_for_unknown_order(payment_service):
    with pytest.raises(NotFound):
        payment_service.record_payment(PaymentIn(order_id=uuid4(), payment_method="cod", amount=Decimal("1")))


def test_gateway_order(db, payment_service, gateway, order):
    result = payment_service.create_gateway_order(order.id)

    assert gateway.calls == [{"amount": 49999, "currency": "INR", "receipt": order.order_number}]
    assert result.payment.status == "processing"
    assert result.payment.payment_id == "order_gw_1"
    assert result.gateway_order["amount"] == 49999
    stored = db.get(PaymentModel, result.payment.id)
    assert json.loads(stored.gateway_response)["id"] == "order_gw_1"


def test_gateway_failure_is_internal(db, failing_gateway, order):
    service = PaymentService(db, gateway=failing_gateway)

    with pytest.raises(Internal):
        service.create_gateway_order(order.id)


def test_minor_units():
    assert to_minor_units(Decimal("499.99")) == 49999
    assert to_minor_units(Decimal("10")) == 1000
    assert to_minor_units(Decimal("0.005")) == 1
