from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from storefront.data.models import CartModel, OrderModel, PaymentModel, SequenceModel
from storefront.domain.enums import CartLookup
from storefront.domain.errors import Internal, InvalidInput, NotFound
from storefront.domain.schemas import CheckoutDataIn, ProductSnapshot

SESSION = "sess-order"


def fill_cart(cart_service, session_id, *lines):
    rows = []
    for product, quantity in lines:
        rows = cart_service.add_item(session_id, ProductSnapshot(id=product.id, price=product.price), quantity=quantity)
    return rows


@pytest.fixture
def checkout_ready(db, cart_service, make_product, make_tax, make_coupon, coupon_service, customer):
    user, address = customer
    make_tax("18")
    make_coupon("OFF10", "fixed", "10")
    p1, p2 = make_product("100", name="Tee"), make_product("45.50", name="Cap")
    fill_cart(cart_service, SESSION, (p1, 2), (p2, 1))
    coupon_service.apply_coupon(SESSION, "OFF10")
    cart_service.save_checkout_data(
        SESSION,
        CheckoutDataIn(user_id=user.id, shipping_address_id=address.id, payment_method="card"),
    )
    return p1, p2


def test_scenario_e_first_order(db, cart_service, order_service, make_product):
    p1 = make_product("500")
    fill_cart(cart_service, SESSION, (p1, 2))
    cart = db.query(CartModel).one()
    cart.delivery_fee = Decimal("10")
    cart.total = Decimal("1010")
    db.commit()

    order = order_service.place_order(SESSION)

    assert order.order_number == "000001"
    assert order.subtotal == Decimal("1000.00")
    assert order.tax == Decimal("0.00")
    assert order.discount == Decimal("0.00")
    assert order.delivery_fee == Decimal("10.00")
    assert order.total == Decimal("1010.00")
    assert order.status == "Ordered"

    detail = order_service.find_order(order.id)
    assert len(detail.items) == 1
    assert detail.items[0].quantity == 2
    assert detail.items[0].total_price == Decimal("1000.00")


def test_round_trip_mirrors_cart(db, cart_service, order_service, checkout_ready):
    before = cart_service.find_cart(CartLookup.SESSION, SESSION)

    order = order_service.place_order(SESSION)
    detail = order_service.find_order(str(order.id))

    head = before[0]
    assert (detail.subtotal, detail.tax, detail.discount, detail.total) == (head.subtotal, head.tax, head.discount, head.total)
    assert [(i.product_id, i.unit_price, i.quantity) for i in detail.items] == [
        (r.item.product_id, r.item.unit_price, r.item.quantity) for r in before
    ]
    assert detail.user.name == "Asha Rao"
    assert detail.address.city == "Bengaluru"
    assert detail.items[0].product.name == "Tee"


def test_checkout_closes_cart(db, cart_service, order_service, checkout_ready, make_product):
    order = order_service.place_order(SESSION)

    cart = db.query(CartModel).one()
    assert cart.order_id == order.id
    assert cart.status == "Ordered"
    assert cart_service.find_cart(CartLookup.SESSION, SESSION) == []
    assert cart_service.find_cart(CartLookup.ORDER, str(order.id))[0].cart_id == cart.id

    # the session starts over with a fresh cart
    p3 = make_product("5")
    rows = fill_cart(cart_service, SESSION, (p3, 1))
    assert rows[0].cart_id != cart.id
    assert rows[0].total == Decimal("5.90")


def test_checkout_creates_pending_payment(db, order_service, checkout_ready):
    order = order_service.place_order(SESSION)

    payment = db.query(PaymentModel).one()
    assert payment.id == order.payment_id
    assert payment.status == "pending"
    assert payment.amount == order.total
    assert payment.payment_method == "card"


def test_order_numbers_are_sequential(db, cart_service, order_service, make_product):
    p1 = make_product("10")
    numbers = []
    for n in range(3):
        fill_cart(cart_service, f"s{n}", (p1, 1))
        numbers.append(order_service.place_order(f"s{n}").order_number)

    assert numbers == ["000001", "000002", "000003"]
    assert db.query(SequenceModel.value).filter(SequenceModel.name == "order_number").scalar() == 3


def test_sequence_seeded_from_existing_orders(db, cart_service, order_service, make_product):
    db.add(
        OrderModel(
            company_id=1,
            order_number="000041",
            subtotal=0,
            discount=0,
            tax=0,
            delivery_fee=0,
            total=0,
            payment_method="cod",
        )
    )
    db.commit()
    fill_cart(cart_service, SESSION, (make_product("10"), 1))

    assert order_service.place_order(SESSION).order_number == "000042"


def test_checkout_without_cart(order_service):
    with pytest.raises(NotFound):
        order_service.place_order("nobody")


def test_checkout_invoice_email_sent(order_service, checkout_ready, sent_mail):
    order = order_service.place_order(SESSION)

    assert len(sent_mail) == 1
    msg = sent_mail[0]
    assert msg["To"] == "asha@example.com"
    assert msg["Subject"] == "Order placed successfully"
    attachment = next(msg.iter_attachments())
    assert attachment.get_filename() == "invoice.pdf"
    assert attachment.get_content_type() == "application/pdf"
    assert attachment.get_content().startswith(b"%PDF")
    assert order.order_number == "000001"


def test_checkout_survives_notification_failure(db, order_service, checkout_ready, monkeypatch):
    from storefront.services import notification_service

    class BrokerDown:
        def delay(self, *args, **kwargs):
            raise ConnectionError("broker unreachable")

    monkeypatch.setattr(notification_service, "send_invoice_email_task", BrokerDown())

    order = order_service.place_order(SESSION)

    assert order.order_number == "000001"
    assert db.query(OrderModel).count() == 1


def test_checkout_survives_smtp_failure(db, order_service, checkout_ready, monkeypatch):
    from storefront.services import mailer

    def smtp_down(msg):
        raise OSError("connection refused")

    monkeypatch.setattr(mailer, "send_mail", smtp_down)

    order = order_service.place_order(SESSION)
    assert order_service.find_order(order.id).id == order.id


def test_find_order_errors(order_service):
    with pytest.raises(InvalidInput):
        order_service.find_order("not-an-id")
    with pytest.raises(NotFound):
        order_service.find_order(uuid4())


def test_download_invoice(order_service, checkout_ready, monkeypatch):
    from storefront.services import invoice as invoice_module

    order = order_service.place_order(SESSION)
    converted = []
    real_html_to_pdf = invoice_module.html_to_pdf

    def recording_html_to_pdf(html):
        converted.append(html)
        return real_html_to_pdf(html)

    monkeypatch.setattr(invoice_module, "html_to_pdf", recording_html_to_pdf)

    invoice = order_service.download_invoice(order.id)

    assert invoice.order_id == order.id
    assert invoice.filename == "invoice-000001.pdf"
    assert invoice.content.startswith(b"%PDF")
    html = converted[0]
    assert "#ORD000001" in html
    assert "4B Near Metro 12 MG Road Bengaluru Karnataka India 560001" in html
    assert "Tee" in html and "Cap" in html


def test_invoice_pdf_failure_is_internal(order_service, checkout_ready, monkeypatch):
    from storefront.services import invoice as invoice_module

    class BrokenStatus:
        err = 1

    order = order_service.place_order(SESSION)
    monkeypatch.setattr(invoice_module.pisa, "CreatePDF", lambda *args, **kwargs: BrokenStatus())

    with pytest.raises(Internal):
        order_service.download_invoice(order.id)


def test_download_invoice_needs_customer(db, cart_service, order_service, make_product):
    fill_cart(cart_service, SESSION, (make_product("10"), 1))
    order = order_service.place_order(SESSION)

    with pytest.raises(NotFound):
        order_service.download_invoice(order.id)


def _place(cart_service, order_service, session_id, product):
    fill_cart(cart_service, session_id, (product, 1))
    return order_service.place_order(session_id)


def test_list_orders_filters_and_sort(db, cart_service, order_service, make_product, checkout_ready):
    first = order_service.place_order(SESSION)
    second = _place(cart_service, order_service, "s2", make_product("10"))

    page = order_service.list_orders(sort="asc")
    assert page.total == 2
    assert [o.order_number for o in page.items] == [first.order_number, second.order_number]

    assert [o.id for o in order_service.list_orders(search="asha").items] == [first.id]
    assert [o.id for o in order_service.list_orders(search="000002").items] == [second.id]
    assert order_service.list_orders(status="Canceled").total == 0

    today = datetime.now(timezone.utc).date()
    assert order_service.list_orders(start=today, end=today).total == 2
    assert order_service.list_orders(end=today - timedelta(days=1)).total == 0

    assert [o.id for o in order_service.list_orders(limit=1, page=2).items] == [first.id]


def test_bulk_action(db, cart_service, order_service, make_product):
    p1 = make_product("10")
    a = _place(cart_service, order_service, "a", p1)
    b = _place(cart_service, order_service, "b", p1)

    assert order_service.bulk_action("Delivered", [a.id, b.id]) == 2
    assert {o.status for o in order_service.list_orders().items} == {"Delivered"}

    assert order_service.bulk_action("delete", [a.id]) == 1
    assert [o.id for o in order_service.list_orders().items] == [b.id]
    assert order_service.list_orders(include_deleted=True).total == 2

    assert order_service.bulk_action("restore", [a.id]) == 1
    assert order_service.list_orders().total == 2


def test_bulk_action_invalid_verb(order_service):
    with pytest.raises(InvalidInput):
        order_service.bulk_action("explode", [uuid4()])
