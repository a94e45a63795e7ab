# storefront/services/invoice.py
"""
Invoice and order-placed rendering.

Pure functions over an OrderDetailOut snapshot: same order in, same document out.
The PDF attached to mails and served for download is a conversion of the
rendered HTML.
"""
from functools import lru_cache
from io import BytesIO
from html import escape
from importlib import resources
from string import Template

from xhtml2pdf import pisa

from storefront.domain.errors import Internal
from storefront.domain.schemas import OrderDetailOut
from storefront.utils.money import round_money
from storefront.utils.settings import INVOICE_NUMBER_PREFIX
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DATE_FORMAT = "%a %b %d %Y"

_ROW = """            <tr>
                <td>{product_id}</td>
                <td>{name}</td>
                <td>{price}</td>
                <td>{quantity}</td>
                <td>{total}</td>
            </tr>"""


@lru_cache(maxsize=None)
def load_template(name: str) -> Template:
    text = (resources.files("storefront") / "templates" / name).read_text(encoding="utf-8")
    return Template(text)


def invoice_number(order: OrderDetailOut) -> str:
    return f"{INVOICE_NUMBER_PREFIX}{order.order_number}"


def format_address(address) -> str:
    parts = [
        address.house_number,
        address.landmark,
        address.address,
        address.city,
        address.state,
        address.country,
        address.zip,
    ]
    return " ".join(p for p in parts if p)


def render_items(order: OrderDetailOut) -> str:
    rows = []
    for item in order.items:
        name = item.product.name if item.product else ""
        rows.append(
            _ROW.format(
                product_id=escape(str(item.product_id)),
                name=escape(name),
                price=round_money(item.unit_price),
                quantity=item.quantity,
                total=round_money(item.unit_price * item.quantity),
            )
        )
    return "\n".join(rows)


def render_invoice(order: OrderDetailOut) -> str:
    user_name = order.user.name if order.user else ""
    address = format_address(order.address) if order.address else ""
    phone = order.address.phone if order.address else ""

    return load_template("invoice.html").substitute(
        order_number=escape(invoice_number(order)),
        order_date=order.created_at.strftime(DATE_FORMAT),
        customer_name=escape(user_name),
        delivery_address=escape(address),
        delivery_contact=escape(phone),
        order_items=render_items(order),
        order_subtotal=round_money(order.subtotal),
        order_discount=round_money(order.discount),
        order_tax=round_money(order.tax),
        order_total=round_money(order.total),
    )


def html_to_pdf(html: str) -> bytes:
    buffer = BytesIO()
    status = pisa.CreatePDF(html, dest=buffer, encoding="utf-8")
    if status.err:
        logger.error(f"PDF conversion failed with {status.err} error(s)")
        raise Internal("Invoice PDF could not be generated")
    return buffer.getvalue()


def render_invoice_pdf(order: OrderDetailOut) -> bytes:
    return html_to_pdf(render_invoice(order))


def invoice_filename(order: OrderDetailOut) -> str:
    return f"invoice-{order.order_number}.pdf"


def render_order_placed(order: OrderDetailOut) -> str:
    return load_template("order_placed.html").substitute(
        customer_name=escape(order.user.name if order.user else "customer"),
        order_number=escape(invoice_number(order)),
        order_id=order.id,
    )
