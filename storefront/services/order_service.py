# storefront/services/order_service.py
from datetime import date
from typing import List
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models._columns import utcnow
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.payment import PaymentModel
from storefront.domain.enums import BulkAction, CartStatus, OrderStatus, PaymentStatus
from storefront.domain.errors import Internal, InvalidInput, NotFound
from storefront.domain.schemas import InvoiceOut, OrderDetailOut, OrderOut, Page
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.payment_repo import PaymentRepo
from storefront.services.invoice import invoice_filename, render_invoice_pdf
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import COMPANY_ID, ORDER_NUMBER_WIDTH
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Checkout and order queries.
    Separate from CartService: the cart is only read here and then closed.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        company_id: int = COMPANY_ID,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.payments = PaymentRepo(db)
        self.lock_service = lock_service
        self.company_id = company_id
        self.notification_service = notification_service or NotificationService()

    def place_order(self, session_id: str) -> OrderOut:
        """
        Use case: checkout.

        1. load the open cart and its live items
        2. allocate the next order number
        3. snapshot the cart into Order + OrderItems, add a pending Payment
        4. close the cart (order_id, status Ordered)
        5. commit, then queue the invoice email (best effort)
        """
        with self.lock_service.cart_lock(self.company_id, session_id):
            cart = self.carts.get_open_cart(session_id, self.company_id)
            if not cart:
                raise NotFound("Cart not found")

            items = self.carts.get_active_items(cart.id)
            if not items:
                raise InvalidInput("Cannot place an order for an empty cart")

            try:
                number = self.repo.next_order_number()
                order = self.repo.create_order(
                    OrderModel(
                        company_id=self.company_id,
                        order_number=str(number).zfill(ORDER_NUMBER_WIDTH),
                        user_id=cart.user_id,
                        shipping_address_id=cart.shipping_address_id,
                        coupon_id=cart.coupon_id,
                        subtotal=cart.subtotal,
                        discount=cart.discount,
                        tax=cart.tax,
                        delivery_fee=cart.delivery_fee,
                        total=cart.total,
                        delivery_instruction=cart.delivery_instruction,
                        payment_method=cart.payment_method,
                        status=OrderStatus.ORDERED.value,
                    )
                )
                logger.info(f"Allocated order number {order.order_number} for cart {cart.id}")

                self.repo.add_order_items(
                    [
                        OrderItemModel(
                            order_id=order.id,
                            product_id=item.product_id,
                            position=position,
                            unit_price=item.unit_price,
                            quantity=item.quantity,
                            total_price=item.total_price,
                        )
                        for position, item in enumerate(items)
                    ]
                )

                payment = self.payments.create_payment(
                    PaymentModel(
                        company_id=self.company_id,
                        order_id=order.id,
                        payment_method=cart.payment_method,
                        status=PaymentStatus.PENDING.value,
                        amount=order.total,
                        created_by=cart.user_id,
                    )
                )
                order.payment_id = payment.id

                cart.order_id = order.id
                cart.status = CartStatus.ORDERED.value
                self.carts.save_cart(cart)

                self.repo.commit()
            except SQLAlchemyError as e:
                self.repo.rollback()
                logger.error(f"Checkout of cart {cart.id} failed: {e}")
                raise Internal("Could not place the order") from e

        logger.info(f"Order {order.order_number} ({order.id}) placed from cart {cart.id}, total {order.total}")

        self.notification_service.send_invoice_email(order.id)
        return OrderOut.model_validate(order)

    # -------- queries --------
    def _load_detail(self, order_id) -> OrderModel:
        try:
            key = UUID(str(order_id))
        except ValueError:
            raise InvalidInput("Invalid order id")

        order = self.repo.get_order_detail(key, self.company_id)
        if not order:
            raise NotFound("Order not found")
        return order

    def find_order(self, order_id) -> OrderDetailOut:
        return OrderDetailOut.model_validate(self._load_detail(order_id))

    def list_orders(
        self,
        page: int = 1,
        limit: int = 20,
        search: str | None = None,
        status: str | None = None,
        start: date | None = None,
        end: date | None = None,
        sort: str = "desc",
        include_deleted: bool = False,
    ) -> Page[OrderOut]:
        total, rows = self.repo.list_orders(
            self.company_id,
            page=page,
            limit=limit,
            search=search,
            status=status,
            start=start,
            end=end,
            sort=sort,
            include_deleted=include_deleted,
        )
        return Page[OrderOut](
            total=total,
            page=page,
            limit=limit,
            items=[OrderOut.model_validate(o) for o in rows],
        )

    def bulk_action(self, action: str, order_ids: List[UUID]) -> int:
        try:
            verb = BulkAction(action)
        except ValueError:
            raise InvalidInput(f"Invalid action: {action}")

        if verb == BulkAction.DELETE:
            values = {"deleted_at": utcnow()}
        elif verb == BulkAction.RESTORE:
            values = {"deleted_at": None}
        else:
            values = {"status": verb.value}

        count = self.repo.bulk_update(order_ids, self.company_id, values)
        self.repo.commit()
        logger.info(f"Bulk action {verb.value} applied to {count} orders")
        return count

    def download_invoice(self, order_id) -> InvoiceOut:
        order = self._load_detail(order_id)
        if not order.user or not order.address or not order.items:
            raise NotFound("Order invoice could not be assembled")

        detail = OrderDetailOut.model_validate(order)
        return InvoiceOut(
            order_id=detail.id,
            filename=invoice_filename(detail),
            content=render_invoice_pdf(detail),
        )
