# storefront/services/payment_service.py
import json
from uuid import UUID

from requests import RequestException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.payment import PaymentModel
from storefront.domain.enums import PaymentStatus
from storefront.domain.errors import Internal, InvalidInput, NotFound
from storefront.domain.schemas import GatewayOrderOut, Page, PaymentIn, PaymentOut
from storefront.repos.order_repo import OrderRepo
from storefront.repos.payment_repo import PaymentRepo
from storefront.services.payment_gateway import PaymentGatewayClient
from storefront.utils.money import to_minor_units
from storefront.utils.settings import COMPANY_ID, PAYMENT_CURRENCY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentService:
    def __init__(
        self,
        db: Session,
        gateway: PaymentGatewayClient | None = None,
        company_id: int = COMPANY_ID,
    ):
        self.repo = PaymentRepo(db)
        self.orders = OrderRepo(db)
        self.gateway = gateway or PaymentGatewayClient()
        self.company_id = company_id

    def _get_order(self, order_id: UUID):
        order = self.orders.get_order(order_id)
        if not order or order.company_id != self.company_id:
            raise NotFound("Order not found")
        return order

    def record_payment(self, data: PaymentIn) -> PaymentOut:
        order = self._get_order(data.order_id)

        completed = data.status == PaymentStatus.COMPLETED
        if completed and self.repo.has_completed(order.id):
            raise InvalidInput(f"Order {order.order_number} is already paid")

        try:
            payment = self.repo.create_payment(
                PaymentModel(
                    company_id=self.company_id,
                    order_id=order.id,
                    payment_method=data.payment_method.value,
                    status=data.status.value,
                    amount=data.amount,
                    payment_id=data.payment_id,
                    created_by=data.created_by,
                )
            )
        except IntegrityError as e:
            # a concurrent request completed the order first
            number = order.order_number
            self.repo.rollback()
            logger.warning(f"Duplicate completed payment for order {number}: {e.orig}")
            raise InvalidInput(f"Order {number} is already paid") from e
        if completed:
            order.payment_id = payment.id

        self.repo.commit()
        logger.info(
            f"Payment {payment.id} ({payment.status}, {payment.amount}) recorded for order {order.order_number}"
        )
        return PaymentOut.model_validate(payment)

    def list_payments(
        self,
        page: int = 1,
        limit: int = 20,
        status: str | None = None,
        order_id: UUID | None = None,
    ) -> Page[PaymentOut]:
        total, rows = self.repo.list_payments(
            self.company_id, page=page, limit=limit, status=status, order_id=order_id
        )
        return Page[PaymentOut](
            total=total,
            page=page,
            limit=limit,
            items=[PaymentOut.model_validate(p) for p in rows],
        )

    def create_gateway_order(self, order_id: UUID) -> GatewayOrderOut:
        order = self._get_order(order_id)

        try:
            gateway_order = self.gateway.create_order(
                amount=to_minor_units(order.total),
                currency=PAYMENT_CURRENCY,
                receipt=order.order_number,
            )
        except RequestException as e:
            logger.error(f"Gateway order for {order.order_number} failed: {e}")
            raise Internal("Payment gateway order creation failed") from e

        payment = self.repo.create_payment(
            PaymentModel(
                company_id=self.company_id,
                order_id=order.id,
                payment_method=order.payment_method,
                status=PaymentStatus.PROCESSING.value,
                amount=order.total,
                payment_id=gateway_order.get("id"),
                gateway_response=json.dumps(gateway_order),
            )
        )
        self.repo.commit()
        logger.info(f"Gateway order {payment.payment_id} created for order {order.order_number}")

        return GatewayOrderOut(payment=PaymentOut.model_validate(payment), gateway_order=gateway_order)
