from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, Uuid, Index

from storefront.data.database import Base
from storefront.data.models._columns import id_column, created_at_column
from storefront.domain.enums import PaymentStatus


class PaymentModel(Base):
    __tablename__ = "payments"

    id = id_column()
    company_id = Column(Integer, nullable=False, index=True)
    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id"), nullable=False, index=True)

    payment_method = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_id = Column(String(100), nullable=True)  # gateway side id
    gateway_response = Column(Text, nullable=True)

    created_by = Column(Uuid(as_uuid=True), nullable=True)
    created_at = created_at_column()


# at most one completed payment per order
Index(
    "u_order_completed_payment",
    PaymentModel.order_id,
    unique=True,
    postgresql_where=PaymentModel.status == PaymentStatus.COMPLETED.value,
    sqlite_where=PaymentModel.status == PaymentStatus.COMPLETED.value,
)
