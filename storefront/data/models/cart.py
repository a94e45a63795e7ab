# storefront/data/models/cart.py
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._columns import id_column, created_at_column, utcnow
from storefront.domain.enums import CartStatus, PaymentMethod


class CartModel(Base):
    __tablename__ = "carts"

    id = id_column()
    company_id = Column(Integer, nullable=False, index=True)
    session_id = Column(String(128), nullable=False, index=True)

    # identity and addresses live in the collaborator's tables, no FK
    user_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    shipping_address_id = Column(Uuid(as_uuid=True), nullable=True)
    coupon_id = Column(Uuid(as_uuid=True), ForeignKey("coupons.id"), nullable=True)
    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id"), nullable=True, index=True)

    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    delivery_fee = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)

    delivery_instruction = Column(Text, nullable=True)
    payment_method = Column(String(20), nullable=False, default=PaymentMethod.COD.value)
    status = Column(String(20), nullable=False, default=CartStatus.IN_PROGRESS.value)

    created_at = created_at_column()
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
    )
