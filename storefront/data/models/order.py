# storefront/data/models/order.py
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Uuid
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._columns import id_column, created_at_column, deleted_at_column, utcnow
from storefront.domain.enums import OrderStatus


class OrderModel(Base):
    __tablename__ = "orders"

    id = id_column()
    company_id = Column(Integer, nullable=False, index=True)
    order_number = Column(String(20), nullable=False, unique=True)

    user_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    shipping_address_id = Column(Uuid(as_uuid=True), nullable=True)
    coupon_id = Column(Uuid(as_uuid=True), nullable=True)
    payment_id = Column(Uuid(as_uuid=True), nullable=True)

    # copied verbatim from the cart at checkout, never recomputed
    subtotal = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False)
    tax = Column(Numeric(12, 2), nullable=False)
    delivery_fee = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)

    delivery_instruction = Column(Text, nullable=True)
    payment_method = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.ORDERED.value)

    created_at = created_at_column()
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)
    deleted_at = deleted_at_column()

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.position",
    )
    user = relationship(
        "UserModel",
        primaryjoin="foreign(OrderModel.user_id) == UserModel.id",
        viewonly=True,
    )
    address = relationship(
        "ShippingAddressModel",
        primaryjoin="foreign(OrderModel.shipping_address_id) == ShippingAddressModel.id",
        viewonly=True,
    )
