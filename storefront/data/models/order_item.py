from sqlalchemy import Column, Integer, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._columns import id_column, created_at_column


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = id_column()
    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=True), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    unit_price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)

    created_at = created_at_column()

    order = relationship("OrderModel", back_populates="items")
    product = relationship(
        "ProductModel",
        primaryjoin="foreign(OrderItemModel.product_id) == ProductModel.id",
        viewonly=True,
    )
