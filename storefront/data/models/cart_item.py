from sqlalchemy import Column, Integer, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._columns import id_column, created_at_column, deleted_at_column


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = id_column()
    cart_id = Column(Uuid(as_uuid=True), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    unit_price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)

    created_at = created_at_column()
    deleted_at = deleted_at_column()

    cart = relationship("CartModel", back_populates="items")
    product = relationship(
        "ProductModel",
        primaryjoin="foreign(CartItemModel.product_id) == ProductModel.id",
        viewonly=True,
    )
