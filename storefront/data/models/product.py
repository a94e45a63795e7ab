from sqlalchemy import Column, Integer, String, Numeric

from storefront.data.database import Base
from storefront.data.models._columns import id_column, created_at_column, deleted_at_column


class ProductModel(Base):
    """Read-only catalog row; the pricing engine only needs name and price."""

    __tablename__ = "products"

    id = id_column()
    company_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=True, index=True)
    price = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default="active")

    created_at = created_at_column()
    deleted_at = deleted_at_column()
