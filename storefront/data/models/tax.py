from sqlalchemy import Column, Integer, String, Numeric

from storefront.data.database import Base
from storefront.data.models._columns import id_column, created_at_column, deleted_at_column


class TaxModel(Base):
    __tablename__ = "taxes"

    id = id_column()
    company_id = Column(Integer, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    rate = Column(Numeric(6, 3), nullable=False)  # percent
    status = Column(String(20), nullable=False, default="active")

    created_at = created_at_column()
    deleted_at = deleted_at_column()
