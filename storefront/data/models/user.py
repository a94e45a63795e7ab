from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._columns import id_column, created_at_column


class UserModel(Base):
    __tablename__ = "users"

    id = id_column()
    name = Column(String(180), nullable=False)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(50), nullable=True)
    created_at = created_at_column()

    addresses = relationship(
        "ShippingAddressModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )
