from sqlalchemy import Column, String, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._columns import id_column, created_at_column, deleted_at_column


class ShippingAddressModel(Base):
    __tablename__ = "shipping_addresses"

    id = id_column()
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(180), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=False)
    address = Column(String(255), nullable=False)
    landmark = Column(String(255), nullable=False, default="")
    house_number = Column(String(50), nullable=False, default="")
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    zip = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default="active")

    created_at = created_at_column()
    deleted_at = deleted_at_column()

    user = relationship("UserModel", back_populates="addresses")
