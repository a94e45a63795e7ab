from sqlalchemy import Column, Integer, String, Numeric, DateTime, Index, func

from storefront.data.database import Base
from storefront.data.models._columns import id_column, created_at_column, deleted_at_column


class CouponModel(Base):
    __tablename__ = "coupons"

    id = id_column()
    company_id = Column(Integer, nullable=False, index=True)
    code = Column(String(64), nullable=False, index=True)

    discount_type = Column(String(16), nullable=False)  # percentage | fixed
    discount = Column(Numeric(12, 2), nullable=False)

    from_date = Column(DateTime(timezone=True), nullable=True)
    to_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(20), nullable=False, default="inactive")

    created_at = created_at_column()
    deleted_at = deleted_at_column()


# codes are unique per company, case-insensitively, among live coupons only
Index(
    "u_company_coupon_code",
    CouponModel.company_id,
    func.lower(CouponModel.code),
    unique=True,
    postgresql_where=CouponModel.deleted_at.is_(None),
    sqlite_where=CouponModel.deleted_at.is_(None),
)
