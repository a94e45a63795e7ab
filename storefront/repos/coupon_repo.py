# storefront/repos/coupon_repo.py
from typing import List
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel


class CouponRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_coupon(self, coupon_id: UUID) -> CouponModel | None:
        return self.db.get(CouponModel, coupon_id)

    def get_by_code(self, code: str, company_id: int) -> CouponModel | None:
        """Case-insensitive lookup among non-deleted coupons."""
        return self.db.execute(
            select(CouponModel).where(
                func.lower(CouponModel.code) == code.strip().lower(),
                CouponModel.company_id == company_id,
                CouponModel.deleted_at.is_(None),
            )
        ).scalars().first()

    def list_coupons(self, company_id: int, status: str | None = None) -> List[CouponModel]:
        stmt = select(CouponModel).where(
            CouponModel.company_id == company_id,
            CouponModel.deleted_at.is_(None),
        )
        if status:
            stmt = stmt.where(CouponModel.status == status)
        return list(self.db.execute(stmt.order_by(CouponModel.code)).scalars().all())

    def create_coupon(self, coupon: CouponModel) -> CouponModel:
        self.db.add(coupon)
        self.db.flush()
        return coupon

    def commit(self):
        self.db.commit()
