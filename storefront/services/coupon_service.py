# storefront/services/coupon_service.py
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.data.models._columns import utcnow
from storefront.data.models.coupon import CouponModel
from storefront.domain.enums import CartLookup, DiscountType
from storefront.domain.errors import InvalidInput, NotFound
from storefront.domain.schemas import CartRow, CouponIn, CouponOut
from storefront.repos.coupon_repo import CouponRepo
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.services.pricing import HUNDRED, is_redeemable
from storefront.utils.settings import COMPANY_ID
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CouponService:
    def __init__(self, db: Session, lock_service: LockService, company_id: int = COMPANY_ID):
        self.repo = CouponRepo(db)
        self.carts = CartService(db, lock_service, company_id)
        self.lock_service = lock_service
        self.company_id = company_id

    # -------- cart side --------
    def apply_coupon(self, session_id: str, coupon_code: str) -> List[CartRow]:
        coupon = self.repo.get_by_code(coupon_code, self.company_id)
        if not coupon or not is_redeemable(coupon):
            raise InvalidInput("Invalid or inactive coupon code")

        with self.lock_service.cart_lock(self.company_id, session_id):
            cart = self.carts.get_open_cart_or_404(session_id)

            if cart.coupon_id and cart.coupon_id != coupon.id:
                logger.info(f"Replacing coupon {cart.coupon_id} on cart {cart.id}")

            #the pipeline prices the new coupon from scratch
            cart.coupon_id = coupon.id
            self.carts.recompute(cart)
            self.carts.repo.commit()

        logger.info(f"Coupon {coupon.code} applied to cart {cart.id}")
        return self.carts.find_cart(CartLookup.SESSION, session_id)

    def remove_coupon(self, session_id: str) -> List[CartRow]:
        with self.lock_service.cart_lock(self.company_id, session_id):
            cart = self.carts.get_open_cart_or_404(session_id)

            cart.coupon_id = None
            cart.discount = 0
            self.carts.recompute(cart)
            self.carts.repo.commit()

        logger.info(f"Coupon removed from cart {cart.id}")
        return self.carts.find_cart(CartLookup.SESSION, session_id)

    # -------- admin --------
    def create_coupon(self, data: CouponIn) -> CouponOut:
        if self.repo.get_by_code(data.code, self.company_id):
            raise InvalidInput(f"Coupon code {data.code} already exists")
        if data.discount_type == DiscountType.PERCENTAGE and data.discount > HUNDRED:
            raise InvalidInput("Percentage discount cannot exceed 100")
        if data.from_date and data.to_date and data.from_date > data.to_date:
            raise InvalidInput("Coupon validity window ends before it starts")

        coupon = self.repo.create_coupon(
            CouponModel(
                company_id=self.company_id,
                code=data.code,
                discount_type=data.discount_type.value,
                discount=data.discount,
                from_date=data.from_date,
                to_date=data.to_date,
                status=data.status.value,
            )
        )
        self.repo.commit()
        logger.info(f"Coupon {coupon.code} created")
        return CouponOut.model_validate(coupon)

    def list_coupons(self, status: str | None = None) -> List[CouponOut]:
        return [CouponOut.model_validate(c) for c in self.repo.list_coupons(self.company_id, status)]

    def delete_coupon(self, coupon_id: UUID) -> CouponOut:
        coupon = self.repo.get_coupon(coupon_id)
        if not coupon or coupon.company_id != self.company_id or coupon.deleted_at is not None:
            raise NotFound("Coupon not found")

        coupon.deleted_at = utcnow()
        self.repo.commit()
        logger.info(f"Coupon {coupon.code} deleted")
        return CouponOut.model_validate(coupon)
