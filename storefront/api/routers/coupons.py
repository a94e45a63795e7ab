# storefront/api/routers/coupons.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_company_id, get_lock_service
from storefront.data.database import get_db
from storefront.domain.enums import RecordStatus
from storefront.domain.schemas import ApplyCouponIn, CartRow, CouponIn, CouponOut, Envelope, RemoveCouponIn
from storefront.services.coupon_service import CouponService
from storefront.services.lock_service import LockService

router = APIRouter(prefix="/coupons", tags=["coupons"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    company_id: int = Depends(get_company_id),
) -> CouponService:
    return CouponService(db=db, lock_service=lock_service, company_id=company_id)


@router.post("/apply", response_model=Envelope[List[CartRow]])
def apply_coupon(payload: ApplyCouponIn, svc: CouponService = Depends(get_service)):
    rows = svc.apply_coupon(payload.session_id, payload.coupon_code)
    return Envelope(message="Coupon applied successfully", data=rows)


@router.post("/remove", response_model=Envelope[List[CartRow]])
def remove_coupon(payload: RemoveCouponIn, svc: CouponService = Depends(get_service)):
    return Envelope(message="Coupon removed successfully", data=svc.remove_coupon(payload.session_id))


@router.post("", response_model=Envelope[CouponOut], status_code=201)
def create_coupon(payload: CouponIn, svc: CouponService = Depends(get_service)):
    return Envelope(message="Coupon created successfully", data=svc.create_coupon(payload))


@router.get("", response_model=Envelope[List[CouponOut]])
def list_coupons(
    status: Optional[RecordStatus] = Query(None),
    svc: CouponService = Depends(get_service),
):
    coupons = svc.list_coupons(status.value if status else None)
    return Envelope(message="Coupons fetched", data=coupons)


@router.delete("/{coupon_id}", response_model=Envelope[CouponOut])
def delete_coupon(coupon_id: UUID, svc: CouponService = Depends(get_service)):
    return Envelope(message="Coupon deleted successfully", data=svc.delete_coupon(coupon_id))
