# storefront/api/routers/carts.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_company_id, get_lock_service
from storefront.data.database import get_db
from storefront.domain.enums import CartLookup
from storefront.domain.schemas import AddItemIn, CartRow, CheckoutDataIn, Envelope
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    company_id: int = Depends(get_company_id),
) -> CartService:
    return CartService(db=db, lock_service=lock_service, company_id=company_id)


@router.post("/{session_id}/items", response_model=Envelope[List[CartRow]])
def add_item(session_id: str, payload: AddItemIn, svc: CartService = Depends(get_service)):
    rows = svc.add_item(
        session_id=session_id,
        product=payload.product,
        user_id=payload.user_id,
        quantity=payload.quantity,
    )
    return Envelope(message="Product added to cart", data=rows)


@router.delete("/{session_id}/items/{product_id}", response_model=Envelope[List[CartRow]])
def remove_item(session_id: str, product_id: UUID, svc: CartService = Depends(get_service)):
    return Envelope(message="Product removed from cart", data=svc.remove_item(session_id, product_id))


@router.post("/{session_id}/items/{product_id}/decrement", response_model=Envelope[List[CartRow]])
def decrement_quantity(session_id: str, product_id: UUID, svc: CartService = Depends(get_service)):
    return Envelope(message="Product quantity updated", data=svc.decrement_quantity(session_id, product_id))


@router.post("/{session_id}/recalculate", response_model=Envelope[List[CartRow]])
def recalculate(session_id: str, svc: CartService = Depends(get_service)):
    return Envelope(message="Cart recalculated", data=svc.recalculate(session_id))


@router.put("/{session_id}/checkout-data", response_model=Envelope[List[CartRow]])
def save_checkout_data(session_id: str, payload: CheckoutDataIn, svc: CartService = Depends(get_service)):
    return Envelope(message="Checkout data saved", data=svc.save_checkout_data(session_id, payload))


@router.get("/{lookup}/{value}", response_model=Envelope[List[CartRow]])
def find_cart(lookup: CartLookup, value: str, svc: CartService = Depends(get_service)):
    return Envelope(message="Cart fetched", data=svc.find_cart(lookup, value))
