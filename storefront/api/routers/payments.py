# storefront/api/routers/payments.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_company_id, get_payment_gateway
from storefront.data.database import get_db
from storefront.domain.enums import PaymentStatus
from storefront.domain.schemas import Envelope, GatewayOrderIn, GatewayOrderOut, Page, PaymentIn, PaymentOut
from storefront.services.payment_gateway import PaymentGatewayClient
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


def get_service(
    db: Session = Depends(get_db),
    gateway: PaymentGatewayClient = Depends(get_payment_gateway),
    company_id: int = Depends(get_company_id),
) -> PaymentService:
    return PaymentService(db=db, gateway=gateway, company_id=company_id)


@router.post("", response_model=Envelope[PaymentOut], status_code=201)
def record_payment(payload: PaymentIn, svc: PaymentService = Depends(get_service)):
    return Envelope(message="Payment created successfully", data=svc.record_payment(payload))


@router.get("", response_model=Envelope[Page[PaymentOut]])
def list_payments(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[PaymentStatus] = None,
    order_id: Optional[UUID] = None,
    svc: PaymentService = Depends(get_service),
):
    result = svc.list_payments(
        page=page,
        limit=limit,
        status=status.value if status else None,
        order_id=order_id,
    )
    return Envelope(message="Payments fetched", data=result)


@router.post("/gateway-orders", response_model=Envelope[GatewayOrderOut], status_code=201)
def create_gateway_order(payload: GatewayOrderIn, svc: PaymentService = Depends(get_service)):
    return Envelope(message="Gateway order created", data=svc.create_gateway_order(payload.order_id))
