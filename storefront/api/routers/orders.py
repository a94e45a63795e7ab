# storefront/api/routers/orders.py
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_company_id, get_lock_service
from storefront.data.database import get_db
from storefront.domain.schemas import BulkActionIn, Envelope, OrderDetailOut, OrderOut, Page
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    company_id: int = Depends(get_company_id),
) -> OrderService:
    return OrderService(db=db, lock_service=lock_service, company_id=company_id)


@router.post("/checkout/{session_id}", response_model=Envelope[OrderOut], status_code=201)
def place_order(session_id: str, svc: OrderService = Depends(get_service)):
    return Envelope(message="Order placed successfully", data=svc.place_order(session_id))


@router.get("", response_model=Envelope[Page[OrderOut]])
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    status: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    sort: Literal["asc", "desc"] = "desc",
    include_deleted: bool = False,
    svc: OrderService = Depends(get_service),
):
    result = svc.list_orders(
        page=page,
        limit=limit,
        search=search,
        status=status,
        start=start,
        end=end,
        sort=sort,
        include_deleted=include_deleted,
    )
    return Envelope(message="Orders fetched", data=result)


@router.post("/bulk-action", response_model=Envelope[dict])
def bulk_action(payload: BulkActionIn, svc: OrderService = Depends(get_service)):
    count = svc.bulk_action(payload.action, payload.order_ids)
    return Envelope(message=f"{count} orders updated", data={"count": count})


@router.get("/{order_id}", response_model=Envelope[OrderDetailOut])
def find_order(order_id: str, svc: OrderService = Depends(get_service)):
    return Envelope(message="Order fetched", data=svc.find_order(order_id))


@router.get(
    "/{order_id}/invoice",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}, "description": "Invoice PDF"}},
)
def download_invoice(order_id: str, svc: OrderService = Depends(get_service)):
    invoice = svc.download_invoice(order_id)
    return Response(
        content=invoice.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{invoice.filename}"'},
    )
