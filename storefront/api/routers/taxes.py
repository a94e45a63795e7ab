# storefront/api/routers/taxes.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_company_id
from storefront.data.database import get_db
from storefront.domain.enums import RecordStatus
from storefront.domain.schemas import Envelope, TaxIn, TaxOut
from storefront.services.tax_service import TaxService

router = APIRouter(prefix="/taxes", tags=["taxes"])


def get_service(db: Session = Depends(get_db), company_id: int = Depends(get_company_id)) -> TaxService:
    return TaxService(db=db, company_id=company_id)


@router.post("", response_model=Envelope[TaxOut], status_code=201)
def create_tax(payload: TaxIn, svc: TaxService = Depends(get_service)):
    return Envelope(message="Tax created successfully", data=svc.create_tax(payload))


@router.get("", response_model=Envelope[List[TaxOut]])
def list_taxes(status: Optional[RecordStatus] = Query(None), svc: TaxService = Depends(get_service)):
    return Envelope(message="Taxes fetched", data=svc.list_taxes(status.value if status else None))


@router.delete("/{tax_id}", response_model=Envelope[TaxOut])
def delete_tax(tax_id: UUID, svc: TaxService = Depends(get_service)):
    return Envelope(message="Tax deleted successfully", data=svc.delete_tax(tax_id))
