# storefront/services/tax_service.py
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.data.models._columns import utcnow
from storefront.data.models.tax import TaxModel
from storefront.domain.errors import InvalidInput, NotFound
from storefront.domain.schemas import TaxIn, TaxOut
from storefront.repos.catalog_repo import CatalogRepo
from storefront.services.pricing import HUNDRED
from storefront.utils.settings import COMPANY_ID
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class TaxService:
    """Admin side of taxes. Carts pick up changes on their next recalculation."""

    def __init__(self, db: Session, company_id: int = COMPANY_ID):
        self.repo = CatalogRepo(db)
        self.company_id = company_id

    def create_tax(self, data: TaxIn) -> TaxOut:
        if data.rate < 0:
            raise InvalidInput("Tax rate cannot be negative")
        if data.rate > HUNDRED:
            raise InvalidInput("Tax rate cannot exceed 100 percent")

        tax = self.repo.add(
            TaxModel(
                company_id=self.company_id,
                name=data.name,
                rate=data.rate,
                status=data.status.value,
            )
        )
        self.repo.commit()
        logger.info(f"Tax {tax.name} ({tax.rate}%) created")
        return TaxOut.model_validate(tax)

    def list_taxes(self, status: str | None = None) -> List[TaxOut]:
        return [TaxOut.model_validate(t) for t in self.repo.list_taxes(self.company_id, status)]

    def delete_tax(self, tax_id: UUID) -> TaxOut:
        tax = self.repo.get_tax(tax_id, self.company_id)
        if not tax or tax.deleted_at is not None:
            raise NotFound("Tax not found")

        tax.deleted_at = utcnow()
        self.repo.commit()
        logger.info(f"Tax {tax.name} deleted")
        return TaxOut.model_validate(tax)
