# storefront/repos/catalog_repo.py
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.tax import TaxModel
from storefront.domain.enums import RecordStatus


class CatalogRepo:
    """Products and taxes as seen by the pricing engine."""

    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: UUID, company_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(
                ProductModel.id == product_id,
                ProductModel.company_id == company_id,
                ProductModel.deleted_at.is_(None),
            )
        ).scalar_one_or_none()

    def get_unit_price(self, product_id: UUID, company_id: int) -> Decimal | None:
        product = self.get_product(product_id, company_id)
        return product.price if product else None

    def get_tax_rates(self, company_id: int) -> List[Decimal]:
        return list(
            self.db.execute(
                select(TaxModel.rate).where(
                    TaxModel.company_id == company_id,
                    TaxModel.status == RecordStatus.ACTIVE.value,
                    TaxModel.deleted_at.is_(None),
                )
            ).scalars().all()
        )

    def get_tax(self, tax_id: UUID, company_id: int) -> TaxModel | None:
        return self.db.execute(
            select(TaxModel).where(TaxModel.id == tax_id, TaxModel.company_id == company_id)
        ).scalar_one_or_none()

    def list_taxes(self, company_id: int, status: str | None = None) -> List[TaxModel]:
        stmt = select(TaxModel).where(
            TaxModel.company_id == company_id,
            TaxModel.deleted_at.is_(None),
        )
        if status:
            stmt = stmt.where(TaxModel.status == status)
        return list(self.db.execute(stmt.order_by(TaxModel.name)).scalars().all())

    def add(self, row):
        self.db.add(row)
        self.db.flush()
        return row

    def commit(self):
        self.db.commit()
