# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import CouponModel, ProductModel, TaxModel
from storefront.domain.enums import DiscountType, RecordStatus
from storefront.utils.settings import COMPANY_ID
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    ("Classic T-Shirt", "classic-t-shirt", Decimal("100.00")),
    ("Denim Jacket", "denim-jacket", Decimal("1000.00")),
    ("Canvas Sneakers", "canvas-sneakers", Decimal("649.50")),
]


def seed(company_id: int = COMPANY_ID):
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).filter(ProductModel.company_id == company_id).first():
            return

        for name, slug, price in DEMO_PRODUCTS:
            db.add(ProductModel(company_id=company_id, name=name, slug=slug, price=price))

        db.add(TaxModel(company_id=company_id, name="GST", rate=Decimal("18"), status=RecordStatus.ACTIVE.value))
        db.add(
            CouponModel(
                company_id=company_id,
                code="OFF10",
                discount_type=DiscountType.FIXED.value,
                discount=Decimal("10"),
                status=RecordStatus.ACTIVE.value,
            )
        )
        db.commit()
        logger.info(f"Seeded demo catalog for company {company_id}")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
