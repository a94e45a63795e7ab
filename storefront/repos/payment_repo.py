# storefront/repos/payment_repo.py
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.payment import PaymentModel
from storefront.domain.enums import PaymentStatus


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def has_completed(self, order_id: UUID) -> bool:
        count = self.db.execute(
            select(func.count(PaymentModel.id)).where(
                PaymentModel.order_id == order_id,
                PaymentModel.status == PaymentStatus.COMPLETED.value,
            )
        ).scalar_one()
        return count > 0

    def list_payments(
        self,
        company_id: int,
        page: int = 1,
        limit: int = 20,
        status: str | None = None,
        order_id: UUID | None = None,
    ) -> Tuple[int, List[PaymentModel]]:
        stmt = select(PaymentModel).where(PaymentModel.company_id == company_id)
        if status:
            stmt = stmt.where(PaymentModel.status == status)
        if order_id:
            stmt = stmt.where(PaymentModel.order_id == order_id)

        total = self.db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
        rows = self.db.execute(
            stmt.order_by(PaymentModel.created_at.desc(), PaymentModel.id)
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        return total, list(rows)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
