# storefront/repos/order_repo.py
from datetime import datetime, time, timedelta, timezone, date
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import select, update, func, or_, cast, Integer
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.sequence import SequenceModel
from storefront.data.models.user import UserModel

ORDER_SEQUENCE = "order_number"


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_items(self, items: List[OrderItemModel]) -> None:
        self.db.add_all(items)
        self.db.flush()

    def get_order(self, order_id: UUID) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_detail(self, order_id: UUID, company_id: int) -> OrderModel | None:
        """Order with user, address and items (each with its product) loaded."""
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.company_id == company_id)
            .execution_options(populate_existing=True)
            .options(
                selectinload(OrderModel.user),
                selectinload(OrderModel.address),
                selectinload(OrderModel.items).selectinload(OrderItemModel.product),
            )
        ).scalar_one_or_none()

    # -------- order number --------
    def next_order_number(self) -> int:
        """
        Atomic find-and-increment on the sequences row.
        The UPDATE takes a row lock which is held until the surrounding
        transaction ends, so two checkouts can never read the same value.
        """
        result = self.db.execute(
            update(SequenceModel)
            .where(SequenceModel.name == ORDER_SEQUENCE)
            .values(value=SequenceModel.value + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            # first allocation, seed from whatever orders already exist
            self.db.add(SequenceModel(name=ORDER_SEQUENCE, value=self._max_order_number() + 1))
            self.db.flush()

        return self.db.execute(
            select(SequenceModel.value).where(SequenceModel.name == ORDER_SEQUENCE)
        ).scalar_one()

    def _max_order_number(self) -> int:
        highest = self.db.execute(
            select(func.max(cast(OrderModel.order_number, Integer)))
        ).scalar()
        return highest or 0

    # -------- listing --------
    def list_orders(
        self,
        company_id: int,
        page: int = 1,
        limit: int = 20,
        search: str | None = None,
        status: str | None = None,
        start: date | None = None,
        end: date | None = None,
        sort: str = "desc",
        include_deleted: bool = False,
    ) -> Tuple[int, List[OrderModel]]:
        stmt = (
            select(OrderModel)
            .outerjoin(UserModel, OrderModel.user_id == UserModel.id)
            .where(OrderModel.company_id == company_id)
        )

        if not include_deleted:
            stmt = stmt.where(OrderModel.deleted_at.is_(None))
        if status:
            stmt = stmt.where(OrderModel.status == status)
        if search:
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(OrderModel.order_number).like(pattern),
                    func.lower(OrderModel.status).like(pattern),
                    func.lower(UserModel.name).like(pattern),
                )
            )
        if start:
            stmt = stmt.where(OrderModel.created_at >= _day_start(start))
        if end:
            #whole end day included
            stmt = stmt.where(OrderModel.created_at < _day_start(end) + timedelta(days=1))

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        order_by = OrderModel.order_number.asc() if sort == "asc" else OrderModel.order_number.desc()
        rows = self.db.execute(
            stmt.order_by(order_by).offset((page - 1) * limit).limit(limit)
        ).scalars().all()

        return total, list(rows)

    def bulk_update(self, order_ids: List[UUID], company_id: int, values: dict) -> int:
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id.in_(order_ids), OrderModel.company_id == company_id)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)
