# storefront/repos/cart_repo.py
from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import select, update, func
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    # -------- carts --------
    def get_open_cart(self, session_id: str, company_id: int) -> CartModel | None:
        """Cart for the session that has not been turned into an order yet."""
        return self.db.execute(
            select(CartModel).where(
                CartModel.session_id == session_id,
                CartModel.company_id == company_id,
                CartModel.order_id.is_(None),
            )
        ).scalar_one_or_none()

    def get_cart(self, cart_id: UUID) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_cart_by_order(self, order_id: UUID) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.order_id == order_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def save_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def delete_cart(self, cart: CartModel) -> None:
        self.db.delete(cart)
        self.db.flush()

    # -------- items --------
    def get_active_item(self, cart_id: UUID, product_id: UUID) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
                CartItemModel.deleted_at.is_(None),
            )
        ).scalars().first()

    def get_active_items(self, cart_id: UUID, with_product: bool = False) -> List[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.cart_id == cart_id, CartItemModel.deleted_at.is_(None))
            .order_by(CartItemModel.created_at, CartItemModel.id)
        )
        if with_product:
            stmt = stmt.options(selectinload(CartItemModel.product))
        return list(self.db.execute(stmt).scalars().all())

    def count_active_items(self, cart_id: UUID) -> int:
        return self.db.execute(
            select(func.count(CartItemModel.id)).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.deleted_at.is_(None),
            )
        ).scalar_one()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def soft_delete_items(self, cart_id: UUID, product_id: UUID, at: datetime) -> int:
        result = self.db.execute(
            update(CartItemModel)
            .where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
                CartItemModel.deleted_at.is_(None),
            )
            .values(deleted_at=at)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
