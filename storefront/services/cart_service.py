# storefront/services/cart_service.py
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.data.models._columns import utcnow
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.enums import CartLookup
from storefront.domain.errors import InvalidInput, NotFound
from storefront.domain.schemas import (
    CartItemOut,
    CartRow,
    CheckoutDataIn,
    CouponOut,
    ProductSnapshot,
    UserRead,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.repos.coupon_repo import CouponRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.lock_service import LockService
from storefront.services.pricing import Totals, compute_totals, is_redeemable, line_total
from storefront.utils.money import D
from storefront.utils.settings import COMPANY_ID
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart aggregate: items in, derived totals out.

    commands (add, remove, decrement, recalculate, checkout data) run under
    the per-cart lock and end with one commit
    query (find_cart) only reads and returns the denormalized CartRow list
    """

    def __init__(self, db: Session, lock_service: LockService, company_id: int = COMPANY_ID):
        self.db = db
        self.repo = CartRepo(db)
        self.catalog = CatalogRepo(db)
        self.coupons = CouponRepo(db)
        self.users = UserRepo(db)
        self.lock_service = lock_service
        self.company_id = company_id

    # =====================================================
    # query
    # =====================================================
    def find_cart(self, lookup: CartLookup | str, value: str) -> List[CartRow]:
        lookup = CartLookup(lookup)
        cart = None

        if lookup == CartLookup.SESSION:
            cart = self.repo.get_open_cart(value, self.company_id)
        else:
            try:
                key = UUID(str(value))
            except ValueError:
                return []
            if lookup == CartLookup.ORDER:
                cart = self.repo.get_cart_by_order(key)
            else:
                cart = self.repo.get_cart(key)

        if not cart or cart.company_id != self.company_id:
            return []
        return self._rows(cart)

    def _rows(self, cart: CartModel) -> List[CartRow]:
        items = self.repo.get_active_items(cart.id, with_product=True)
        user = self.users.get_user(cart.user_id) if cart.user_id else None
        user_out = UserRead.model_validate(user) if user else None
        coupon = self.coupons.get_coupon(cart.coupon_id) if cart.coupon_id else None
        coupon_out = CouponOut.model_validate(coupon) if coupon else None

        return [
            CartRow(
                cart_id=cart.id,
                session_id=cart.session_id,
                status=cart.status,
                subtotal=cart.subtotal,
                discount=cart.discount,
                tax=cart.tax,
                delivery_fee=cart.delivery_fee,
                total=cart.total,
                payment_method=cart.payment_method,
                delivery_instruction=cart.delivery_instruction,
                shipping_address_id=cart.shipping_address_id,
                order_id=cart.order_id,
                user=user_out,
                coupon=coupon_out,
                item=CartItemOut.model_validate(item),
            )
            for item in items
        ]

    # =====================================================
    # pipeline
    # =====================================================
    def recompute(self, cart: CartModel) -> Totals:
        """
        subtotal -> tax -> discount -> total, computed in memory and written
        to the cart at once. Caller commits.
        """
        self.db.flush()
        items = self.repo.get_active_items(cart.id)

        coupon = None
        if cart.coupon_id:
            coupon = self.coupons.get_coupon(cart.coupon_id)
            if not is_redeemable(coupon):
                logger.info(f"Coupon {cart.coupon_id} no longer redeemable, detaching from cart {cart.id}")
                cart.coupon_id = None
                coupon = None

        totals = compute_totals(
            ((i.unit_price, i.quantity) for i in items),
            self.catalog.get_tax_rates(cart.company_id),
            coupon,
        )

        cart.subtotal = totals.subtotal
        cart.tax = totals.tax
        cart.discount = totals.discount
        cart.total = totals.total
        self.repo.save_cart(cart)

        logger.info(
            f"Cart {cart.id} priced: subtotal={totals.subtotal} tax={totals.tax} "
            f"discount={totals.discount} total={totals.total}"
        )
        return totals

    def get_open_cart_or_404(self, session_id: str) -> CartModel:
        cart = self.repo.get_open_cart(session_id, self.company_id)
        if not cart:
            raise NotFound("Cart not found")
        return cart

    # =====================================================
    # commands
    # =====================================================
    def add_item(
        self,
        session_id: str,
        product: ProductSnapshot,
        user_id: UUID | None = None,
        quantity: int = 1,
    ) -> List[CartRow]:
        if quantity <= 0:
            raise InvalidInput("Quantity must be greater than 0")

        unit_price = self._unit_price(product)

        with self.lock_service.cart_lock(self.company_id, session_id):
            cart = self.repo.get_open_cart(session_id, self.company_id)

            if not cart:
                cart = self.repo.create_cart(
                    CartModel(
                        company_id=self.company_id,
                        session_id=session_id,
                        user_id=user_id,
                        subtotal=unit_price,
                    )
                )
                logger.info(f"Created cart {cart.id} for session {session_id}")
            elif user_id and not cart.user_id:
                cart.user_id = user_id

            item = self.repo.get_active_item(cart.id, product.id)

            if item:
                #keeps the unit price captured on first add
                new_quantity = max(item.quantity + quantity, 0)
                logger.info(
                    f"Product {product.id} already in cart {cart.id}, "
                    f"quantity {item.quantity} -> {new_quantity}"
                )
                item.quantity = new_quantity
                item.total_price = line_total(item.unit_price, new_quantity)
            else:
                logger.info(f"Adding product {product.id} to cart {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product.id,
                        unit_price=unit_price,
                        quantity=quantity,
                        total_price=line_total(unit_price, quantity),
                    )
                )

            self.recompute(cart)
            self.repo.commit()

        return self._rows(cart)

    def remove_item(self, session_id: str, product_id: UUID) -> List[CartRow]:
        with self.lock_service.cart_lock(self.company_id, session_id):
            cart = self.repo.get_open_cart(session_id, self.company_id)
            if not cart:
                logger.info(f"No cart for session {session_id}, nothing to remove")
                return []

            removed = self.repo.soft_delete_items(cart.id, product_id, utcnow())
            logger.info(f"Removed product {product_id} from cart {cart.id} ({removed} rows)")

            if self._drop_if_empty(cart):
                return []

            self.recompute(cart)
            self.repo.commit()

        return self._rows(cart)

    def decrement_quantity(self, session_id: str, product_id: UUID) -> List[CartRow]:
        with self.lock_service.cart_lock(self.company_id, session_id):
            cart = self.repo.get_open_cart(session_id, self.company_id)
            if not cart:
                return []

            item = self.repo.get_active_item(cart.id, product_id)
            if item and item.quantity <= 1:
                #never leave a zero-quantity line behind
                item.deleted_at = utcnow()
                self.db.flush()
                logger.info(f"Product {product_id} removed from cart {cart.id} by decrement")
                if self._drop_if_empty(cart):
                    return []
            elif item:
                item.quantity = max(item.quantity - 1, 0)
                item.total_price = line_total(item.unit_price, item.quantity)
                logger.info(f"Product {product_id} in cart {cart.id} decremented to {item.quantity}")

            self.recompute(cart)
            self.repo.commit()

        return self._rows(cart)

    def recalculate(self, session_id: str) -> List[CartRow]:
        with self.lock_service.cart_lock(self.company_id, session_id):
            cart = self.get_open_cart_or_404(session_id)
            self.recompute(cart)
            self.repo.commit()

        return self._rows(cart)

    def save_checkout_data(self, session_id: str, data: CheckoutDataIn) -> List[CartRow]:
        with self.lock_service.cart_lock(self.company_id, session_id):
            cart = self.get_open_cart_or_404(session_id)

            if data.user_id is not None:
                cart.user_id = data.user_id
            if data.shipping_address_id is not None:
                cart.shipping_address_id = data.shipping_address_id
            if data.delivery_instruction is not None:
                cart.delivery_instruction = data.delivery_instruction
            if data.payment_method is not None:
                cart.payment_method = data.payment_method.value

            self.repo.save_cart(cart)
            self.repo.commit()
            logger.info(f"Checkout data saved for cart {cart.id}")

        return self.find_cart(CartLookup.SESSION, session_id)

    # =====================================================
    # helpers
    # =====================================================
    def _unit_price(self, product: ProductSnapshot) -> Decimal:
        if product.price is None:
            price = self.catalog.get_unit_price(product.id, self.company_id)
            if price is None:
                raise NotFound("Product not found")
        else:
            price = product.price

        price = D(price)
        if price < 0:
            raise InvalidInput("Unit price cannot be negative")
        return price

    def _drop_if_empty(self, cart: CartModel) -> bool:
        """Hard-delete the cart once its last live item is gone."""
        if self.repo.count_active_items(cart.id) > 0:
            return False

        self.repo.delete_cart(cart)
        self.repo.commit()
        logger.info(f"Cart {cart.id} is empty, deleted")
        return True
