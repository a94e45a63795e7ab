#import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.shipping_address import ShippingAddressModel
from storefront.data.models.product import ProductModel
from storefront.data.models.tax import TaxModel
from storefront.data.models.coupon import CouponModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.payment import PaymentModel
from storefront.data.models.sequence import SequenceModel

__all__ = [
    "UserModel",
    "ShippingAddressModel",
    "ProductModel",
    "TaxModel",
    "CouponModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentModel",
    "SequenceModel",
]
