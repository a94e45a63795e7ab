# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.domain.enums import DiscountType, PaymentMethod, PaymentStatus, RecordStatus

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Uniform success body: {status, message, data}."""

    status: str = "success"
    message: str
    data: Optional[T] = None


class Page(BaseModel, Generic[T]):
    total: int
    page: int
    limit: int
    items: List[T]


# =====================================================
# identity collaborator
# =====================================================
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=180)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)


class UserRead(BaseModel):
    id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AddressIn(BaseModel):
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    landmark: str = ""
    house_number: str = ""
    city: str
    state: str
    zip: str
    country: str
    is_default: bool = False


class AddressOut(AddressIn):
    id: UUID
    user_id: UUID

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# catalog
# =====================================================
class ProductOut(BaseModel):
    id: UUID
    name: str
    slug: Optional[str] = None
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class TaxIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    rate: Decimal = Field(..., description="Rate in percent")
    status: RecordStatus = RecordStatus.ACTIVE


class TaxOut(BaseModel):
    id: UUID
    company_id: int
    name: str
    rate: Decimal
    status: str
    deleted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# coupons
# =====================================================
class CouponIn(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    discount_type: DiscountType
    discount: Decimal = Field(..., gt=0)
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    status: RecordStatus = RecordStatus.ACTIVE

    @field_validator("code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        return v.strip()


class CouponOut(BaseModel):
    id: UUID
    code: str
    discount_type: str
    discount: Decimal
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    status: str

    model_config = ConfigDict(from_attributes=True)


class ApplyCouponIn(BaseModel):
    session_id: str = Field(..., min_length=1)
    coupon_code: str = Field(..., min_length=1)


class RemoveCouponIn(BaseModel):
    session_id: str = Field(..., min_length=1)


# =====================================================
# cart
# =====================================================
class ProductSnapshot(BaseModel):
    """Product as the client sees it; price is optional and falls back to the catalog."""

    id: UUID
    price: Optional[Decimal] = None


class AddItemIn(BaseModel):
    product: ProductSnapshot
    user_id: Optional[UUID] = None
    quantity: int = Field(1, description="Units to add (must be > 0)")


class CheckoutDataIn(BaseModel):
    user_id: Optional[UUID] = None
    shipping_address_id: Optional[UUID] = None
    delivery_instruction: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None


class CartItemOut(BaseModel):
    id: UUID
    product_id: UUID
    unit_price: Decimal
    quantity: int
    total_price: Decimal
    product: Optional[ProductOut] = None

    model_config = ConfigDict(from_attributes=True)


class CartRow(BaseModel):
    """
    Read model of findCart: one row per live cart item,
    cart totals repeated on every row.
    """

    cart_id: UUID
    session_id: str
    status: str
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    delivery_fee: Decimal
    total: Decimal
    payment_method: str
    delivery_instruction: Optional[str] = None
    shipping_address_id: Optional[UUID] = None
    order_id: Optional[UUID] = None
    user: Optional[UserRead] = None
    coupon: Optional[CouponOut] = None
    item: CartItemOut


# =====================================================
# orders
# =====================================================
class OrderItemOut(BaseModel):
    id: UUID
    product_id: UUID
    unit_price: Decimal
    quantity: int
    total_price: Decimal
    product: Optional[ProductOut] = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: UUID
    order_number: str
    user_id: Optional[UUID] = None
    shipping_address_id: Optional[UUID] = None
    payment_id: Optional[UUID] = None
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    delivery_fee: Decimal
    total: Decimal
    delivery_instruction: Optional[str] = None
    payment_method: str
    status: str
    created_at: datetime
    deleted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderDetailOut(OrderOut):
    """Order joined with its customer, address and items (findOrder)."""

    user: Optional[UserRead] = None
    address: Optional[AddressOut] = None
    items: List[OrderItemOut] = []


class BulkActionIn(BaseModel):
    action: str
    order_ids: List[UUID] = Field(..., min_length=1)


class InvoiceOut(BaseModel):
    """Rendered invoice PDF, served as a file rather than in an envelope."""

    order_id: UUID
    filename: str
    content: bytes


# =====================================================
# payments
# =====================================================
class PaymentIn(BaseModel):
    order_id: UUID
    payment_method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING
    amount: Decimal = Field(..., ge=0)
    payment_id: Optional[str] = None
    created_by: Optional[UUID] = None


class PaymentOut(BaseModel):
    id: UUID
    order_id: UUID
    payment_method: str
    status: str
    amount: Decimal
    payment_id: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GatewayOrderIn(BaseModel):
    order_id: UUID


class GatewayOrderOut(BaseModel):
    payment: PaymentOut
    gateway_order: dict


class SendTestEmailIn(BaseModel):
    to: str = Field(..., min_length=3)
