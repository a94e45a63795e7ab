# storefront/domain/enums.py
from enum import Enum


class CartStatus(str, Enum):
    IN_PROGRESS = "In Progress"
    ORDERED = "Ordered"
    CANCELED = "Canceled"
    DELIVERED = "Delivered"


class OrderStatus(str, Enum):
    ORDERED = "Ordered"
    CANCELED = "Canceled"
    DELIVERED = "Delivered"


class PaymentMethod(str, Enum):
    CARD = "card"
    WALLET = "wallet"
    COD = "cod"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class RecordStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class CartLookup(str, Enum):
    """How findCart resolves its value."""

    SESSION = "session"
    ORDER = "order"
    ID = "id"


class BulkAction(str, Enum):
    DELETE = "delete"
    RESTORE = "restore"
    ORDERED = "Ordered"
    CANCELED = "Canceled"
    DELIVERED = "Delivered"
