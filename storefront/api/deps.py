# storefront/api/deps.py
from functools import lru_cache

from fastapi import Header

from storefront.services.lock_service import LockService
from storefront.services.payment_gateway import PaymentGatewayClient
from storefront.utils.settings import COMPANY_ID


@lru_cache(maxsize=1)
def get_lock_service() -> LockService:
    return LockService()


@lru_cache(maxsize=1)
def get_payment_gateway() -> PaymentGatewayClient:
    return PaymentGatewayClient()


def get_company_id(x_company_id: int | None = Header(None)) -> int:
    """Tenant comes from the X-Company-Id header, default tenant otherwise."""
    return x_company_id if x_company_id is not None else COMPANY_ID
