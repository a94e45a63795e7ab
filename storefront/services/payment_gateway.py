# storefront/services/payment_gateway.py
import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    PAYMENT_GATEWAY_URL,
    PAYMENT_GATEWAY_KEY_ID,
    PAYMENT_GATEWAY_KEY_SECRET,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentGatewayClient:
    """Razorpay-compatible orders API (basic auth with key id / secret)."""

    def __init__(
        self,
        base_url: str | None = None,
        key_id: str | None = None,
        key_secret: str | None = None,
        timeout: int = 5,
    ):
        self.base_url = (base_url or PAYMENT_GATEWAY_URL).rstrip("/")
        self.auth = (key_id or PAYMENT_GATEWAY_KEY_ID, key_secret or PAYMENT_GATEWAY_KEY_SECRET)
        self.timeout = timeout

    @http_retry()
    def create_order(self, amount: int, currency: str, receipt: str) -> dict:
        """amount is in the smallest currency unit"""
        url = f"{self.base_url}/orders"
        logger.info(f"PaymentGatewayClient POST {url} receipt={receipt} amount={amount}")

        resp = requests.post(
            url,
            json={"amount": amount, "currency": currency, "receipt": receipt},
            auth=self.auth,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()
