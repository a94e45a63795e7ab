# storefront/services/lock_service.py
import uuid
from contextlib import contextmanager

import redis

from storefront.domain.errors import Conflict
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CART_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#compare-and-delete: only the holder of the token may release the key
#redis runs the script atomically, nothing gets between GET and DEL
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Per-cart lock, keyed by company and session.
    -acquire with SET NX EX (expires by itself if the holder dies)
    -release with the lua compare-and-delete
    """

    def __init__(self, url: str | None = None, ttl: int = CART_LOCK_TTL_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def cart_key(company_id: int, session_id: str) -> str:
        return f"cart:{company_id}:{session_id}:lock"

    @redis_retry()
    def acquire(self, key: str, token: str) -> bool:
        logger.info(f"Acquire lock {key}")
        #SET cart:1:abc:lock "<token>" NX EX 30
        return bool(self.redis.set(name=key, value=token, nx=True, ex=self.ttl))

    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def cart_lock(self, company_id: int, session_id: str):
        key = self.cart_key(company_id, session_id)
        token = uuid.uuid4().hex

        if not self.acquire(key, token):
            raise Conflict("Cart is being modified by another request, try again")

        try:
            yield
        finally:
            self.release(key, token)
