import logging
from functools import lru_cache

import redis

from townsquare.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_redis() -> redis.Redis:
    return redis.Redis.from_url(settings.redis_url, decode_responses=True)


class LoginThrottle:
    """Failed sign-in counter keyed by principal and client address.

    Once ``login_fail_threshold`` failures land inside ``login_fail_ttl_seconds``
    the pair is locked for ``login_lock_ttl_seconds``.
    """

    def __init__(self, client: redis.Redis) -> None:
        self.client = client

    @staticmethod
    def scope(principal: str, ip: str | None) -> str:
        return f"{principal.lower()}:{ip or 'unknown'}"

    def _keys(self, principal: str, ip: str | None) -> tuple[str, str]:
        scope = self.scope(principal, ip)
        return f"auth:login:fail:{scope}", f"auth:login:lock:{scope}"

    def is_locked(self, principal: str, ip: str | None) -> bool:
        _, lock_key = self._keys(principal, ip)
        return bool(self.client.exists(lock_key))

    def record_failure(self, principal: str, ip: str | None) -> int:
        fail_key, lock_key = self._keys(principal, ip)
        failures = int(self.client.incr(fail_key))
        if failures == 1:
            self.client.expire(fail_key, settings.login_fail_ttl_seconds)
        if failures >= settings.login_fail_threshold:
            self.client.set(lock_key, "1", ex=settings.login_lock_ttl_seconds)
            logger.warning("sign-in locked after repeated failures", extra={"principal": principal, "ip": ip})
        return failures

    def clear(self, principal: str, ip: str | None) -> None:
        self.client.delete(*self._keys(principal, ip))
