"""
=============================================================================
PORTFOLIO SITE - CONTACT RATE LIMITER
=============================================================================
Per-address sliding-window limiter for the contact relay.

- At most CONTACT_RATE_LIMIT accepted requests per address within
  CONTACT_RATE_WINDOW_SECONDS (5 per 15 minutes by default)
- Rejected requests do not occupy the window
- Memory backend for a single process, Redis sorted sets when several
  workers share the limit; while Redis is unreachable (at startup or
  later) hits are counted in memory
- X-Forwarded-For is honoured only when the direct peer is a trusted proxy

Usage:
    from portfolio_site.core.rate_limiter import check_contact_rate_limit

    @router.post("/contact", dependencies=[Depends(check_contact_rate_limit)])
    async def contact():
        ...
=============================================================================
"""

import ipaddress
import logging
import time
import uuid
from abc import ABC, abstractmethod
from collections import deque
from threading import Lock
from typing import Deque, Dict, Iterable, List, Optional, Union

import redis
from fastapi import Request

from portfolio_site.core.config import settings
from portfolio_site.core.errors import RateLimitExceeded

logger = logging.getLogger(__name__)

CONTACT_LIMIT_MESSAGE = "Too many contact form submissions, please try again later."

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


# =============================================================================
# WINDOW STORAGE
# =============================================================================


class _RateLimitBackend(ABC):
    """Stores the accepted-hit timestamps of each address."""

    @abstractmethod
    def hit(self, key: str, limit: int, window_seconds: int, now: float) -> bool:
        """Record a hit if the window has room. Return False when full."""

    @abstractmethod
    def reset(self) -> None:
        """Forget every address."""


class _InMemoryBackend(_RateLimitBackend):
    """Deque of timestamps per address, guarded by one lock.

    A sweep, at most once per window, drops addresses whose newest hit
    has left the window.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._windows: Dict[str, Deque[float]] = {}
        self._last_sweep: Optional[float] = None

    def hit(self, key: str, limit: int, window_seconds: int, now: float) -> bool:
        cutoff = now - window_seconds
        with self._lock:
            if self._last_sweep is None or now - self._last_sweep >= window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now

            stamps = self._windows.get(key)
            if stamps is not None:
                while stamps and stamps[0] <= cutoff:
                    stamps.popleft()
            if not stamps:
                stamps = self._windows[key] = deque()

            if len(stamps) >= limit:
                return False

            stamps.append(now)
            return True

    def _sweep(self, cutoff: float) -> None:
        # Newest stamp is last; an address is idle once it falls out
        idle = [
            key
            for key, stamps in self._windows.items()
            if not stamps or stamps[-1] <= cutoff
        ]
        for key in idle:
            del self._windows[key]

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._last_sweep = None


class _RedisBackend(_RateLimitBackend):
    """One sorted set per address, scored by hit time.

    When Redis stops answering, hits are counted in process memory until it
    comes back.
    """

    PREFIX = "rl:contact:"

    def __init__(self, redis_client) -> None:  # type: ignore[type-arg]
        self._redis = redis_client
        self._fallback = _InMemoryBackend()

    def hit(self, key: str, limit: int, window_seconds: int, now: float) -> bool:
        try:
            return self._redis_hit(key, limit, window_seconds, now)
        except redis.RedisError as exc:
            logger.warning("Contact limiter lost Redis, counting in memory: %s", exc)
            return self._fallback.hit(key, limit, window_seconds, now)

    def _redis_hit(self, key: str, limit: int, window_seconds: int, now: float) -> bool:
        zkey = f"{self.PREFIX}{key}"
        member = f"{now}:{uuid.uuid4().hex}"

        # MULTI/EXEC so concurrent workers see a consistent count
        pipe = self._redis.pipeline(transaction=True)
        pipe.zremrangebyscore(zkey, 0, now - window_seconds)
        pipe.zadd(zkey, {member: now})
        pipe.zcard(zkey)
        pipe.expire(zkey, window_seconds)
        _, _, count, _ = pipe.execute()

        if int(count) > limit:
            self._redis.zrem(zkey, member)
            return False
        return True

    def reset(self) -> None:
        self._fallback.reset()
        keys = list(self._redis.scan_iter(match=f"{self.PREFIX}*", count=500))
        if keys:
            self._redis.delete(*keys)


def _init_backend() -> _RateLimitBackend:
    """Pick the backend named by RATE_LIMIT_BACKEND."""
    if settings.RATE_LIMIT_BACKEND != "redis":
        return _InMemoryBackend()

    try:
        client = redis.Redis.from_url(
            settings.REDIS_URL, decode_responses=True, socket_connect_timeout=2
        )
        client.ping()
    except redis.RedisError as exc:
        logger.warning(
            "Contact limiter cannot reach Redis at %s, counting in memory: %s",
            settings.REDIS_URL,
            exc,
        )
        return _InMemoryBackend()

    logger.info("Contact limiter counting in Redis (%s)", settings.REDIS_URL)
    return _RedisBackend(client)


_backend: _RateLimitBackend = _init_backend()


# =============================================================================
# CLIENT ADDRESS
# =============================================================================


def _parse_networks(entries: Iterable[str]) -> List[IPNetwork]:
    networks = []
    for entry in entries:
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            logger.warning("Skipping malformed TRUSTED_PROXIES entry %r", entry)
    return networks


_trusted_networks: List[IPNetwork] = _parse_networks(settings.TRUSTED_PROXIES)


def _is_trusted_proxy(ip_str: str) -> bool:
    try:
        addr = ipaddress.ip_address(ip_str)
    except ValueError:
        return False
    return any(addr in network for network in _trusted_networks)


def get_client_ip(request: Request) -> str:
    """Address the limit is keyed on.

    Behind trusted proxies this is the rightmost X-Forwarded-For hop that
    is not itself a trusted proxy; a forwarded header from anyone else is
    ignored.
    """
    peer = request.client.host if request.client else "unknown"

    forwarded = request.headers.get("X-Forwarded-For")
    if not forwarded or not _is_trusted_proxy(peer):
        return peer

    hops = [hop.strip() for hop in forwarded.split(",")]
    untrusted = [hop for hop in hops if not _is_trusted_proxy(hop)]
    return untrusted[-1] if untrusted else hops[0]


# =============================================================================
# ROUTE DEPENDENCY
# =============================================================================


async def check_contact_rate_limit(request: Request) -> None:
    """Reject the request before validation once its address is over the limit."""
    client_ip = get_client_ip(request)
    allowed = _backend.hit(
        client_ip,
        limit=settings.CONTACT_RATE_LIMIT,
        window_seconds=settings.CONTACT_RATE_WINDOW_SECONDS,
        now=time.time(),
    )
    if not allowed:
        logger.warning("Contact rate limit exceeded ip=%s", client_ip)
        raise RateLimitExceeded(CONTACT_LIMIT_MESSAGE)


def reset_rate_limiter_state() -> None:
    """Empty every window. Used by the test suite."""
    _backend.reset()
