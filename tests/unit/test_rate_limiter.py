"""Tests for the contact sliding-window limiter and trusted proxy IP extraction."""
from unittest.mock import MagicMock, patch

import fakeredis
import pytest
import redis

from portfolio_site.core.errors import RateLimitExceeded
from portfolio_site.core.rate_limiter import (
    CONTACT_LIMIT_MESSAGE,
    _InMemoryBackend,
    _RedisBackend,
    check_contact_rate_limit,
    get_client_ip,
)

WINDOW = 15 * 60
T0 = 1_700_000_000.0


# =============================================================================
# InMemory backend tests
# =============================================================================


@pytest.fixture()
def mem_backend():
    return _InMemoryBackend()


class TestInMemoryBackend:
    def test_allows_up_to_limit(self, mem_backend):
        results = [mem_backend.hit("1.2.3.4", 5, WINDOW, T0 + i) for i in range(6)]
        assert results == [True, True, True, True, True, False]

    def test_addresses_are_independent(self, mem_backend):
        for i in range(5):
            mem_backend.hit("1.2.3.4", 5, WINDOW, T0 + i)

        assert mem_backend.hit("1.2.3.4", 5, WINDOW, T0 + 10) is False
        assert mem_backend.hit("5.6.7.8", 5, WINDOW, T0 + 10) is True

    def test_window_slides(self, mem_backend):
        for i in range(5):
            mem_backend.hit("1.2.3.4", 5, WINDOW, T0 + i * 60)

        # Oldest hit (T0) leaves the window exactly WINDOW seconds later
        assert mem_backend.hit("1.2.3.4", 5, WINDOW, T0 + WINDOW - 1) is False
        assert mem_backend.hit("1.2.3.4", 5, WINDOW, T0 + WINDOW) is True
        assert mem_backend.hit("1.2.3.4", 5, WINDOW, T0 + WINDOW + 1) is False

    def test_rejected_hits_do_not_extend_the_block(self, mem_backend):
        for _ in range(5):
            mem_backend.hit("1.2.3.4", 5, WINDOW, T0)
        for i in range(20):
            mem_backend.hit("1.2.3.4", 5, WINDOW, T0 + 100 + i)

        assert mem_backend.hit("1.2.3.4", 5, WINDOW, T0 + WINDOW) is True

    def test_reset(self, mem_backend):
        for _ in range(5):
            mem_backend.hit("1.2.3.4", 5, WINDOW, T0)
        mem_backend.reset()

        assert mem_backend.hit("1.2.3.4", 5, WINDOW, T0) is True

    def test_idle_addresses_are_dropped(self, mem_backend):
        for n in range(1000):
            mem_backend.hit(f"10.1.{n // 256}.{n % 256}", 5, WINDOW, T0)

        mem_backend.hit("203.0.113.1", 5, WINDOW, T0 + 10_000)

        assert list(mem_backend._windows) == ["203.0.113.1"]

    def test_active_addresses_survive_sweep(self, mem_backend):
        mem_backend.hit("1.2.3.4", 5, WINDOW, T0)
        mem_backend.hit("5.6.7.8", 5, WINDOW, T0 + WINDOW - 10)

        mem_backend.hit("9.9.9.9", 5, WINDOW, T0 + WINDOW)

        assert set(mem_backend._windows) == {"5.6.7.8", "9.9.9.9"}


# =============================================================================
# Redis backend tests
# =============================================================================


@pytest.fixture()
def redis_backend():
    client = fakeredis.FakeRedis(decode_responses=True)
    return _RedisBackend(client)


class TestRedisBackend:
    def test_allows_up_to_limit(self, redis_backend):
        results = [redis_backend.hit("1.2.3.4", 5, WINDOW, T0 + i) for i in range(6)]
        assert results == [True, True, True, True, True, False]

    def test_rejected_hit_not_stored(self, redis_backend):
        for i in range(7):
            redis_backend.hit("1.2.3.4", 5, WINDOW, T0 + i)

        assert redis_backend._redis.zcard("rl:contact:1.2.3.4") == 5

    def test_window_slides(self, redis_backend):
        for i in range(5):
            redis_backend.hit("1.2.3.4", 5, WINDOW, T0 + i * 60)

        assert redis_backend.hit("1.2.3.4", 5, WINDOW, T0 + WINDOW - 1) is False
        assert redis_backend.hit("1.2.3.4", 5, WINDOW, T0 + WINDOW) is True

    def test_sets_ttl(self, redis_backend):
        redis_backend.hit("1.2.3.4", 5, WINDOW, T0)
        ttl = redis_backend._redis.ttl("rl:contact:1.2.3.4")
        assert 0 < ttl <= WINDOW

    def test_reset_clears_keys(self, redis_backend):
        for i in range(5):
            redis_backend.hit("1.2.3.4", 5, WINDOW, T0 + i)
        redis_backend.reset()

        assert redis_backend._redis.exists("rl:contact:1.2.3.4") == 0
        assert redis_backend.hit("1.2.3.4", 5, WINDOW, T0 + 10) is True

    def test_counts_in_memory_while_redis_is_down(self):
        client = MagicMock()
        client.pipeline.side_effect = redis.ConnectionError("connection refused")
        backend = _RedisBackend(client)

        results = [backend.hit("1.2.3.4", 5, WINDOW, T0 + i) for i in range(6)]

        assert results == [True, True, True, True, True, False]


# =============================================================================
# Trusted proxy / get_client_ip tests
# =============================================================================


class TestGetClientIp:
    def _make_request(self, client_host="203.0.113.50", forwarded_for=None):
        req = MagicMock()
        req.client = MagicMock()
        req.client.host = client_host
        headers = {}
        if forwarded_for:
            headers["X-Forwarded-For"] = forwarded_for
        req.headers = headers
        return req

    def test_no_proxy_returns_direct_ip(self):
        req = self._make_request(client_host="203.0.113.50")
        assert get_client_ip(req) == "203.0.113.50"

    def test_untrusted_proxy_ignores_forwarded_for(self):
        """A visitor cannot dodge the limit by sending its own X-Forwarded-For."""
        req = self._make_request(client_host="203.0.113.50", forwarded_for="1.2.3.4")
        assert get_client_ip(req) == "203.0.113.50"

    def test_trusted_proxy_uses_forwarded_for(self):
        req = self._make_request(client_host="127.0.0.1", forwarded_for="203.0.113.99")
        assert get_client_ip(req) == "203.0.113.99"

    def test_trusted_proxy_chain_picks_rightmost_untrusted(self):
        req = self._make_request(
            client_host="10.0.0.1",
            forwarded_for="198.51.100.7, 203.0.113.1, 10.0.0.2",
        )
        assert get_client_ip(req) == "203.0.113.1"

    def test_no_client_returns_unknown(self):
        req = MagicMock()
        req.client = None
        req.headers = {}
        assert get_client_ip(req) == "unknown"


# =============================================================================
# Dependency tests
# =============================================================================


class TestCheckContactRateLimit:
    def _request(self, host):
        req = MagicMock()
        req.client = MagicMock()
        req.client.host = host
        req.headers = {}
        return req

    @pytest.mark.asyncio
    async def test_raises_once_over_limit(self, monkeypatch):
        monkeypatch.setattr(
            "portfolio_site.core.rate_limiter._backend", _InMemoryBackend()
        )
        monkeypatch.setattr(
            "portfolio_site.core.rate_limiter.settings.CONTACT_RATE_LIMIT", 2
        )
        req = self._request("203.0.113.8")

        await check_contact_rate_limit(req)
        await check_contact_rate_limit(req)
        with pytest.raises(RateLimitExceeded) as exc_info:
            await check_contact_rate_limit(req)

        assert exc_info.value.message == CONTACT_LIMIT_MESSAGE

    @pytest.mark.asyncio
    async def test_other_address_unaffected(self, monkeypatch):
        monkeypatch.setattr(
            "portfolio_site.core.rate_limiter._backend", _InMemoryBackend()
        )
        monkeypatch.setattr(
            "portfolio_site.core.rate_limiter.settings.CONTACT_RATE_LIMIT", 1
        )

        await check_contact_rate_limit(self._request("203.0.113.8"))
        await check_contact_rate_limit(self._request("203.0.113.9"))


# =============================================================================
# Backend selection
# =============================================================================


class TestBackendSelection:
    def test_memory_backend_by_default(self):
        with patch("portfolio_site.core.rate_limiter.settings") as mock_settings:
            mock_settings.RATE_LIMIT_BACKEND = "memory"
            from portfolio_site.core.rate_limiter import _init_backend

            assert isinstance(_init_backend(), _InMemoryBackend)

    def test_init_backend_falls_back_to_inmemory(self):
        """If Redis is unreachable, _init_backend returns InMemoryBackend."""
        with patch("portfolio_site.core.rate_limiter.settings") as mock_settings:
            mock_settings.RATE_LIMIT_BACKEND = "redis"
            mock_settings.REDIS_URL = "redis://nonexistent:9999/0"
            from portfolio_site.core.rate_limiter import _init_backend

            backend = _init_backend()
            assert isinstance(backend, _InMemoryBackend)

    def test_redis_backend_when_reachable(self):
        with patch("portfolio_site.core.rate_limiter.settings") as mock_settings, patch(
            "redis.Redis.from_url", return_value=fakeredis.FakeRedis(decode_responses=True)
        ):
            mock_settings.RATE_LIMIT_BACKEND = "redis"
            mock_settings.REDIS_URL = "redis://cache:6379/0"
            from portfolio_site.core.rate_limiter import _init_backend

            assert isinstance(_init_backend(), _RedisBackend)
