"""Token 缓存测试"""

import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from imbridge.channels import AuthError, TokenCache
from imbridge.channels.token import read_token_response


class TestTokenCache:
    """token 复用与刷新"""

    def test_refresh_when_empty(self):
        fetch = MagicMock(return_value=("abc", 7200))
        cache = TokenCache(fetch, provider="test")

        with patch("imbridge.channels.token.time") as mock_time:
            mock_time.time.return_value = 1000.0
            assert cache.get() == "abc"

        fetch.assert_called_once()
        assert cache.token.expires_at == 1000.0 + 7200 - 60

    def test_cached_token_reused(self):
        fetch = MagicMock(return_value=("abc", 7200))
        cache = TokenCache(fetch)
        cache.set("cached", time.time() + 3600)

        assert cache.get() == "cached"
        assert cache.get() == "cached"
        fetch.assert_not_called()

    def test_expired_token_refreshed_once(self):
        fetch = MagicMock(return_value=("new", 600))
        cache = TokenCache(fetch)
        cache.set("old", time.time() - 1)

        assert cache.get() == "new"
        assert cache.get() == "new"
        fetch.assert_called_once()

    def test_custom_margin(self):
        fetch = MagicMock(return_value=("abc", 100))
        cache = TokenCache(fetch, margin=10)

        with patch("imbridge.channels.token.time") as mock_time:
            mock_time.time.return_value = 50.0
            cache.get()

        assert cache.token.expires_at == 140.0

    def test_auth_error_keeps_cache_empty(self):
        fetch = MagicMock(side_effect=AuthError("invalid secret", provider="test", code=40001))
        cache = TokenCache(fetch)

        with pytest.raises(AuthError):
            cache.get()
        assert cache.token.value == ""

    def test_invalidate(self):
        fetch = MagicMock(side_effect=[("a", 7200), ("b", 7200)])
        cache = TokenCache(fetch)

        assert cache.get() == "a"
        cache.invalidate()
        assert cache.get() == "b"

    def test_concurrent_refresh_single_flight(self):
        calls = []

        def slow_fetch():
            calls.append(1)
            time.sleep(0.05)
            return "shared", 7200

        cache = TokenCache(slow_fetch)
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            results.append(cache.get())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert results == ["shared"] * 8


class TestReadTokenResponse:
    def test_reads_fields(self):
        data = {"errcode": 0, "access_token": "abc", "expires_in": "7200"}
        assert read_token_response(data, "access_token", "expires_in", "wecom") == ("abc", 7200)

    @pytest.mark.parametrize(
        "data",
        [
            {"errcode": 0},
            {"errcode": 0, "access_token": "", "expires_in": 7200},
            {"errcode": 0, "access_token": "abc"},
            {"errcode": 0, "access_token": "abc", "expires_in": None},
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(AuthError) as exc_info:
            read_token_response(data, "access_token", "expires_in", "dingtalk")
        assert exc_info.value.provider == "dingtalk"
