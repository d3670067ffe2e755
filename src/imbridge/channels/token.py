"""
Access token 缓存

每个适配器实例持有一个 TokenCache:
- token 未过期时直接返回，不发请求
- 过期或为空时调用平台鉴权接口刷新
- 过期时间 = 当前时间 + 平台返回的有效期 - 安全余量（默认 60 秒）
- 刷新过程加锁，并发调用只会触发一次鉴权请求；业务请求本身不串行
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from .errors import AuthError

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_MARGIN = 60

# 返回 (token, 有效期秒数)，失败时抛出 AuthError / TransportError
TokenFetcher = Callable[[], tuple[str, int]]


def read_token_response(
    data: dict, token_key: str, ttl_key: str, provider: str
) -> tuple[str, int]:
    """
    从鉴权接口的成功响应中取出 (token, 有效期秒数)

    错误码为 0 但缺少字段或有效期不是整数时抛出 AuthError。
    """
    value = data.get(token_key)
    try:
        expires_in = int(data[ttl_key])
    except (KeyError, TypeError, ValueError):
        expires_in = None

    if not value or expires_in is None:
        logger.error(f"{provider}: malformed token response, fields: {sorted(data)}")
        raise AuthError(
            f"malformed token response: missing {token_key} or {ttl_key}",
            provider=provider,
        )
    return value, expires_in


@dataclass(frozen=True)
class AccessToken:
    """access token 及其过期时间（unix 时间戳）"""

    value: str = ""
    expires_at: float = 0.0

    def is_valid(self, now: float) -> bool:
        return bool(self.value) and now < self.expires_at


class TokenCache:
    """带过期时间的 token 缓存，刷新过程 single-flight"""

    def __init__(
        self,
        fetch: TokenFetcher,
        provider: str = "",
        margin: int = DEFAULT_REFRESH_MARGIN,
    ):
        self._fetch = fetch
        self.provider = provider
        self.margin = margin
        self._token = AccessToken()
        self._lock = threading.Lock()

    @property
    def token(self) -> AccessToken:
        return self._token

    def get(self) -> str:
        """获取有效 token，必要时刷新"""
        token = self._token
        if token.is_valid(time.time()):
            return token.value

        with self._lock:
            # 等锁期间可能已被其他线程刷新
            token = self._token
            if token.is_valid(time.time()):
                return token.value

            value, expires_in = self._fetch()
            self._token = AccessToken(
                value=value,
                expires_at=time.time() + expires_in - self.margin,
            )
            logger.info(
                f"{self.provider}: access token refreshed, expires in {expires_in}s"
            )
            return value

    def set(self, value: str, expires_at: float) -> None:
        """直接写入 token（例如从外部共享缓存恢复）"""
        with self._lock:
            self._token = AccessToken(value=value, expires_at=expires_at)

    def invalidate(self) -> None:
        """丢弃当前 token，下次调用 get() 时强制刷新"""
        with self._lock:
            self._token = AccessToken()
