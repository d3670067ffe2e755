"""
JSON over HTTP 传输

适配器只依赖 get_json / post_json 两个方法:
- 固定超时（默认 10 秒），不做重试
- 返回解码后的 JSON 字典，业务错误码由适配器自行检查
- 连接失败、超时、响应无法解码统一抛出 TransportError
"""

import json
import logging
from typing import Any

import httpx

from ..channels.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
JSON_CONTENT_TYPE = "application/json;charset=utf-8"


def _safe_url(response: httpx.Response) -> httpx.URL:
    """去掉查询参数的 URL（查询参数里有 secret 和 access_token）"""
    return response.url.copy_with(query=None)


def join_ids(ids: list[str] | None, sep: str = "|") -> str:
    """拼接 ID 列表，空列表返回空字符串"""
    if not ids:
        return ""
    return sep.join(ids)


class JSONTransport:
    """
    阻塞式 JSON HTTP 客户端

    每个适配器持有一个实例；可注入自定义 httpx.Client（测试或代理场景）。
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
        provider: str = "",
    ):
        self.timeout = timeout
        self.provider = provider
        self._client = client or httpx.Client(timeout=timeout)
        self._owns_client = client is None

    def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict:
        """GET 请求并解析 JSON"""
        logger.debug(f"GET {url}")
        try:
            response = self._client.get(
                url, params=params, headers=headers, timeout=self.timeout
            )
        except httpx.HTTPError as e:
            raise TransportError(
                f"GET {url} failed: {e}", provider=self.provider
            ) from e
        return self._decode(response)

    def post_json(
        self,
        url: str,
        body: Any,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict:
        """POST JSON 请求并解析 JSON"""
        request_headers = {"Content-Type": JSON_CONTENT_TYPE}
        if headers:
            request_headers.update(headers)

        logger.debug(f"POST {url}")
        try:
            response = self._client.post(
                url,
                params=params,
                content=json.dumps(body, ensure_ascii=False).encode("utf-8"),
                headers=request_headers,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise TransportError(
                f"POST {url} failed: {e}", provider=self.provider
            ) from e
        return self._decode(response)

    def _decode(self, response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                f"invalid JSON response (HTTP {response.status_code}) from {_safe_url(response)}",
                provider=self.provider,
                details={"status_code": response.status_code},
            ) from e
        if not isinstance(data, dict):
            raise TransportError(
                f"unexpected JSON payload from {_safe_url(response)}: {type(data).__name__}",
                provider=self.provider,
            )
        return data

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "JSONTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
