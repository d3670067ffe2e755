"""将收到的请求体转发到目标 URL"""

import logging

import httpx

from ..utils.http import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

FORWARD_FAILED_STATUS = 500


def forward_payload(
    target_url: str,
    body: bytes,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> int:
    """
    以 application/json 转发请求体

    Returns:
        目标返回的状态码；请求失败时返回 500
    """
    owns_client = client is None
    client = client or httpx.Client(timeout=timeout)
    try:
        response = client.post(
            target_url,
            content=body,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
        return response.status_code
    except httpx.HTTPError as e:
        logger.warning(f"Relay: forwarding to {target_url} failed: {e}")
        return FORWARD_FAILED_STATUS
    finally:
        if owns_client:
            client.close()
