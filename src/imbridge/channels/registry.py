"""
根据配置创建 IM 客户端

只创建凭据完整的平台；同一进程内复用客户端实例，
以便共享各自的 token 缓存。
"""

import logging
import threading

from ..config import Settings
from .base import IMClient

logger = logging.getLogger(__name__)

PROVIDERS = ("wecom", "dingtalk", "feishu")


def build_clients(settings: Settings) -> dict[str, IMClient]:
    """为已配置凭据的平台创建客户端"""
    from .adapters import DingTalkClient, FeishuClient, WeComClient

    clients: dict[str, IMClient] = {}
    common = {
        "timeout": settings.http_timeout,
        "token_margin": settings.token_refresh_margin,
        "strict_department_ids": settings.strict_department_ids,
    }

    if settings.wecom_configured:
        clients["wecom"] = WeComClient(
            corp_id=settings.wecom_corp_id,
            corp_secret=settings.wecom_corp_secret,
            agent_id=settings.wecom_agent_id or None,
            api_base=settings.wecom_api_base,
            **common,
        )

    if settings.dingtalk_configured:
        clients["dingtalk"] = DingTalkClient(
            app_key=settings.dingtalk_app_key,
            app_secret=settings.dingtalk_app_secret,
            agent_id=settings.dingtalk_agent_id or None,
            api_base=settings.dingtalk_api_base,
            **common,
        )

    if settings.feishu_configured:
        clients["feishu"] = FeishuClient(
            app_id=settings.feishu_app_id,
            app_secret=settings.feishu_app_secret,
            api_base=settings.feishu_api_base,
            **common,
        )

    logger.info(f"IM clients configured: {', '.join(clients) or 'none'}")
    return clients


class ClientRegistry:
    """按平台名获取客户端，首次使用时创建"""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._clients: dict[str, IMClient] | None = None
        self._lock = threading.Lock()

    @property
    def clients(self) -> dict[str, IMClient]:
        with self._lock:
            if self._clients is None:
                self._clients = build_clients(self._settings)
            return self._clients

    def list_providers(self) -> list[str]:
        return list(self.clients)

    def get(self, provider: str) -> IMClient:
        """
        获取指定平台客户端

        Raises:
            ValueError: 未知平台或未配置凭据
        """
        if provider not in PROVIDERS:
            raise ValueError(f"unknown provider: {provider}")
        client = self.clients.get(provider)
        if client is None:
            raise ValueError(f"provider not configured: {provider}")
        return client

    def close(self) -> None:
        with self._lock:
            for client in (self._clients or {}).values():
                client.close()
            self._clients = None
