"""
飞书适配器

基于飞书开放平台服务端 API 实现:
- tenant_access_token 获取与缓存（自建应用）
- 消息发送 (message/v4/send)，仅支持 text / image，单用户
- 部门列表、用户列表（首页 100 人）

参考文档:
- 自建应用获取 tenant_access_token: https://open.feishu.cn/document/server-docs/authentication-management/access-token/tenant_access_token_internal
- 通讯录: https://open.feishu.cn/document/server-docs/contact-v3/resources
"""

import logging
from dataclasses import dataclass

from ..directory import parse_department_id
from ..errors import AuthError, InvalidRecipientError, UnsupportedTypeError, UpstreamError
from ..token import DEFAULT_REFRESH_MARGIN, TokenCache, read_token_response
from ..types import Department, ImageContent, Message, MessageType, User
from ...utils.http import DEFAULT_TIMEOUT, JSONTransport

logger = logging.getLogger(__name__)


@dataclass
class FeishuConfig:
    """飞书配置"""

    app_id: str
    app_secret: str
    strict_department_ids: bool = False


class FeishuClient:
    """
    飞书客户端

    限制:
    - 只发送给 to_user_ids 中的第一个用户，其余用户和全部部门 ID 被忽略
    - 支持消息类型: text, image（图片字段为 image_key）
    - 部门 ID 为字符串，转为整数失败时置 0 并记录警告
    """

    channel_name = "feishu"

    API_BASE = "https://open.feishu.cn/open-apis"
    PAGE_SIZE = 100

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        api_base: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        token_margin: int = DEFAULT_REFRESH_MARGIN,
        strict_department_ids: bool = False,
        transport: JSONTransport | None = None,
    ):
        """
        Args:
            app_id: 飞书应用 App ID
            app_secret: 飞书应用 App Secret
            strict_department_ids: 部门 ID 无法解析时抛出 DirectoryParseError
        """
        self.config = FeishuConfig(
            app_id=app_id,
            app_secret=app_secret,
            strict_department_ids=strict_department_ids,
        )
        self.api_base = (api_base or self.API_BASE).rstrip("/")
        self._transport = transport or JSONTransport(
            timeout=timeout, provider=self.channel_name
        )
        self._token = TokenCache(
            self._fetch_token, provider=self.channel_name, margin=token_margin
        )

    # ==================== Token 管理 ====================

    def _fetch_token(self) -> tuple[str, int]:
        data = self._transport.post_json(
            f"{self.api_base}/auth/v3/tenant_access_token/internal/",
            {"app_id": self.config.app_id, "app_secret": self.config.app_secret},
        )
        code = data.get("code", 0)
        if code != 0:
            logger.error(f"Feishu: failed to get tenant access token: {data.get('msg')}")
            raise AuthError(data.get("msg", ""), provider=self.channel_name, code=code)
        return read_token_response(
            data, "tenant_access_token", "expire", self.channel_name
        )

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token.get()}"}

    def _check(self, data: dict, action: str) -> dict:
        code = data.get("code", 0)
        if code != 0:
            logger.error(f"Feishu: {action} failed: {code} {data.get('msg')}")
            raise UpstreamError(data.get("msg", ""), provider=self.channel_name, code=code)
        return data

    # ==================== 消息发送 ====================

    def send_message(
        self,
        to_user_ids: list[str],
        to_dept_ids: list[str],
        msg: Message,
    ) -> None:
        """发送消息给单个用户"""
        if not to_user_ids:
            raise InvalidRecipientError(
                "to_user_ids cannot be empty", provider=self.channel_name
            )
        if len(to_user_ids) > 1 or to_dept_ids:
            logger.warning(
                f"Feishu: only one recipient per message, sending to {to_user_ids[0]} "
                f"and ignoring {len(to_user_ids) - 1} user(s), "
                f"{len(to_dept_ids or [])} department(s)"
            )

        content = self._convert_message(msg)
        headers = self._auth_headers()

        body = {
            "user_id": to_user_ids[0],
            "msg_type": msg.type.value,
            "content": content,
        }
        data = self._transport.post_json(
            f"{self.api_base}/message/v4/send/",
            body,
            headers=headers,
        )
        self._check(data, "send message")
        logger.info(f"Feishu: sent {msg.type.value} message to {to_user_ids[0]}")

    def _convert_message(self, msg: Message) -> dict:
        """统一消息转为飞书 content 字段"""
        if msg.type == MessageType.TEXT:
            return {"text": msg.content}

        if msg.type == MessageType.IMAGE:
            image: ImageContent = msg.content
            return {"image_key": image.media_id}

        raise UnsupportedTypeError(msg.type.value, provider=self.channel_name)

    # ==================== 通讯录 ====================

    def get_departments(self) -> list[Department]:
        """获取部门列表"""
        headers = self._auth_headers()
        data = self._transport.get_json(
            f"{self.api_base}/contact/v3/departments",
            headers=headers,
        )
        self._check(data, "list departments")
        items = (data.get("data") or {}).get("items") or []
        return [
            Department(
                id=parse_department_id(
                    item.get("department_id"),
                    self.channel_name,
                    strict=self.config.strict_department_ids,
                ),
                name=item.get("name", ""),
            )
            for item in items
        ]

    def get_users(self) -> list[User]:
        """获取用户列表（仅第一页）"""
        headers = self._auth_headers()
        data = self._transport.get_json(
            f"{self.api_base}/contact/v3/users",
            params={"page_size": self.PAGE_SIZE},
            headers=headers,
        )
        self._check(data, "list users")
        items = (data.get("data") or {}).get("items") or []
        return [
            User(
                id=item.get("user_id", ""),
                name=item.get("name", ""),
                phone=item.get("mobile", ""),
                dept_ids=list(item.get("department_ids") or []),
            )
            for item in items
        ]

    def close(self) -> None:
        self._transport.close()
