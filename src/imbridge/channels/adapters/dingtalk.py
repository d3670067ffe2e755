"""
钉钉适配器

基于钉钉旧版服务端 API (oapi.dingtalk.com) 实现:
- access_token 获取与缓存 (gettoken)
- 工作通知发送 (asyncsend_v2)，仅支持 text / image
- 部门列表、根部门用户列表（首页 100 人）

参考文档:
- 获取企业内部应用 access_token: https://open.dingtalk.com/document/orgapp/obtain-orgapp-token
- 发送工作通知: https://open.dingtalk.com/document/orgapp/asynchronous-sending-of-enterprise-session-messages
"""

import logging
from dataclasses import dataclass

from ..directory import parse_department_id, stringify_ids
from ..errors import (
    AuthError,
    ConfigError,
    InvalidRecipientError,
    UnsupportedTypeError,
    UpstreamError,
)
from ..token import DEFAULT_REFRESH_MARGIN, TokenCache, read_token_response
from ..types import Department, ImageContent, Message, MessageType, User
from ...utils.http import DEFAULT_TIMEOUT, JSONTransport, join_ids

logger = logging.getLogger(__name__)


@dataclass
class DingTalkConfig:
    """钉钉配置"""

    app_key: str
    app_secret: str
    agent_id: str | None = None
    strict_department_ids: bool = False


class DingTalkClient:
    """
    钉钉客户端

    支持消息类型: text, image
    userid_list 用逗号拼接；部门 ID 不参与发送。
    """

    channel_name = "dingtalk"

    API_BASE = "https://oapi.dingtalk.com"
    ROOT_DEPARTMENT_ID = 1
    PAGE_SIZE = 100

    def __init__(
        self,
        app_key: str,
        app_secret: str,
        agent_id: str | None = None,
        api_base: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        token_margin: int = DEFAULT_REFRESH_MARGIN,
        strict_department_ids: bool = False,
        transport: JSONTransport | None = None,
    ):
        """
        Args:
            app_key: 应用 AppKey (Client ID)
            app_secret: 应用 AppSecret (Client Secret)
            agent_id: 应用 AgentId（发送工作通知时必填）
        """
        self.config = DingTalkConfig(
            app_key=app_key,
            app_secret=app_secret,
            agent_id=agent_id,
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
        data = self._transport.get_json(
            f"{self.api_base}/gettoken",
            params={
                "appkey": self.config.app_key,
                "appsecret": self.config.app_secret,
            },
        )
        errcode = data.get("errcode", 0)
        if errcode != 0:
            logger.error(f"DingTalk: failed to get access token: {data.get('errmsg')}")
            raise AuthError(
                data.get("errmsg", ""), provider=self.channel_name, code=errcode
            )
        return read_token_response(data, "access_token", "expires_in", self.channel_name)

    def _get_access_token(self) -> str:
        return self._token.get()

    def _check(self, data: dict, action: str) -> dict:
        errcode = data.get("errcode", 0)
        if errcode != 0:
            logger.error(f"DingTalk: {action} failed: {errcode} {data.get('errmsg')}")
            raise UpstreamError(
                data.get("errmsg", ""), provider=self.channel_name, code=errcode
            )
        return data

    # ==================== 消息发送 ====================

    def send_message(
        self,
        to_user_ids: list[str],
        to_dept_ids: list[str],
        msg: Message,
    ) -> None:
        """发送工作通知"""
        if not to_user_ids:
            raise InvalidRecipientError(
                "to_user_ids cannot be empty", provider=self.channel_name
            )
        if not self.config.agent_id:
            raise ConfigError(
                "agent_id is required to send work notifications",
                provider=self.channel_name,
            )
        if to_dept_ids:
            logger.warning(
                f"DingTalk: department recipients are not supported, "
                f"ignoring {len(to_dept_ids)} department id(s)"
            )

        payload = self._convert_message(msg)
        token = self._get_access_token()

        agent_id = self.config.agent_id
        body = {
            "agent_id": int(agent_id) if str(agent_id).isdigit() else agent_id,
            "userid_list": join_ids(to_user_ids, sep=","),
            "msg": payload,
        }

        data = self._transport.post_json(
            f"{self.api_base}/topapi/message/corpconversation/asyncsend_v2",
            body,
            params={"access_token": token},
        )
        self._check(data, "send message")
        logger.info(
            f"DingTalk: sent {msg.type.value} message to {len(to_user_ids)} user(s)"
        )

    def _convert_message(self, msg: Message) -> dict:
        """统一消息转为钉钉 msg 字段"""
        if msg.type == MessageType.TEXT:
            return {"msgtype": "text", "text": {"content": msg.content}}

        if msg.type == MessageType.IMAGE:
            image: ImageContent = msg.content
            return {"msgtype": "image", "image": {"media_id": image.media_id}}

        raise UnsupportedTypeError(msg.type.value, provider=self.channel_name)

    # ==================== 通讯录 ====================

    def get_departments(self) -> list[Department]:
        """获取部门列表"""
        token = self._get_access_token()
        data = self._transport.get_json(
            f"{self.api_base}/department/list",
            params={"access_token": token},
        )
        self._check(data, "list departments")
        return [
            Department(
                id=parse_department_id(
                    item.get("id"),
                    self.channel_name,
                    strict=self.config.strict_department_ids,
                ),
                name=item.get("name", ""),
            )
            for item in data.get("department") or []
        ]

    def get_users(self) -> list[User]:
        """获取根部门下的用户（仅第一页）"""
        token = self._get_access_token()
        data = self._transport.get_json(
            f"{self.api_base}/user/listbypage",
            params={
                "access_token": token,
                "department_id": self.ROOT_DEPARTMENT_ID,
                "offset": 0,
                "size": self.PAGE_SIZE,
            },
        )
        self._check(data, "list users")
        return [
            User(
                id=item.get("userid", ""),
                name=item.get("name", ""),
                phone=item.get("mobile", ""),
                dept_ids=stringify_ids(item.get("department")),
            )
            for item in data.get("userlist") or []
        ]

    def close(self) -> None:
        self._transport.close()
