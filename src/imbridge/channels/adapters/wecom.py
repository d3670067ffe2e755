"""
企业微信适配器

基于企业微信服务端 API 实现:
- access_token 获取与缓存
- 应用消息发送（text/image/voice/video/file/textcard/news/markdown 全部 8 种）
- 部门列表、根部门用户列表（递归子部门）

参考文档:
- 获取 access_token: https://developer.work.weixin.qq.com/document/path/91039
- 发送应用消息: https://developer.work.weixin.qq.com/document/path/90236
- 获取部门列表: https://developer.work.weixin.qq.com/document/path/90208
- 获取部门成员详情: https://developer.work.weixin.qq.com/document/path/90201
"""

import logging
from dataclasses import dataclass

from ..directory import parse_department_id, stringify_ids
from ..errors import AuthError, InvalidRecipientError, UpstreamError
from ..token import DEFAULT_REFRESH_MARGIN, TokenCache, read_token_response
from ..types import (
    Department,
    FileContent,
    ImageContent,
    MarkdownContent,
    Message,
    MessageType,
    NewsContent,
    TextCardContent,
    User,
    VideoContent,
    VoiceContent,
)
from ...utils.http import DEFAULT_TIMEOUT, JSONTransport, join_ids

logger = logging.getLogger(__name__)


@dataclass
class WeComConfig:
    """企业微信配置"""

    corp_id: str
    corp_secret: str
    agent_id: str | None = None
    strict_department_ids: bool = False


class WeComClient:
    """
    企业微信客户端

    支持:
    - 全部 8 种消息类型
    - 按用户、按部门发送（touser / toparty 用 "|" 拼接）
    - 部门列表、根部门（ID=1，含子部门）用户列表

    注意: 用户列表只请求一次，不做分页聚合。
    """

    channel_name = "wecom"

    API_BASE = "https://qyapi.weixin.qq.com/cgi-bin"
    ROOT_DEPARTMENT_ID = 1

    def __init__(
        self,
        corp_id: str,
        corp_secret: str,
        agent_id: str | None = None,
        api_base: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        token_margin: int = DEFAULT_REFRESH_MARGIN,
        strict_department_ids: bool = False,
        transport: JSONTransport | None = None,
    ):
        """
        Args:
            corp_id: 企业 ID
            corp_secret: 应用 Secret
            agent_id: 应用 AgentId（发送应用消息时携带）
            api_base: API 地址（默认官方地址）
            timeout: 请求超时（秒）
            token_margin: token 提前过期的秒数
            strict_department_ids: 部门 ID 无法解析时抛错而不是置 0
            transport: 自定义 HTTP 传输（测试用）
        """
        self.config = WeComConfig(
            corp_id=corp_id,
            corp_secret=corp_secret,
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
        """请求 gettoken 接口"""
        data = self._transport.get_json(
            f"{self.api_base}/gettoken",
            params={
                "corpid": self.config.corp_id,
                "corpsecret": self.config.corp_secret,
            },
        )
        errcode = data.get("errcode", 0)
        if errcode != 0:
            logger.error(f"WeCom: failed to get access token: {data.get('errmsg')}")
            raise AuthError(
                data.get("errmsg", ""), provider=self.channel_name, code=errcode
            )
        return read_token_response(data, "access_token", "expires_in", self.channel_name)

    def _get_access_token(self) -> str:
        return self._token.get()

    def _check(self, data: dict, action: str) -> dict:
        """检查业务接口返回的 errcode"""
        errcode = data.get("errcode", 0)
        if errcode != 0:
            logger.error(f"WeCom: {action} failed: {errcode} {data.get('errmsg')}")
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
        """发送应用消息"""
        if not to_user_ids:
            raise InvalidRecipientError(
                "to_user_ids cannot be empty", provider=self.channel_name
            )

        payload = self._convert_message(msg)
        token = self._get_access_token()

        body = {
            "touser": join_ids(to_user_ids),
            "toparty": join_ids(to_dept_ids),
            "msgtype": msg.type.value,
        }
        if self.config.agent_id:
            agent_id = self.config.agent_id
            body["agentid"] = int(agent_id) if str(agent_id).isdigit() else agent_id
        body.update(payload)

        data = self._transport.post_json(
            f"{self.api_base}/message/send",
            body,
            params={"access_token": token},
        )
        self._check(data, "send message")
        logger.info(
            f"WeCom: sent {msg.type.value} message to {len(to_user_ids)} user(s), "
            f"{len(to_dept_ids or [])} department(s)"
        )

    def _convert_message(self, msg: Message) -> dict:
        """统一消息转为企业微信消息体（msgtype 之外的字段）"""
        content = msg.content

        if msg.type == MessageType.TEXT:
            return {"text": {"content": content}}

        if msg.type == MessageType.IMAGE:
            image: ImageContent = content
            return {"image": {"media_id": image.media_id}}

        if msg.type == MessageType.VOICE:
            voice: VoiceContent = content
            return {"voice": {"media_id": voice.media_id}}

        if msg.type == MessageType.VIDEO:
            video: VideoContent = content
            return {
                "video": {
                    "media_id": video.media_id,
                    "title": video.title,
                    "description": video.description,
                }
            }

        if msg.type == MessageType.FILE:
            file: FileContent = content
            return {"file": {"media_id": file.media_id}}

        if msg.type == MessageType.TEXTCARD:
            card: TextCardContent = content
            return {
                "textcard": {
                    "title": card.title,
                    "description": card.description,
                    "url": card.url,
                    "btntxt": card.button_text,
                }
            }

        if msg.type == MessageType.NEWS:
            news: NewsContent = content
            return {
                "news": {
                    "articles": [
                        {
                            "title": article.title,
                            "description": article.description,
                            "url": article.url,
                            "picurl": article.pic_url,
                        }
                        for article in news.articles
                    ]
                }
            }

        # MessageType.MARKDOWN
        markdown: MarkdownContent = content
        return {"markdown": {"content": markdown.content}}

    # ==================== 通讯录 ====================

    def get_departments(self) -> list[Department]:
        """获取部门列表"""
        token = self._get_access_token()
        data = self._transport.get_json(
            f"{self.api_base}/department/list",
            params={"access_token": token},
        )
        self._check(data, "list departments")
        return self._normalize_departments(data.get("department") or [])

    def get_users(self) -> list[User]:
        """获取根部门（含子部门）下的用户"""
        token = self._get_access_token()
        data = self._transport.get_json(
            f"{self.api_base}/user/list",
            params={
                "access_token": token,
                "department_id": self.ROOT_DEPARTMENT_ID,
                "fetch_child": 1,
            },
        )
        self._check(data, "list users")
        return self._normalize_users(data.get("userlist") or [])

    def _normalize_departments(self, items: list[dict]) -> list[Department]:
        return [
            Department(
                id=parse_department_id(
                    item.get("id"),
                    self.channel_name,
                    strict=self.config.strict_department_ids,
                ),
                name=item.get("name", ""),
            )
            for item in items
        ]

    def _normalize_users(self, items: list[dict]) -> list[User]:
        return [
            User(
                id=item.get("userid", ""),
                name=item.get("name", ""),
                phone=item.get("mobile", ""),
                dept_ids=stringify_ids(item.get("department")),
            )
            for item in items
        ]

    def close(self) -> None:
        self._transport.close()
