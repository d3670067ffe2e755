"""
统一消息与通讯录类型定义

定义跨平台通用的数据结构:
- MessageType: 消息类型标签
- Message: 带类型标签的消息（类型与内容在构造时校验）
- *Content: 各类型对应的消息内容
- Department / User: 统一的通讯录模型
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import ContentMismatchError


class MessageType(Enum):
    """消息类型"""

    TEXT = "text"  # 纯文本
    IMAGE = "image"  # 图片
    VOICE = "voice"  # 语音
    VIDEO = "video"  # 视频
    FILE = "file"  # 文件
    TEXTCARD = "textcard"  # 文本卡片
    NEWS = "news"  # 图文
    MARKDOWN = "markdown"  # Markdown


# ==================== 消息内容 ====================


@dataclass(frozen=True)
class ImageContent:
    """图片消息"""

    media_id: str  # 媒体文件 ID


@dataclass(frozen=True)
class VoiceContent:
    """语音消息"""

    media_id: str
    duration: int = 0  # 时长（秒）


@dataclass(frozen=True)
class VideoContent:
    """视频消息"""

    media_id: str
    title: str = ""
    description: str = ""


@dataclass(frozen=True)
class FileContent:
    """文件消息"""

    media_id: str


@dataclass(frozen=True)
class TextCardContent:
    """文本卡片"""

    title: str
    description: str
    url: str
    button_text: str = ""


@dataclass(frozen=True)
class NewsArticle:
    """图文消息中的单篇文章"""

    title: str
    description: str = ""
    url: str = ""
    pic_url: str = ""


@dataclass(frozen=True)
class NewsContent:
    """图文消息，文章顺序即展示顺序"""

    articles: tuple[NewsArticle, ...] = ()


@dataclass(frozen=True)
class MarkdownContent:
    """Markdown 消息"""

    content: str


# 每种消息类型唯一合法的内容类型
CONTENT_TYPES: dict[MessageType, type] = {
    MessageType.TEXT: str,
    MessageType.IMAGE: ImageContent,
    MessageType.VOICE: VoiceContent,
    MessageType.VIDEO: VideoContent,
    MessageType.FILE: FileContent,
    MessageType.TEXTCARD: TextCardContent,
    MessageType.NEWS: NewsContent,
    MessageType.MARKDOWN: MarkdownContent,
}


@dataclass(frozen=True)
class Message:
    """
    统一消息格式（发送）

    type 与 content 必须匹配，否则构造时抛出 ContentMismatchError。
    推荐使用 Message.text() / Message.image() 等工厂方法构造。
    """

    type: MessageType
    content: Any

    def __post_init__(self):
        msg_type = self.type
        if not isinstance(msg_type, MessageType):
            msg_type = MessageType(msg_type)
            object.__setattr__(self, "type", msg_type)

        expected = CONTENT_TYPES[msg_type]
        if not isinstance(self.content, expected):
            raise ContentMismatchError(
                f"invalid content for {msg_type.value} message: "
                f"expected {expected.__name__}, got {type(self.content).__name__}",
                details={"type": msg_type.value},
            )

    @classmethod
    def text(cls, text: str) -> "Message":
        return cls(MessageType.TEXT, text)

    @classmethod
    def image(cls, media_id: str) -> "Message":
        return cls(MessageType.IMAGE, ImageContent(media_id=media_id))

    @classmethod
    def voice(cls, media_id: str, duration: int = 0) -> "Message":
        return cls(MessageType.VOICE, VoiceContent(media_id=media_id, duration=duration))

    @classmethod
    def video(cls, media_id: str, title: str = "", description: str = "") -> "Message":
        return cls(
            MessageType.VIDEO,
            VideoContent(media_id=media_id, title=title, description=description),
        )

    @classmethod
    def file(cls, media_id: str) -> "Message":
        return cls(MessageType.FILE, FileContent(media_id=media_id))

    @classmethod
    def textcard(
        cls, title: str, description: str, url: str, button_text: str = ""
    ) -> "Message":
        return cls(
            MessageType.TEXTCARD,
            TextCardContent(
                title=title, description=description, url=url, button_text=button_text
            ),
        )

    @classmethod
    def news(cls, articles: list[NewsArticle]) -> "Message":
        return cls(MessageType.NEWS, NewsContent(articles=tuple(articles)))

    @classmethod
    def markdown(cls, content: str) -> "Message":
        return cls(MessageType.MARKDOWN, MarkdownContent(content=content))

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        """
        从字典构造消息（HTTP API / CLI 使用）

        text 的 content 为字符串，其他类型为对应字段的字典，
        news 为 {"articles": [{...}, ...]}。
        """
        msg_type = MessageType(data["type"])
        raw = data.get("content")

        if msg_type == MessageType.TEXT or not isinstance(raw, dict):
            return cls(msg_type, raw)

        try:
            if msg_type == MessageType.NEWS:
                articles = tuple(NewsArticle(**a) for a in raw.get("articles", []))
                content = NewsContent(articles=articles)
            else:
                content = CONTENT_TYPES[msg_type](**raw)
        except TypeError as e:
            raise ContentMismatchError(
                f"invalid content for {msg_type.value} message: {e}",
                details={"type": msg_type.value},
            ) from e
        return cls(msg_type, content)


# ==================== 通讯录 ====================


@dataclass
class Department:
    """部门"""

    id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass
class User:
    """
    用户

    dept_ids 保持平台返回的顺序，数字部门 ID 转为字符串。
    """

    id: str
    name: str
    phone: str = ""
    dept_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "dept_ids": list(self.dept_ids),
        }
