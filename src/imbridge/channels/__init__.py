"""
IM 通道模块

提供统一的消息模型、通讯录模型、错误类型和客户端接口。
平台适配器位于 imbridge.channels.adapters。
"""

from .base import IMClient
from .errors import (
    AuthError,
    ConfigError,
    ContentMismatchError,
    DirectoryParseError,
    ErrorType,
    IMError,
    InvalidRecipientError,
    TransportError,
    UnsupportedTypeError,
    UpstreamError,
)
from .token import AccessToken, TokenCache
from .types import (
    Department,
    FileContent,
    ImageContent,
    MarkdownContent,
    Message,
    MessageType,
    NewsArticle,
    NewsContent,
    TextCardContent,
    User,
    VideoContent,
    VoiceContent,
)

__all__ = [
    "IMClient",
    "AccessToken",
    "TokenCache",
    "ErrorType",
    "IMError",
    "TransportError",
    "AuthError",
    "ConfigError",
    "ContentMismatchError",
    "UnsupportedTypeError",
    "UpstreamError",
    "InvalidRecipientError",
    "DirectoryParseError",
    "MessageType",
    "Message",
    "ImageContent",
    "VoiceContent",
    "VideoContent",
    "FileContent",
    "TextCardContent",
    "NewsArticle",
    "NewsContent",
    "MarkdownContent",
    "Department",
    "User",
]
