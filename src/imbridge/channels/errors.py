"""
结构化 IM 错误

各平台的错误信封字段不同（errcode/errmsg 与 code/msg），
适配器统一转换为这里的异常，调用方无需关心平台字段名。

Usage:
    from imbridge.channels.errors import IMError, UpstreamError

    try:
        client.send_message(["zhangsan"], [], Message.text("hello"))
    except UpstreamError as e:
        logger.error(f"{e.provider} rejected message: {e.code} {e.message}")
"""

from enum import Enum
from typing import Any


class ErrorType(Enum):
    """错误类型"""

    TRANSPORT = "transport"  # 连接失败、超时、响应无法解码
    AUTH = "auth"  # 鉴权接口返回非零错误码
    CONTENT_MISMATCH = "content_mismatch"  # 消息类型与内容不匹配
    UNSUPPORTED_TYPE = "unsupported_type"  # 平台未实现该消息类型
    UPSTREAM = "upstream"  # 业务接口返回非零错误码
    INVALID_RECIPIENT = "invalid_recipient"  # 接收人为空
    DIRECTORY_PARSE = "directory_parse"  # 通讯录字段无法解析
    CONFIG = "config"  # 客户端缺少必需配置


class IMError(Exception):
    """
    IM 适配层错误基类。

    Attributes:
        error_type: 错误类型
        provider: 平台名称（wecom / dingtalk / feishu），与平台无关时为空
        message: 错误描述（平台返回的 errmsg/msg 原样保留）
        code: 平台返回的错误码
        details: 其他上下文
    """

    error_type: ErrorType = ErrorType.UPSTREAM

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.provider = provider
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self._format())

    def _format(self) -> str:
        prefix = f"[{self.provider}] " if self.provider else ""
        suffix = f" (code={self.code})" if self.code is not None else ""
        return f"{prefix}{self.message}{suffix}"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error": self.error_type.value,
            "provider": self.provider,
            "message": self.message,
        }
        if self.code is not None:
            result["code"] = self.code
        if self.details:
            result["details"] = self.details
        return result


class TransportError(IMError):
    """HTTP 请求失败（连接、超时、非 JSON 响应）"""

    error_type = ErrorType.TRANSPORT


class AuthError(IMError):
    """获取 access token 失败"""

    error_type = ErrorType.AUTH


class ContentMismatchError(IMError):
    """消息内容与声明的类型不一致"""

    error_type = ErrorType.CONTENT_MISMATCH


class UnsupportedTypeError(IMError):
    """平台不支持该消息类型"""

    error_type = ErrorType.UNSUPPORTED_TYPE

    def __init__(self, msg_type: str, provider: str) -> None:
        self.msg_type = msg_type
        super().__init__(
            f"unsupported message type '{msg_type}' for {provider}",
            provider=provider,
            details={"type": msg_type},
        )


class UpstreamError(IMError):
    """业务接口返回错误"""

    error_type = ErrorType.UPSTREAM


class InvalidRecipientError(IMError):
    """接收人列表不合法"""

    error_type = ErrorType.INVALID_RECIPIENT


class DirectoryParseError(IMError):
    """通讯录数据无法转换为统一模型（严格模式）"""

    error_type = ErrorType.DIRECTORY_PARSE


class ConfigError(IMError):
    """客户端缺少调用该接口所需的配置（如钉钉 agent_id）"""

    error_type = ErrorType.CONFIG
