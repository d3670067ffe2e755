"""
日志处理器与过滤器

- SecretMaskingFilter: 屏蔽日志中的 secret / access_token
- ErrorOnlyHandler: error.log，只写 ERROR 及以上，按天轮转
- ColoredConsoleHandler: 按级别着色的控制台输出
"""

import logging
import os
import re
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import TextIO

# 各平台鉴权相关的查询参数和字段名
SECRET_FIELDS = (
    "access_token",
    "corpsecret",
    "appsecret",
    "app_secret",
    "tenant_access_token",
)
MASK = "***"

_FIELD_PATTERN = re.compile(
    r"(?P<key>\b(?:" + "|".join(SECRET_FIELDS) + r")\b['\"]?\s*[=:]\s*['\"]?)[^&\s'\",}]+"
)
_BEARER_PATTERN = re.compile(r"(Bearer\s+)[^\s'\",}]+")


def mask_secrets(text: str) -> str:
    """把 secret=xxx、"access_token": "xxx"、Bearer xxx 中的值替换为 ***"""
    text = _FIELD_PATTERN.sub(lambda m: m.group("key") + MASK, text)
    return _BEARER_PATTERN.sub(lambda m: m.group(1) + MASK, text)


class SecretMaskingFilter(logging.Filter):
    """在记录写出前屏蔽凭据，挂在每个处理器上"""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_secrets(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class ErrorOnlyHandler(TimedRotatingFileHandler):
    """error.log 处理器，默认级别为 ERROR"""

    def __init__(self, filename, **kwargs):
        super().__init__(filename, **kwargs)
        self.setLevel(logging.ERROR)


class ColoredConsoleHandler(logging.StreamHandler):
    """
    控制台处理器

    输出到终端时按级别着色；设置 NO_COLOR 环境变量或输出被重定向时不着色。
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[90m",  # 灰
        logging.WARNING: "\033[93m",  # 黄
        logging.ERROR: "\033[91m",  # 红
        logging.CRITICAL: "\033[1;91m",  # 红、粗体
    }
    RESET = "\033[0m"

    def __init__(self, stream: TextIO | None = None):
        super().__init__(stream or sys.stderr)
        isatty = getattr(self.stream, "isatty", None)
        self.use_color = bool(isatty and isatty()) and "NO_COLOR" not in os.environ

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_color else None
        return f"{color}{line}{self.RESET}" if color else line
