"""
imbridge 日志系统

功能:
- 控制台输出（终端中按级别着色）
- 可选的日志文件（按大小轮转）和 error.log（按天轮转）
- 所有输出都会屏蔽 secret 和 access token
"""

from .config import setup_logging
from .handlers import SecretMaskingFilter, mask_secrets

__all__ = [
    "setup_logging",
    "SecretMaskingFilter",
    "mask_secrets",
]
