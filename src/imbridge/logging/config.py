"""
日志配置和初始化

- 配置根日志记录器
- 设置文件处理器（按大小轮转）
- 设置错误日志处理器（只记录 ERROR/CRITICAL）
- 设置控制台处理器
- 每个处理器都挂 SecretMaskingFilter
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .handlers import ColoredConsoleHandler, ErrorOnlyHandler, SecretMaskingFilter


def setup_logging(
    log_dir: Optional[Path] = None,
    log_level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_file_prefix: str = "imbridge",
    log_max_size_mb: int = 10,
    log_backup_count: int = 30,
    log_to_console: bool = True,
    log_to_file: bool = True,
) -> logging.Logger:
    """
    配置日志系统

    Args:
        log_dir: 日志目录
        log_level: 日志级别
        log_format: 日志格式
        log_file_prefix: 日志文件前缀
        log_max_size_mb: 单个日志文件最大大小（MB）
        log_backup_count: 保留的日志文件数量
        log_to_console: 是否输出到控制台
        log_to_file: 是否输出到文件

    Returns:
        根日志记录器
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    formatter = logging.Formatter(log_format)
    secret_filter = SecretMaskingFilter()
    handlers: list[logging.Handler] = []

    if log_to_console:
        console_handler = ColoredConsoleHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        handlers.append(console_handler)

    if log_to_file and log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        main_handler = RotatingFileHandler(
            log_dir / f"{log_file_prefix}.log",
            maxBytes=log_max_size_mb * 1024 * 1024,
            backupCount=log_backup_count,
            encoding="utf-8",
        )
        main_handler.setLevel(logging.DEBUG)
        handlers.append(main_handler)

        error_handler = ErrorOnlyHandler(
            log_dir / "error.log",
            when="midnight",
            interval=1,
            backupCount=log_backup_count,
            encoding="utf-8",
        )
        handlers.append(error_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(secret_filter)
        root_logger.addHandler(handler)

    # 减少第三方库的日志输出
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return root_logger
