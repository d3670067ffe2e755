"""
通讯录字段转换

各平台部门 ID 类型不同（企业微信/钉钉为整数，飞书为字符串），
统一转换为 Department.id (int) 与 User.dept_ids (list[str])。
"""

import logging
from collections.abc import Iterable
from typing import Any

from .errors import DirectoryParseError

logger = logging.getLogger(__name__)


def parse_department_id(raw: Any, provider: str, strict: bool = False) -> int:
    """
    部门 ID 转为整数

    无法解析时默认返回 0 并记录警告；strict=True 时抛出 DirectoryParseError。
    """
    try:
        return int(raw)
    except (TypeError, ValueError):
        if strict:
            raise DirectoryParseError(
                f"department id {raw!r} is not an integer",
                provider=provider,
                details={"department_id": raw},
            ) from None
        logger.warning(
            f"{provider}: department id {raw!r} is not an integer, using 0"
        )
        return 0


def stringify_ids(ids: Iterable[Any] | None) -> list[str]:
    """部门 ID 列表转字符串，保持原顺序"""
    return [str(i) for i in ids or []]
