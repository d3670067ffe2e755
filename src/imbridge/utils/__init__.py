"""通用工具"""

from .http import DEFAULT_TIMEOUT, JSONTransport, join_ids

__all__ = ["DEFAULT_TIMEOUT", "JSONTransport", "join_ids"]
