"""
Webhook 中转

临时注册一个目标 URL，收到的请求原样转发并记录最近的转发结果。
注册表只保存在内存中，进程退出即失效。
"""

from .forwarder import forward_payload
from .store import Hook, HookStore, RelayLog

__all__ = ["Hook", "HookStore", "RelayLog", "forward_payload"]
