"""内存中的 webhook 注册表"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger(__name__)

DEFAULT_MAX_LOGS = 10


@dataclass
class RelayLog:
    """单次转发记录"""

    timestamp: datetime
    body: str
    status_code: int

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "body": self.body,
            "status_code": self.status_code,
        }


@dataclass
class Hook:
    """已注册的 webhook"""

    id: str
    target_url: str
    logs: list[RelayLog] = field(default_factory=list)


class HookStore:
    """
    webhook 注册表

    每个 hook 只保留最近 max_logs 条记录，新记录在前。
    """

    def __init__(self, max_logs: int = DEFAULT_MAX_LOGS):
        self.max_logs = max_logs
        self._hooks: dict[str, Hook] = {}
        self._lock = threading.Lock()

    def create(self, target_url: str) -> Hook:
        with self._lock:
            hook_id = str(time.time_ns())
            while hook_id in self._hooks:
                hook_id = str(int(hook_id) + 1)
            hook = Hook(id=hook_id, target_url=target_url)
            self._hooks[hook_id] = hook
        logger.info(f"Relay: hook {hook_id} created -> {target_url}")
        return hook

    def get(self, hook_id: str) -> Hook | None:
        with self._lock:
            return self._hooks.get(hook_id)

    def record(self, hook_id: str, entry: RelayLog) -> None:
        with self._lock:
            hook = self._hooks.get(hook_id)
            if hook is None:
                return
            hook.logs.insert(0, entry)
            del hook.logs[self.max_logs :]

    def logs(self, hook_id: str) -> list[RelayLog] | None:
        """返回日志副本，hook 不存在时返回 None"""
        with self._lock:
            hook = self._hooks.get(hook_id)
            return list(hook.logs) if hook else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._hooks)
