"""
IM 客户端接口

各平台适配器独立实现同一组操作，不共享基类:
- send_message: 发送消息
- get_departments: 获取部门列表
- get_users: 获取根部门下的用户
"""

from typing import Protocol, runtime_checkable

from .types import Department, Message, User


@runtime_checkable
class IMClient(Protocol):
    """
    统一 IM 客户端接口

    实现方:
    - 企业微信 (WeComClient)
    - 钉钉 (DingTalkClient)
    - 飞书 (FeishuClient)

    所有方法都是阻塞调用，失败时抛出 IMError 子类。
    """

    channel_name: str

    def send_message(
        self,
        to_user_ids: list[str],
        to_dept_ids: list[str],
        msg: Message,
    ) -> None:
        """
        发送消息

        Args:
            to_user_ids: 接收人 ID 列表（不能为空）
            to_dept_ids: 接收部门 ID 列表（部分平台忽略）
            msg: 要发送的消息
        """
        ...

    def get_departments(self) -> list[Department]:
        """获取部门列表（单次请求，不分页）"""
        ...

    def get_users(self) -> list[User]:
        """获取根部门下的用户（单次请求，不分页）"""
        ...

    def close(self) -> None:
        """释放 HTTP 连接"""
        ...
