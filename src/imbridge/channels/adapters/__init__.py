"""
IM 平台适配器

各平台的具体实现:
- 企业微信
- 钉钉
- 飞书
"""

from .dingtalk import DingTalkClient
from .feishu import FeishuClient
from .wecom import WeComClient

__all__ = [
    "WeComClient",
    "DingTalkClient",
    "FeishuClient",
]
