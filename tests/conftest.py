"""共享测试夹具"""

from unittest.mock import MagicMock

import pytest

from imbridge.utils.http import JSONTransport


@pytest.fixture
def transport():
    """替代真实 HTTP 的传输层，按调用顺序设置 side_effect"""
    return MagicMock(spec=JSONTransport)


def wecom_token(token: str = "wecom-token", expires_in: int = 7200) -> dict:
    return {"errcode": 0, "errmsg": "ok", "access_token": token, "expires_in": expires_in}


def feishu_token(token: str = "t-feishu", expire: int = 7200) -> dict:
    return {"code": 0, "msg": "ok", "tenant_access_token": token, "expire": expire}


OK = {"errcode": 0, "errmsg": "ok"}
FEISHU_OK = {"code": 0, "msg": "success", "data": {}}
