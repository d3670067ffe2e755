"""钉钉适配器测试"""

import pytest

from conftest import OK, wecom_token
from imbridge.channels import (
    AuthError,
    ConfigError,
    Message,
    UnsupportedTypeError,
    UpstreamError,
)
from imbridge.channels.adapters import DingTalkClient

API = "https://oapi.dingtalk.com"


@pytest.fixture
def client(transport):
    return DingTalkClient(
        app_key="key", app_secret="secret", agent_id="123456789", transport=transport
    )


class TestDingTalkSend:
    def test_token_request(self, client, transport):
        transport.get_json.return_value = wecom_token("dt-token")
        assert client._get_access_token() == "dt-token"
        transport.get_json.assert_called_once_with(
            f"{API}/gettoken", params={"appkey": "key", "appsecret": "secret"}
        )

    def test_send_text(self, client, transport):
        transport.get_json.return_value = wecom_token("dt-token")
        transport.post_json.return_value = OK

        client.send_message(["u1", "u2"], [], Message.text("hello"))

        url, body = transport.post_json.call_args.args
        assert url == f"{API}/topapi/message/corpconversation/asyncsend_v2"
        assert transport.post_json.call_args.kwargs["params"] == {"access_token": "dt-token"}
        assert body == {
            "agent_id": 123456789,
            "userid_list": "u1,u2",
            "msg": {"msgtype": "text", "text": {"content": "hello"}},
        }

    def test_send_image(self, client, transport):
        transport.get_json.return_value = wecom_token()
        transport.post_json.return_value = OK
        client.send_message(["u1"], [], Message.image("@lADO"))
        body = transport.post_json.call_args.args[1]
        assert body["msg"] == {"msgtype": "image", "image": {"media_id": "@lADO"}}

    @pytest.mark.parametrize(
        "msg",
        [
            Message.voice("m1"),
            Message.video("m1"),
            Message.file("m1"),
            Message.markdown("# hi"),
            Message.textcard("t", "d", "https://x"),
            Message.news([]),
        ],
    )
    def test_unsupported_types(self, client, transport, msg):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            client.send_message(["u1"], [], msg)
        assert exc_info.value.msg_type == msg.type.value
        assert "dingtalk" in str(exc_info.value)
        transport.post_json.assert_not_called()

    def test_missing_agent_id(self, transport):
        client = DingTalkClient(app_key="key", app_secret="secret", transport=transport)
        with pytest.raises(ConfigError) as exc_info:
            client.send_message(["u1"], [], Message.text("hi"))
        assert exc_info.value.provider == "dingtalk"
        assert exc_info.value.to_dict()["error"] == "config"
        transport.get_json.assert_not_called()
        transport.post_json.assert_not_called()

    def test_non_numeric_ttl(self, client, transport):
        transport.get_json.return_value = {"errcode": 0, "access_token": "t", "expires_in": "soon"}
        with pytest.raises(AuthError):
            client.send_message(["u1"], [], Message.text("hi"))
        transport.post_json.assert_not_called()

    def test_auth_error_stops_send(self, client, transport):
        transport.get_json.return_value = {"errcode": 40089, "errmsg": "invalid appkey"}
        with pytest.raises(AuthError):
            client.send_message(["u1"], [], Message.text("hi"))
        transport.post_json.assert_not_called()


class TestDingTalkDirectory:
    def test_departments(self, client, transport):
        transport.get_json.side_effect = [
            wecom_token(),
            {**OK, "department": [{"id": 1, "name": "公司", "parentid": 0}]},
        ]
        depts = client.get_departments()
        assert depts[0].id == 1
        assert depts[0].name == "公司"

    def test_users_first_page(self, client, transport):
        transport.get_json.side_effect = [
            wecom_token("dt-token"),
            {**OK, "userlist": [{"userid": "u1", "name": "王五", "department": [5, 1]}]},
        ]
        users = client.get_users()
        assert users[0].dept_ids == ["5", "1"]
        assert transport.get_json.call_args.kwargs["params"] == {
            "access_token": "dt-token",
            "department_id": 1,
            "offset": 0,
            "size": 100,
        }

    def test_users_error(self, client, transport):
        transport.get_json.side_effect = [
            wecom_token(),
            {"errcode": 60003, "errmsg": "部门不存在"},
        ]
        with pytest.raises(UpstreamError) as exc_info:
            client.get_users()
        assert exc_info.value.message == "部门不存在"
