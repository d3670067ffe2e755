"""客户端注册表测试"""

import pytest

from imbridge.channels.adapters import DingTalkClient, FeishuClient, WeComClient
from imbridge.channels.registry import ClientRegistry, build_clients
from imbridge.config import Settings


def make_settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestBuildClients:
    def test_nothing_configured(self):
        assert build_clients(make_settings()) == {}

    def test_only_complete_credentials(self):
        settings = make_settings(
            wecom_corp_id="ww1",
            wecom_corp_secret="s",
            wecom_agent_id="1000002",
            dingtalk_app_key="key",
            feishu_app_id="cli_1",
            feishu_app_secret="s",
        )
        clients = build_clients(settings)

        assert set(clients) == {"wecom", "feishu"}
        assert isinstance(clients["wecom"], WeComClient)
        assert isinstance(clients["feishu"], FeishuClient)
        assert clients["wecom"].config.agent_id == "1000002"

    def test_settings_propagated(self):
        settings = make_settings(
            dingtalk_app_key="key",
            dingtalk_app_secret="secret",
            dingtalk_api_base="http://localhost:9000/",
            token_refresh_margin=120,
            strict_department_ids=True,
        )
        client = build_clients(settings)["dingtalk"]

        assert isinstance(client, DingTalkClient)
        assert client.api_base == "http://localhost:9000"
        assert client.config.agent_id is None
        assert client.config.strict_department_ids is True
        assert client._token.margin == 120


class TestClientRegistry:
    def test_get(self):
        registry = ClientRegistry(make_settings(feishu_app_id="a", feishu_app_secret="b"))
        assert registry.list_providers() == ["feishu"]
        assert registry.get("feishu") is registry.get("feishu")

    def test_unknown_provider(self):
        registry = ClientRegistry(make_settings())
        with pytest.raises(ValueError, match="unknown provider"):
            registry.get("slack")

    def test_not_configured(self):
        registry = ClientRegistry(make_settings())
        with pytest.raises(ValueError, match="not configured"):
            registry.get("wecom")

    def test_close_resets(self):
        registry = ClientRegistry(make_settings(wecom_corp_id="a", wecom_corp_secret="b"))
        first = registry.get("wecom")
        registry.close()
        assert registry.get("wecom") is not first
