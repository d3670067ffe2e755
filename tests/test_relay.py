"""Webhook 中转测试"""

from datetime import datetime

import httpx

from imbridge.relay import HookStore, RelayLog, forward_payload


class TestHookStore:
    def test_create_unique_ids(self):
        store = HookStore()
        ids = {store.create("https://example.com").id for _ in range(20)}
        assert len(ids) == 20
        assert len(store) == 20

    def test_unknown_hook(self):
        store = HookStore()
        assert store.get("missing") is None
        assert store.logs("missing") is None

    def test_logs_newest_first_and_bounded(self):
        store = HookStore(max_logs=3)
        hook = store.create("https://example.com")
        for i in range(5):
            store.record(hook.id, RelayLog(datetime.now(), f"body-{i}", 200))

        logs = store.logs(hook.id)
        assert [entry.body for entry in logs] == ["body-4", "body-3", "body-2"]

    def test_log_to_dict(self):
        entry = RelayLog(datetime(2024, 1, 2, 3, 4, 5), "{}", 201)
        assert entry.to_dict() == {
            "timestamp": "2024-01-02T03:04:05",
            "body": "{}",
            "status_code": 201,
        }


class TestForwardPayload:
    def test_forward_status(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = request.content
            return httpx.Response(204)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        status = forward_payload("https://target.test/in", b'{"a": 1}', client=client)

        assert status == 204
        assert seen == {"content_type": "application/json", "body": b'{"a": 1}'}

    def test_forward_failure_is_500(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        assert forward_payload("https://target.test/in", b"{}", client=client) == 500
