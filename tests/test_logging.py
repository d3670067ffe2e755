"""日志处理器测试"""

import io
import logging

import pytest

from imbridge.logging import SecretMaskingFilter, mask_secrets
from imbridge.logging.handlers import ColoredConsoleHandler, ErrorOnlyHandler


class TestMaskSecrets:
    @pytest.mark.parametrize(
        "text, secret",
        [
            ("GET https://qyapi.test/gettoken?corpid=ww1&corpsecret=TOPSECRET", "TOPSECRET"),
            ("GET https://oapi.test/gettoken?appkey=k&appsecret=S3CRET", "S3CRET"),
            ("POST /message/send?access_token=tok-123", "tok-123"),
            ('{"app_id": "cli_1", "app_secret": "feishu-secret"}', "feishu-secret"),
            ("{'tenant_access_token': 't-abc', 'expire': 7200}", "t-abc"),
            ("headers={'Authorization': 'Bearer t-xyz'}", "t-xyz"),
        ],
    )
    def test_masked(self, text, secret):
        masked = mask_secrets(text)
        assert secret not in masked
        assert "***" in masked

    def test_other_fields_untouched(self):
        text = "GET https://qyapi.test/gettoken?corpid=ww1&corpsecret=x"
        assert "corpid=ww1" in mask_secrets(text)
        assert mask_secrets("sent text message to 2 user(s)") == "sent text message to 2 user(s)"


class TestSecretMaskingFilter:
    def _logger(self, stream: io.StringIO) -> logging.Logger:
        handler = logging.StreamHandler(stream)
        handler.addFilter(SecretMaskingFilter())
        logger = logging.getLogger("imbridge.tests.masking")
        logger.handlers = [handler]
        logger.propagate = False
        logger.setLevel(logging.DEBUG)
        return logger

    def test_masks_formatted_args(self):
        stream = io.StringIO()
        self._logger(stream).warning("request failed: %s", "https://x/send?access_token=abc")
        assert "abc" not in stream.getvalue()
        assert "access_token=***" in stream.getvalue()

    def test_plain_message_kept(self):
        stream = io.StringIO()
        self._logger(stream).info("wecom: access token refreshed, expires in 7200s")
        assert stream.getvalue().strip() == "wecom: access token refreshed, expires in 7200s"


class TestHandlers:
    def test_error_only_handler_level(self, tmp_path):
        handler = ErrorOnlyHandler(tmp_path / "error.log", when="midnight", encoding="utf-8")
        try:
            assert handler.level == logging.ERROR
        finally:
            handler.close()

    def test_console_no_color_when_redirected(self):
        stream = io.StringIO()
        handler = ColoredConsoleHandler(stream)
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)
        assert handler.use_color is False
        assert handler.format(record) == "ERROR boom"

    def test_console_color(self):
        handler = ColoredConsoleHandler(io.StringIO())
        handler.use_color = True
        handler.setFormatter(logging.Formatter("%(message)s"))
        warning = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
        info = logging.LogRecord("x", logging.INFO, __file__, 1, "fine", None, None)
        assert handler.format(warning) == "\033[93mcareful\033[0m"
        assert handler.format(info) == "fine"
