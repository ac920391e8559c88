import json
import logging
import sys

import pytest
import structlog

from blendsearch.util.logging import LoggingConfig, configure_logging


class TestLoggingConfig:
    def test_defaults(self) -> None:
        config = LoggingConfig()

        assert config.json_output is True
        assert config.log_level == "INFO"
        assert config.stream == "stdout"
        assert config.handler_name == "blendsearch"

    def test_unknown_stream_raises(self) -> None:
        with pytest.raises(ValueError, match="logging.stream"):
            LoggingConfig(stream="syslog")

    def test_empty_handler_name_raises(self) -> None:
        with pytest.raises(ValueError, match="handler_name"):
            LoggingConfig(handler_name="")


class TestConfigureLogging:
    def setup_method(self) -> None:
        root = logging.getLogger()
        self._original_handlers = list(root.handlers)
        self._original_level = root.level

    def teardown_method(self) -> None:
        root = logging.getLogger()
        root.handlers = list(self._original_handlers)
        root.setLevel(self._original_level)

    def _named(self, name: str) -> list[logging.Handler]:
        return [h for h in logging.getLogger().handlers if h.get_name() == name]

    def test_installs_named_stdout_handler_by_default(self) -> None:
        handler = configure_logging()

        assert self._named("blendsearch") == [handler]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout

    def test_stderr_stream(self) -> None:
        handler = configure_logging(LoggingConfig(stream="stderr"))

        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr

    def test_reconfiguring_replaces_handler_with_same_name(self) -> None:
        first = configure_logging()
        second = configure_logging(LoggingConfig(json_output=False))

        assert self._named("blendsearch") == [second]
        assert first not in logging.getLogger().handlers

    def test_handlers_with_other_names_are_kept(self) -> None:
        audit = configure_logging(LoggingConfig(handler_name="audit"))
        blend = configure_logging()

        assert self._named("audit") == [audit]
        assert self._named("blendsearch") == [blend]

    def test_json_output_carries_bound_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(stream="stderr"))

        with structlog.contextvars.bound_contextvars(request_id="req-1"):
            structlog.get_logger("blendsearch.test").info("blend_search", offset=20)

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["event"] == "blend_search"
        assert event["offset"] == 20
        assert event["request_id"] == "req-1"
        assert event["level"] == "info"

    def test_log_level_respected(self) -> None:
        configure_logging(LoggingConfig(log_level="WARNING"))

        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(LoggingConfig(log_level="chatty"))

        assert logging.getLogger().level == logging.INFO
