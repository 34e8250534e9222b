from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Tuple

import pytest

from rewrap_engine.engine import EngineState
from rewrap_engine.pairs import DelimiterPair
from rewrap_engine.runtime import telemetry
from rewrap_engine.units import Span


class FakeLogger:
    """Stand-in for ``telelog.Logger``; ``debug`` has no ``*_with`` variant."""

    def __init__(self) -> None:
        self.lines: List[Tuple[str, str, Any]] = []
        self.context: Dict[str, str] = {}
        self.profiled: List[str] = []
        self.components: List[str] = []

    def info_with(self, message: str, pairs: Any) -> None:
        self.lines.append(("info", message, dict(pairs)))

    def warning_with(self, message: str, pairs: Any) -> None:
        self.lines.append(("warning", message, dict(pairs)))

    def error_with(self, message: str, pairs: Any) -> None:
        self.lines.append(("error", message, dict(pairs)))

    def debug(self, message: str) -> None:
        self.lines.append(("debug", message, None))

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        self.context.pop(key, None)

    @contextmanager
    def profile(self, name: str) -> Iterator[None]:
        self.profiled.append(name)
        yield

    @contextmanager
    def track_component(self, name: str) -> Iterator[None]:
        self.components.append(name)
        yield


class FakeConfig:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("with_"):
            raise AttributeError(name)
        return lambda value: self.calls.append((name, value))


class FakeTelelog:
    Config = FakeConfig


@pytest.fixture
def fake_logger(monkeypatch: pytest.MonkeyPatch) -> FakeLogger:
    logger = FakeLogger()
    monkeypatch.setattr(telemetry, "get_logger", lambda name=None: logger)
    return logger


def test_env_helpers_read_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REWRAP_ENGINE_LOG_JSON", "yes")
    monkeypatch.setenv("REWRAP_ENGINE_PREVIEW_LIMIT", "3")
    monkeypatch.setenv("REWRAP_ENGINE_LOG_BUFFER_SIZE", "lots")

    assert telemetry.env_flag("LOG_JSON", False) is True
    assert telemetry.env_flag("NO_COLOR", True) is True
    assert telemetry.env_int("PREVIEW_LIMIT", 8) == 3
    assert telemetry.env_int("LOG_BUFFER_SIZE", 2048) == 2048


def test_build_config_follows_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(telemetry, "tl", FakeTelelog)
    monkeypatch.setenv("REWRAP_ENGINE_LOG_LEVEL", "debug")
    monkeypatch.setenv("REWRAP_ENGINE_DISABLE_CONSOLE", "1")
    monkeypatch.setenv("REWRAP_ENGINE_LOG_FILE", "engine.log")
    monkeypatch.setenv("REWRAP_ENGINE_LOG_BUFFERED", "true")
    monkeypatch.setenv("REWRAP_ENGINE_LOG_BUFFER_SIZE", "64")

    config = telemetry.build_config()

    assert config.calls == [
        ("with_min_level", "DEBUG"),
        ("with_console_output", False),
        ("with_file_output", "engine.log"),
        ("with_buffering", True),
        ("with_buffer_size", 64),
        ("with_profiling", True),
    ]


def test_render_value_formats_engine_types() -> None:
    assert telemetry.render_value(Span(2, 5)) == "2:5"
    assert telemetry.render_value(EngineState.PLANNING) == "planning"
    assert telemetry.render_value(DelimiterPair("`", "'")) == "`'"
    assert telemetry.render_value((Span(0, 1), Span(8, 9))) == "[0:1, 8:9]"
    assert telemetry.render_value(3) == "3"


def test_record_event_emits_rendered_fields(fake_logger: FakeLogger) -> None:
    telemetry.record_event("engine.rewrap", data={"span": Span(0, 9), "open": "["})

    assert fake_logger.lines == [
        (
            "info",
            "event::engine.rewrap",
            {"event": "engine.rewrap", "span": "0:9", "open": "["},
        )
    ]


def test_record_event_falls_back_to_plain_level(fake_logger: FakeLogger) -> None:
    telemetry.record_event(
        "engine.transition",
        level="debug",
        data={"from": EngineState.IDLE, "to": EngineState.RESOLVING},
    )

    assert fake_logger.lines == [
        (
            "debug",
            "event::engine.transition event=engine.transition from=idle to=resolving",
            None,
        )
    ]


def test_record_event_rejects_unknown_levels(fake_logger: FakeLogger) -> None:
    with pytest.raises(ValueError):
        telemetry.record_event("x", level="verbose")


def test_span_scopes_context_and_reports_failures(fake_logger: FakeLogger) -> None:
    with pytest.raises(KeyError):
        with telemetry.span(
            "engine::rewrap", component="engine", metadata={"cursor": 5}
        ):
            assert fake_logger.context == {"cursor": "5"}
            raise KeyError("boom")

    assert fake_logger.context == {}
    assert fake_logger.profiled == ["engine::rewrap"]
    assert fake_logger.components == ["engine"]
    level, message, fields = fake_logger.lines[-1]
    assert (level, message) == ("error", "span::fail")
    assert fields["component"] == "engine"
    assert fields["cursor"] == "5"


def test_span_handle_cancel_reports_reason(fake_logger: FakeLogger) -> None:
    with telemetry.span("engine::add", component=True) as handle:
        handle.cancel("cancelled")

    assert fake_logger.components == ["engine::add"]
    assert fake_logger.lines == [
        (
            "warning",
            "span::cancel",
            {"span": "engine::add", "component": "engine::add", "reason": "cancelled"},
        )
    ]
