"""Telemetry for the rewrite engine, built directly on telelog.

``configure(...)`` -- build the telelog configuration from ``REWRAP_ENGINE_*``
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit ``event::<name>`` with key/value fields
``span(name, ...)`` -- profile a command or registration and report failures

Field values are rendered for log lines here, so callers pass spans, engine
states and delimiter pairs as they are.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "REWRAP_ENGINE_"

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def render_value(value: Any) -> str:
    """Render one field value: spans as ``start:end``, states by value."""

    if isinstance(value, str):
        return value
    if isinstance(value, Enum):
        return str(value.value)
    if hasattr(value, "as_tuple"):
        start, end = value.as_tuple()
        return f"{start}:{end}"
    if hasattr(value, "open") and hasattr(value, "close"):
        return f"{value.open}{value.close}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_value(item) for item in value) + "]"
    return str(value)


def _format_pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), render_value(value)) for key, value in data.items()]


def build_config() -> Any:
    """Telelog config assembled from the ``REWRAP_ENGINE_*`` variables."""

    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL") or "INFO").upper())

    if env_flag("DISABLE_CONSOLE", False):
        config.with_console_output(False)
    else:
        config.with_console_output(True)
        config.with_colored_output(not env_flag("NO_COLOR", False))

    if env_flag("LOG_JSON", False):
        config.with_json_format(True)

    log_file = _env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)

    if env_flag("LOG_BUFFERED", False):
        config.with_buffering(True)
        config.with_buffer_size(env_int("LOG_BUFFER_SIZE", 2048))

    config.with_profiling(True)
    return config


def configure(config: Optional[Any] = None) -> None:
    """Adopt ``config`` (or rebuild from the environment) and drop cached loggers."""

    global _ACTIVE_CONFIG
    _ACTIVE_CONFIG = config if config is not None else build_config()
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Cached ``telelog.Logger``; ``REWRAP_ENGINE_LOGGER`` names the default."""

    global _ACTIVE_CONFIG
    logger_name = name or _env("LOGGER", "rewrap_engine") or "rewrap_engine"
    if logger_name not in _LOGGER_CACHE:
        if _ACTIVE_CONFIG is None:
            _ACTIVE_CONFIG = build_config()
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ACTIVE_CONFIG
        )
    return _LOGGER_CACHE[logger_name]


def _level_method(logger: Any, level: str) -> Tuple[Any, bool]:
    name = level.lower()
    with_fields = getattr(logger, f"{name}_with", None)
    if with_fields is not None:
        return with_fields, True
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return plain, False


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    method, accepts_fields = _level_method(logger, level)
    if accepts_fields:
        method(message, _format_pairs(payload))
    else:
        rendered = " ".join(f"{key}={value}" for key, value in _format_pairs(payload))
        method(f"{message} {rendered}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _emit(
        get_logger(logger_name),
        level,
        f"event::{name}",
        {"event": name, **(data or {})},
    )


@dataclass
class SpanHandle:
    """Handle yielded by ``span`` for reporting how the block ended."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def _report(self, level: str, message: str, **extra: Any) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload.update({key: value for key, value in extra.items() if value})
        _emit(self.logger, level, message, payload)

    def fail(self, reason: str) -> None:
        self._report("error", "span::fail", reason=reason)

    def cancel(self, reason: Optional[str] = None) -> None:
        """Report a block that ended without doing its work, such as a no-op."""

        self._report("warning", "span::cancel", reason=reason)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, optionally tracking it as a component.

    ``metadata`` is attached as logger context for the duration of the block
    and repeated on every line the handle reports.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None

    context = {key: render_value(value) for key, value in (metadata or {}).items()}
    for key, value in context.items():
        log.add_context(key, value)

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        handle = SpanHandle(
            logger=log,
            span_name=name,
            component_name=component_name,
            metadata=dict(context),
        )
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            for key in context:
                log.remove_context(key)


__all__ = [
    "SpanHandle",
    "build_config",
    "configure",
    "env_flag",
    "env_int",
    "get_logger",
    "record_event",
    "render_value",
    "span",
]
