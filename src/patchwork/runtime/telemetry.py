"""Structured logging and profiling for the editor, built on telelog.

Public surface:

``configure(...)`` -- pick a preset, an explicit ``telelog.Config`` or the
environment-driven default
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit a structured event at a chosen level
``span(name, ...)`` -- context manager combining profiling + component tracking

Every knob is read from ``PATCHWORK_*`` environment variables.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "PATCHWORK_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "patchwork")

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def _development(config: Any) -> None:
    config.with_min_level("DEBUG")
    config.with_console_output(True)
    config.with_colored_output(True)
    config.with_json_format(False)


def _production(config: Any) -> None:
    config.with_min_level("INFO")
    config.with_console_output(False)
    config.with_file_output(_env("LOG_FILE") or "patchwork.log")
    config.with_buffering(True)


def _performance(config: Any) -> None:
    config.with_min_level("DEBUG")
    config.with_console_output(False)
    config.with_json_format(True)
    config.with_buffering(True)
    config.with_file_output(_env("LOG_FILE") or "patchwork-performance.log")


_PRESETS: Dict[str, Callable[[Any], None]] = {
    "development": _development,
    "production": _production,
    "performance": _performance,
}


def preset_names() -> tuple[str, ...]:
    return tuple(_PRESETS)


def _build_preset_config(preset: str) -> Any:
    builder = _PRESETS.get(preset.lower())
    if builder is None:
        raise ValueError(f"Unknown telemetry preset '{preset}'.")
    config = tl.Config()
    builder(config)
    return config


def _build_default_config(console: Optional[bool] = None) -> Any:
    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL") or "INFO").upper())

    if console is None:
        console = not _env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _env_flag("NO_COLOR", False))

    if _env_flag("LOG_JSON", False):
        config.with_json_format(True)

    log_file = _env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)

    if _env_flag("LOG_BUFFERED", False):
        config.with_buffering(True)
        config.with_buffer_size(int(_env("LOG_BUFFER_SIZE") or "2048"))

    return config


def configure(
    *,
    config: Optional[Any] = None,
    preset: Optional[str] = None,
    console: Optional[bool] = None,
) -> None:
    """Replace the active telelog configuration.

    Parameters
    ----------
    config:
        Explicit ``telelog.Config`` instance to adopt.
    preset:
        ``"development"``, ``"production"`` or ``"performance"``. Mutually
        exclusive with ``config``.
    console:
        Force console output on or off for the environment-driven default
        (the Textual host turns it off so log lines do not tear the screen).
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    preset = preset or _env("TELEMETRY_PRESET")
    if config is None:
        config = (
            _build_preset_config(preset) if preset else _build_default_config(console)
        )

    config.with_profiling(True)
    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def _ensure_config() -> Any:
    if _ACTIVE_CONFIG is None:
        configure()
    return _ACTIVE_CONFIG


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` for ``name``."""

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ensure_config()
        )
    return _LOGGER_CACHE[logger_name]


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, _pairs(payload))
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Handle yielded by ``span`` to attach metadata or flag failures."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def _payload(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        if extra:
            payload.update({key: _stringify(val) for key, val in extra.items()})
        return payload

    def fail(self, reason: str) -> None:
        _emit(self.logger, "error", "span::fail", self._payload({"reason": reason}))


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block and optionally track it as a telelog component.

    ``component=True`` reuses ``name`` as the component id, a string names
    it explicitly. ``metadata`` is pushed as logger context for the
    duration of the block.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else (component or None)

    context_keys: list[str] = []
    serialized: Dict[str, Any] = {}
    for key, value in (metadata or {}).items():
        serialized[key] = _stringify(value)
        log.add_context(key, serialized[key])
        context_keys.append(key)

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        handle = SpanHandle(
            logger=log,
            span_name=name,
            component_name=component_name,
            metadata=serialized,
        )
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            for key in context_keys:
                log.remove_context(key)


__all__ = [
    "SpanHandle",
    "configure",
    "get_logger",
    "preset_names",
    "record_event",
    "span",
]
