"""Structured logging for edit batches and document I/O, backed by telelog.

``configure`` / ``get_logger`` -- telelog setup driven by ``VAULT_EDIT_*``
``record_event`` -- one structured event line
``record_step`` -- an engine event keyed by operation index and kind
``span`` -- profile a block with transient log context, then report it
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "VAULT_EDIT_"

_PRESETS: Dict[str, Dict[str, Any]] = {
    "development": {"min_level": "DEBUG", "console": True, "colored": True},
    "production": {
        "min_level": "INFO",
        "console": False,
        "file": "vault_edit.log",
        "buffering": True,
    },
    "quiet": {"min_level": "ERROR", "console": False},
}

_LOGGERS: Dict[str, Any] = {}
_config: Optional[Any] = None


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read ``VAULT_EDIT_<name>`` from the environment."""

    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _options_from_env() -> Dict[str, Any]:
    return {
        "min_level": (env("LOG_LEVEL") or "INFO").upper(),
        "console": not env_flag("DISABLE_CONSOLE", False),
        "colored": not env_flag("NO_COLOR", False),
        "json": env_flag("LOG_JSON", False),
        "file": env("LOG_FILE") or None,
        "buffering": env_flag("LOG_BUFFERED", False),
        "buffer_size": int(env("LOG_BUFFER_SIZE") or "2048"),
    }


def build_config(*, preset: Optional[str] = None) -> Any:
    """Build a ``telelog.Config`` from a named preset or the environment."""

    if preset is None:
        options = _options_from_env()
    else:
        try:
            options = dict(_PRESETS[preset.lower()])
        except KeyError:
            raise ValueError(f"Unknown preset '{preset}'.") from None
        options["file"] = env("LOG_FILE") or options.get("file")

    config = tl.Config()
    config.with_min_level(options["min_level"])
    config.with_console_output(options["console"])
    if options["console"]:
        config.with_colored_output(options.get("colored", True))
    if options.get("json"):
        config.with_json_format(True)
    if options.get("file"):
        config.with_file_output(options["file"])
    if options.get("buffering"):
        config.with_buffering(True)
        if "buffer_size" in options:
            config.with_buffer_size(options["buffer_size"])
    config.with_profiling(True)
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active configuration and drop cached loggers.

    ``config`` is an explicit ``telelog.Config``; ``preset`` is one of
    ``development``, ``production`` or ``quiet``. They are mutually exclusive.
    """

    global _config
    if config and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    _config = config if config is not None else build_config(preset=preset)
    _LOGGERS.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger``; the config is built on first use."""

    global _config
    logger_name = name or env("LOGGER") or "vault_edit"
    if logger_name not in _LOGGERS:
        if _config is None:
            _config = build_config()
        _LOGGERS[logger_name] = tl.Logger.with_config(logger_name, _config)
    return _LOGGERS[logger_name]


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _emit(log: Any, level: str, message: str, data: Mapping[str, Any]) -> None:
    pairs = [(str(key), _stringify(value)) for key, value in data.items()]
    structured = getattr(log, f"{level}_with", None)
    if structured is not None:
        structured(message, pairs)
        return
    plain = getattr(log, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(pairs)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Mapping[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _emit(
        get_logger(logger_name),
        level.lower(),
        f"event::{name}",
        {"event": name, **(data or {})},
    )


def record_step(
    index: int,
    kind: str,
    *,
    status: str = "applied",
    level: str = "debug",
    logger_name: Optional[str] = None,
    **data: Any,
) -> None:
    """Emit ``edits.<status>`` for the operation at 1-based ``index``."""

    record_event(
        f"edits.{status}",
        level=level,
        data={"index": index, "kind": kind, **data},
        logger_name=logger_name,
    )


@dataclass
class SpanHandle:
    """Collects facts about a span; they are logged when the span closes."""

    logger: Any
    name: str
    facts: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.facts[key] = _stringify(value)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block under ``name``, optionally tracked as ``component``.

    ``context`` is attached to every log line inside the block. On exit a
    ``span::done`` (debug) or ``span::fail`` (error) line carries whatever
    was added through the handle.
    """

    log = get_logger(logger_name)
    attached = {key: _stringify(value) for key, value in (context or {}).items()}
    handle = SpanHandle(logger=log, name=name)

    with ExitStack() as stack:
        for key, value in attached.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))

        try:
            yield handle
        except Exception as exc:
            _emit(log, "error", "span::fail", {"span": name, **handle.facts, "reason": exc})
            raise
        _emit(log, "debug", "span::done", {"span": name, **handle.facts})


__all__ = [
    "ENV_PREFIX",
    "SpanHandle",
    "build_config",
    "configure",
    "env",
    "env_flag",
    "get_logger",
    "record_event",
    "record_step",
    "span",
]
