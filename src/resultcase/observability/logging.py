"""Structured logging for the Result engine.

The engine reports three kinds of events: a Builder asked to build without a
status, exceptions captured at callback boundaries, and transaction recovery.
Each event is an entry with a short name plus key=value fields; the host
application picks the renderer (console lines, JSON lines or nothing).

Quick Start:
    >>> from resultcase.observability import configure_logging, get_logger, log_context
    >>>
    >>> configure_logging(format="json", level="DEBUG")
    >>> log = get_logger("accounts")
    >>> log.info("lookup failed", account_id=123)
    >>> with log_context(request_id="abc123"):
    ...     log.warning("rolled back")  # carries request_id
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, TextIO, runtime_checkable

from resultcase.foundation.errors import JsonDict, JsonMapping, JsonValue

if TYPE_CHECKING:
    from types import TracebackType

    from resultcase.foundation.config import LoggingSettings

# Fields merged into every entry while a log_context is open
_log_context: ContextVar[JsonDict] = ContextVar("log_context", default={})


# ─────────────────────────────────────────────────────────────────────────────
# Logger
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class BoundLogger:
    """Logger carrying fixed fields; bind() and unbind() derive new loggers.

    A logger without an explicit level or renderer follows whatever
    configure_logging() last installed, so module-level loggers created at
    import time pick up later configuration.

    Example:
        >>> log = BoundLogger(context={"component": "orders"})
        >>> log.info("order not found", order_id=7)
        # => 10:30:45.120 [info] order not found component="orders" order_id=7
    """

    context: JsonDict = field(default_factory=dict)
    _renderer: LogRenderer | None = None
    _level: int | None = None

    def bind(self, **kw: JsonValue) -> BoundLogger:
        return BoundLogger(context={**self.context, **kw}, _renderer=self._renderer, _level=self._level)

    def unbind(self, *keys: str) -> BoundLogger:
        kept = {k: v for k, v in self.context.items() if k not in keys}
        return BoundLogger(context=kept, _renderer=self._renderer, _level=self._level)

    def scope(self, **kw: JsonValue) -> log_context:
        """Fields added to every entry, from any logger, until the block exits.

        Example:
            >>> with log.scope(handle="tx-1"):
            ...     log.warning("rolling back")  # carries handle
        """
        return log_context(**kw)

    def is_enabled_for(self, level: int) -> bool:
        threshold = self._level if self._level is not None else _default_level.get()
        return level >= threshold

    def _emit(self, level: int, event: str, **kw: JsonValue) -> None:
        if not self.is_enabled_for(level):
            return
        fields = {**_log_context.get(), **self.context, **kw}
        renderer = self._renderer or _active_renderer()
        renderer.render(LogEntry(time.time(), logging.getLevelName(level).lower(), event, fields))

    def debug(self, event: str, **kw: JsonValue) -> None: self._emit(logging.DEBUG, event, **kw)
    def info(self, event: str, **kw: JsonValue) -> None: self._emit(logging.INFO, event, **kw)
    def warning(self, event: str, **kw: JsonValue) -> None: self._emit(logging.WARNING, event, **kw)
    def error(self, event: str, **kw: JsonValue) -> None: self._emit(logging.ERROR, event, **kw)

    def log(self, level: str, event: str, **kw: JsonValue) -> None:
        """Emit at a level chosen by name, as ResultSettings stores it ("debug", "warning", ...)."""
        self._emit(getattr(logging, level.upper(), logging.INFO), event, **kw)

    def exception(self, event: str, **kw: JsonValue) -> None:
        """Error entry with the active traceback under ``exc_info``."""
        import traceback
        self._emit(logging.ERROR, event, exc_info=traceback.format_exc(), **kw)


@dataclass(slots=True)
class LogEntry:
    timestamp: float
    level: str
    event: str
    context: JsonDict

    @property
    def ts_iso(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat()

    @property
    def ts_human(self) -> str:
        """HH:MM:SS.mmm"""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


class log_context:  # noqa: N801
    """Merge fields into every entry emitted inside the ``with`` block.

    Nested blocks stack; leaving a block restores the enclosing fields.
    """

    __slots__ = ("_fields", "_token")

    def __init__(self, **kw: JsonValue) -> None:
        self._fields: JsonMapping = dict(kw)
        self._token: object | None = None

    def __enter__(self) -> log_context:
        self._token = _log_context.set({**_log_context.get(), **self._fields})
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                 exc_tb: TracebackType | None) -> None:
        if self._token is not None:
            _log_context.reset(self._token)  # type: ignore[arg-type]


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """One line per entry: ``time [level] event key=value ...``, fields sorted by key."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None  # None: color only when output is a tty
    show_timestamp: bool = True

    def __post_init__(self) -> None:
        if self.colors is None:
            self.colors = getattr(self.output, "isatty", lambda: False)()

    def render(self, entry: LogEntry) -> None:
        c = _COLORS if self.colors else _NO_COLORS
        level_color = _LEVEL_COLORS.get(entry.level, c["dim"]) if self.colors else ""
        parts = [f"{c['dim']}{entry.ts_human}{c['reset']}"] if self.show_timestamp else []
        parts.append(f"{level_color}[{entry.level}]{c['reset']}")
        parts.append(f"{c['bold']}{entry.event}{c['reset']}")
        parts.extend(f"{c['cyan']}{k}{c['reset']}={_format_value(v, c)}"
                     for k, v in sorted(entry.context.items()) if k != "exc_info")
        print(" ".join(parts), file=self.output)
        if "exc_info" in entry.context:
            print(f"{c['red']}{entry.context['exc_info']}{c['reset']}", file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """One JSON object per line; non-JSON field values (Status, exceptions) are stringified."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        import orjson
        record = {"timestamp": entry.ts_iso, "level": entry.level, "event": entry.event, **entry.context}
        print(orjson.dumps(record, option=orjson.OPT_NON_STR_KEYS, default=str).decode(), file=self.output)


@dataclass(slots=True)
class NoOpRenderer:
    """Discards entries; the test suite installs it by default."""

    def render(self, entry: LogEntry) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────


_renderer: ContextVar[LogRenderer | None] = ContextVar("log_renderer", default=None)
_default_level: ContextVar[int] = ContextVar("log_level", default=logging.INFO)


def configure_logging(
    format: str = "console",  # noqa: A002
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> LogRenderer:
    """Install the renderer and threshold used by every logger without its own.

    Raises:
        ValueError: If ``format`` is not "console", "json" or "none"
    """
    _default_level.set(getattr(logging, level.upper(), logging.INFO))
    match format:
        case "console": renderer: LogRenderer = ConsoleRenderer(output=output or sys.stderr, colors=colors)
        case "json": renderer = JsonRenderer(output=output or sys.stdout)
        case "none": renderer = NoOpRenderer()
        case _: raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")
    _renderer.set(renderer)
    return renderer


def configure_from_settings(settings: LoggingSettings | None = None, *, output: TextIO | None = None) -> LogRenderer:
    """configure_logging() driven by LoggingSettings; reads RESULTCASE_LOG_* when none is given."""
    if settings is None:
        from resultcase.foundation.config import get_settings
        settings = get_settings().logging
    return configure_logging(settings.format, settings.level, output=output, colors=settings.colors)


def get_logger(name: str | None = None, **initial_context: JsonValue) -> BoundLogger:
    """Logger whose entries carry ``logger=<name>`` plus any initial fields."""
    ctx = {**initial_context, **({"logger": name} if name else {})}
    return BoundLogger(context=ctx)


def _active_renderer() -> LogRenderer:
    if (renderer := _renderer.get()) is None:
        _renderer.set(renderer := ConsoleRenderer())
    return renderer


# ─────────────────────────────────────────────────────────────────────────────
# Console formatting
# ─────────────────────────────────────────────────────────────────────────────

_COLORS = {
    "reset": "\033[0m", "bold": "\033[1m", "dim": "\033[2m", "red": "\033[31m", "green": "\033[32m",
    "yellow": "\033[33m", "blue": "\033[34m", "cyan": "\033[36m", "white": "\033[37m",
}
_NO_COLORS = dict.fromkeys(_COLORS, "")
_LEVEL_COLORS = {"debug": _COLORS["dim"], "info": _COLORS["green"], "warning": _COLORS["yellow"], "error": _COLORS["red"]}


def _format_value(v: object, c: dict[str, str]) -> str:
    match v:
        case str(): return f'{c["yellow"]}"{v}"{c["reset"]}'
        case bool(): return f'{c["blue"]}{str(v).lower()}{c["reset"]}'
        case int() | float(): return f'{c["blue"]}{v}{c["reset"]}'
        case dict(): return f'{c["dim"]}{{{len(v)} items}}{c["reset"]}'
        case list() | tuple(): return f'{c["dim"]}[{len(v)} items]{c["reset"]}'
        case _: return f'{c["white"]}{v!r}{c["reset"]}'
