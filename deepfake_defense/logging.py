"""
Logging for the DeepFake Defense game client.

Two facilities live here:

Module loggers:
    ``get_logger('spawner')`` returns a cached logger with its own level.
    Enabled messages are printed to stderr as ``[spawner] INFO: ...``.
    Arguments use %-style and are only formatted when the level allows.

Structured records:
    ``emit_record('session', {...})`` hands a dict to the sink registered for
    that channel. A FileSink appends JSON Lines, one file per channel and
    session; a NullSink discards everything.

Usage:
    from deepfake_defense.logging import get_logger, emit_record

    log = get_logger('orchestrator')
    log.debug("Spawned item at x=%d", 320)
    emit_record('session', {'type': 'game_over', 'score': 120})

Environment:
    DFD_LOG_LEVEL=DEBUG                    default level for every module
    DFD_LOG_<MODULE>=TRACE                 level for one module
    DFD_LOG_DIR=/tmp/dfd-logs              where FileSink writes
    DFD_LOGGING_<CHANNEL>_ENABLED=true     JSONL output for a channel

The API server logs through the standard library instead, so uvicorn's
handlers and levels apply to it.
"""

import json
import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from functools import lru_cache
from pathlib import Path
from typing import IO, Any, Dict, List, Mapping, Optional


class LogLevel(IntEnum):
    """Severity thresholds. TRACE sits below DEBUG; OFF silences a module."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
    OFF = 100

    @classmethod
    def parse(cls, name: str) -> 'LogLevel':
        """Level from its name. WARN is accepted; unknown names mean INFO."""
        name = name.strip().upper()
        if name == 'WARN':
            return cls.WARNING
        return cls.__members__.get(name, cls.INFO)


LEVEL_LABELS = {
    LogLevel.TRACE: 'TRACE',
    LogLevel.DEBUG: 'DEBUG',
    LogLevel.INFO: 'INFO',
    LogLevel.WARNING: 'WARN',
    LogLevel.ERROR: 'ERROR',
    LogLevel.CRITICAL: 'CRIT',
}


@dataclass
class LogSettings:
    """Process-wide logging configuration.

    Attributes:
        default_level: Level for modules without an override
        module_levels: Per-module overrides, keyed by lowercase module name
        log_dir: Directory for FileSink output (None = platform default)
        channels: Per-channel settings from DFD_LOGGING_<CHANNEL>_<SETTING>
    """
    default_level: LogLevel = LogLevel.INFO
    module_levels: Dict[str, LogLevel] = field(default_factory=dict)
    log_dir: Optional[str] = None
    channels: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def level_for(self, module: str) -> LogLevel:
        return self.module_levels.get(module, self.default_level)

    def channel_enabled(self, channel: str) -> bool:
        return bool(self.channels.get(channel.lower(), {}).get('enabled', False))


_settings = LogSettings()


def _stamp() -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    return {'wall_time': now.timestamp(), 'iso_time': now.isoformat()}


def get_log_dir() -> Path:
    """Directory for JSONL output.

    DFD_LOG_DIR wins; otherwise the per-user data directory of the platform
    (``~/Library/Application Support``, ``%APPDATA%`` or ``$XDG_DATA_HOME``).
    """
    if _settings.log_dir:
        return Path(_settings.log_dir).expanduser()
    if sys.platform == 'darwin':
        base = Path.home() / 'Library' / 'Application Support' / 'DeepFakeDefense'
    elif sys.platform == 'win32':
        base = Path(os.environ.get('APPDATA', str(Path.home()))) / 'DeepFakeDefense'
    else:
        data_home = os.environ.get('XDG_DATA_HOME') or str(Path.home() / '.local' / 'share')
        base = Path(data_home) / 'deepfake-defense'
    return base / 'logs'


# =============================================================================
# Record sinks
# =============================================================================

class LogSink(ABC):
    """Destination for structured records. Usable as a context manager."""

    @abstractmethod
    def emit(self, channel: str, record: Dict[str, Any]) -> None:
        """Write one JSON-serializable record."""

    def flush(self) -> None:
        """Push buffered output to its destination."""

    def close(self) -> None:
        """Release resources. The sink is not used afterwards."""

    def __enter__(self) -> 'LogSink':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class FileSink(LogSink):
    """Appends records as JSON Lines to ``<session>_<channel>.jsonl``.

    A file is created on the first record of its channel and starts with a
    ``header`` line; ``close`` adds a ``footer`` line. Records without a
    ``wall_time`` get one.

    Args:
        log_dir: Output directory (default: get_log_dir())
        session_name: File name prefix (default: local start time)
    """

    def __init__(self, log_dir: Optional[str] = None, session_name: Optional[str] = None):
        self.log_dir = Path(log_dir) if log_dir else None
        self.session_name = session_name or datetime.now().strftime('%Y%m%d_%H%M%S')
        self._handles: Dict[str, IO[str]] = {}

    @property
    def channels(self) -> List[str]:
        """Channels with an open file."""
        return list(self._handles)

    def path_for(self, channel: str) -> Path:
        if self.log_dir is None:
            self.log_dir = get_log_dir()
        return self.log_dir / f"{self.session_name}_{channel}.jsonl"

    def _write(self, channel: str, record: Dict[str, Any]) -> None:
        self._handles[channel].write(json.dumps(record) + "\n")

    def emit(self, channel: str, record: Dict[str, Any]) -> None:
        if channel not in self._handles:
            path = self.path_for(channel)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._handles[channel] = open(path, 'a', encoding='utf-8')
            self._write(channel, {'type': 'header', 'channel': channel,
                                  'session': self.session_name, **_stamp()})
        self._write(channel, {'wall_time': _stamp()['wall_time'], **record})

    def flush(self) -> None:
        for handle in self._handles.values():
            handle.flush()

    def close(self) -> None:
        for channel in list(self._handles):
            self._write(channel, {'type': 'footer', 'channel': channel, **_stamp()})
            self._handles.pop(channel).close()


class NullSink(LogSink):
    """Discards every record."""

    def emit(self, channel: str, record: Dict[str, Any]) -> None:
        pass


_sinks: Dict[str, LogSink] = {}


def register_sink(channel: str, sink: LogSink) -> None:
    """Route records for ``channel`` to ``sink``, closing the one it replaces."""
    previous = _sinks.get(channel)
    _sinks[channel] = sink
    if previous is not None and previous is not sink:
        previous.close()


def emit_record(channel: str, record: Dict[str, Any]) -> bool:
    """Send a record to its channel's sink. False when none is registered."""
    sink = _sinks.get(channel)
    if sink is None:
        return False
    sink.emit(channel, record)
    return True


def close_all_sinks() -> None:
    while _sinks:
        _, sink = _sinks.popitem()
        sink.close()


def create_sink(channel: str, session_name: Optional[str] = None) -> LogSink:
    """FileSink when DFD_LOGGING_<CHANNEL>_ENABLED is set, NullSink otherwise."""
    if _settings.channel_enabled(channel):
        return FileSink(session_name=session_name)
    return NullSink()


# =============================================================================
# Configuration
# =============================================================================

def _env_value(raw: str) -> Any:
    """Booleans, ints and floats from their usual spellings, else the text."""
    lowered = raw.strip().lower()
    if lowered in ('true', '1', 'yes', 'on'):
        return True
    if lowered in ('false', '0', 'no', 'off'):
        return False
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            pass
    return raw


def load_env_config(environ: Optional[Mapping[str, str]] = None) -> None:
    """Apply DFD_LOG_* and DFD_LOGGING_* variables to the settings."""
    environ = os.environ if environ is None else environ
    for key, value in environ.items():
        if key == 'DFD_LOG_LEVEL':
            _settings.default_level = LogLevel.parse(value)
        elif key == 'DFD_LOG_DIR':
            _settings.log_dir = value
        elif key.startswith('DFD_LOGGING_'):
            channel, _, setting = key[len('DFD_LOGGING_'):].lower().partition('_')
            if channel and setting:
                _settings.channels.setdefault(channel, {})[setting] = _env_value(value)
        elif key.startswith('DFD_LOG_'):
            _settings.module_levels[key[len('DFD_LOG_'):].lower()] = LogLevel.parse(value)


def configure_logging(
    level: str = 'INFO',
    modules: Optional[Dict[str, str]] = None,
    log_dir: Optional[str] = None,
) -> None:
    """Set the default level, per-module levels and the JSONL directory.

    Example:
        configure_logging(level='DEBUG', modules={'spawner': 'INFO'})
    """
    _settings.default_level = LogLevel.parse(level)
    for module, module_level in (modules or {}).items():
        _settings.module_levels[module.lower()] = LogLevel.parse(module_level)
    if log_dir:
        _settings.log_dir = log_dir


load_env_config()


# =============================================================================
# Module loggers
# =============================================================================

class ModuleLogger:
    """Leveled logger for one module."""

    def __init__(self, module: str):
        self.module = module
        self.key = module.lower().replace('.', '_')

    @property
    def level(self) -> LogLevel:
        return _settings.level_for(self.key)

    def log(self, level: LogLevel, msg: str, *args) -> None:
        if level < self.level:
            return
        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"
        print(f"[{self.module}] {LEVEL_LABELS[level]}: {msg}", file=sys.stderr)

    def trace(self, msg: str, *args) -> None:
        self.log(LogLevel.TRACE, msg, *args)

    def debug(self, msg: str, *args) -> None:
        self.log(LogLevel.DEBUG, msg, *args)

    def info(self, msg: str, *args) -> None:
        self.log(LogLevel.INFO, msg, *args)

    def warning(self, msg: str, *args) -> None:
        self.log(LogLevel.WARNING, msg, *args)

    def error(self, msg: str, *args) -> None:
        self.log(LogLevel.ERROR, msg, *args)

    def critical(self, msg: str, *args) -> None:
        self.log(LogLevel.CRITICAL, msg, *args)


@lru_cache(maxsize=64)
def get_logger(module: str) -> ModuleLogger:
    """Cached logger for a module name such as 'orchestrator' or 'ai'."""
    return ModuleLogger(module)
