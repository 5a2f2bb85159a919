"""buildconf logging: JSON log files, a terse console format, document context."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import MutableMapping
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from buildconf.constants import LOG_FILE

# Record attributes copied into JSON output when a caller passes them as extra
ENTITY_FIELDS = ("entity_type", "entity_id", "document", "path")

_LEVEL_ALIASES = {"warn": "warning"}

# Fields merged into every record, e.g. the document being loaded
_log_context: dict[str, Any] = {}


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for the rotating log file."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": _utc_timestamp(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            **_log_context,
        }
        payload.update({name: getattr(record, name) for name in ENTITY_FIELDS if hasattr(record, name)})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single-line console output: time, level, [document:entity] and message."""

    LEVEL_STYLES = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[34m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        style = self.LEVEL_STYLES.get(record.levelno, "")
        where = [str(_log_context["document"])] if "document" in _log_context else []
        entity_type = getattr(record, "entity_type", None)
        if entity_type:
            where.append(str(entity_type))
        prefix = f"[{':'.join(where)}] " if where else ""
        clock = datetime.now().strftime("%H:%M:%S")
        return f"{clock} {style}{record.levelname:<8}{self.RESET} {prefix}{record.getMessage()}"


def set_log_context(**kwargs: Any) -> None:
    """Replace the context merged into every record. None values are dropped."""
    global _log_context
    _log_context = {key: value for key, value in kwargs.items() if value is not None}


def clear_log_context() -> None:
    global _log_context
    _log_context = {}


def get_logger(name: str) -> logging.Logger:
    """Logger named ``buildconf.<name>``."""
    return logging.getLogger(f"buildconf.{name}")


def _resolve_level(level: str) -> int:
    name = level.lower()
    name = _LEVEL_ALIASES.get(name, name)
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(
    level: str = "info",
    log_dir: str | Path | None = None,
    json_output: bool = True,
    console_output: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Configure the ``buildconf`` logger tree.

    Previously installed handlers are replaced, so calling this again (for
    instance after ``--log-level``) does not duplicate output.

    Args:
        level: debug, info, warn or error
        log_dir: Directory receiving the JSON log file; no file when None
        json_output: Write the JSON log file when ``log_dir`` is set
        console_output: Write human-readable records to stderr
        max_bytes: Size at which the log file is rotated
        backup_count: Rotated files to keep
    """
    log_level = _resolve_level(level)
    handlers: list[logging.Handler] = []

    if console_output:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ConsoleFormatter())
        handlers.append(console)

    if log_dir is not None and json_output:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        log_file = RotatingFileHandler(directory / LOG_FILE, maxBytes=max_bytes, backupCount=backup_count)
        log_file.setFormatter(JsonFormatter())
        handlers.append(log_file)

    package_logger = logging.getLogger("buildconf")
    package_logger.setLevel(log_level)
    package_logger.handlers = []
    for handler in handlers:
        handler.setLevel(log_level)
        package_logger.addHandler(handler)
    package_logger.propagate = False


class EntityLoggerAdapter(logging.LoggerAdapter[logging.Logger]):
    """Adds the entity type and id to every record it emits."""

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **(self.extra or {})}
        return msg, kwargs


def get_entity_logger(entity_type: str, entity_id: str | None = None) -> EntityLoggerAdapter:
    """Adapter over ``buildconf.entity`` tagged with one entity.

    Args:
        entity_type: Entity type discriminator
        entity_id: Entity id, omitted from records when None
    """
    extra: dict[str, Any] = {"entity_type": entity_type}
    if entity_id is not None:
        extra["entity_id"] = entity_id
    return EntityLoggerAdapter(get_logger("entity"), extra)
