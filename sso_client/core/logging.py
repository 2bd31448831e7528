"""Opt-in Loguru output for the client model layer.

The package disables its ``sso_client`` loguru namespace on import. A host
that wants to see what the registry and serializer are doing calls
``setup_logging``, which adds one sink restricted to that namespace. Sinks
the host installed itself and the standard library ``logging``
configuration are left alone.

Formatter types:
- **console**: Human-readable with inline context (development)
- **json**: One JSON object per line (containers, managed runtimes)
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Any, Final, TextIO, cast

import orjson
from loguru import logger

from sso_client.core.config import Settings, get_settings
from sso_client.core.constants import LOGGER_NAMESPACE, REDACTED
from sso_client.core.error_context import is_sensitive_field, sanitize_dict
from sso_client.core.types import LogContext

MAX_FIELD_VALUE_LENGTH: Final[int] = 100

# Fields rendered first, in this order, by the console formatter
PRIORITY_FIELDS: Final[tuple[str, ...]] = (
    "type_name",
    "path",
    "field",
    "wire_name",
)


def _escape_markup(value: str) -> str:
    """Escape text so loguru neither formats nor colorizes it.

    Declared types such as ``Array<string>`` would otherwise be read as
    color tags.
    """
    return value.replace("{", "{{").replace("}", "}}").replace("<", r"\<")


def _format_extra_field(key: str, value: object) -> str:
    """Render one context field as ``key=value``.

    Sensitive names are redacted and long values are truncated.

    Args:
        key: The field name.
        value: The field value.

    Returns:
        str: The escaped ``key=value`` text.
    """
    if is_sensitive_field(key):
        text = REDACTED
    else:
        try:
            text = str(value)
        except (AttributeError, TypeError, ValueError):
            text = f"<unprintable {type(value).__name__}>"
        if len(text) > MAX_FIELD_VALUE_LENGTH:
            text = text[: MAX_FIELD_VALUE_LENGTH - 3] + "..."

    return _escape_markup(f"{key}={text}")


def _format_context_fields(extra: LogContext) -> list[str]:
    """Format the public context fields of a record, priority fields first.

    Args:
        extra: Extra fields from the log record.

    Returns:
        list[str]: Colorized ``key=value`` parts.
    """
    parts = [
        f"<yellow>{_format_extra_field(field, extra[field])}</yellow>"
        for field in PRIORITY_FIELDS
        if extra.get(field) is not None
    ]
    parts.extend(
        f"<dim>{_format_extra_field(key, value)}</dim>"
        for key, value in extra.items()
        if key not in PRIORITY_FIELDS and not key.startswith("_") and value is not None
    )
    return parts


def format_console(record: dict[str, Any]) -> str:
    """Build the console format template for one record.

    Loguru fills the time, level, location and message placeholders; the
    context fields are rendered inline.

    Args:
        record: Loguru record to format.

    Returns:
        str: Format template for the record.
    """
    parts = [
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>",
        "<level>{level: <8}</level>",
        "<cyan>{name}:{function}:{line}</cyan>",
    ]

    if context := _format_context_fields(record.get("extra") or {}):
        parts.append(" ".join(f"[{part}]" for part in context))

    parts.append("{message}")
    return " | ".join(parts) + "\n{exception}"


def format_json(record: dict[str, Any]) -> str:
    """Format a log record as a single JSON line.

    Public extra fields are merged into the entry after redaction.

    Args:
        record: Loguru record to format.

    Returns:
        str: JSON-formatted log entry with newline.
    """
    entry: LogContext = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    extra = {k: v for k, v in record["extra"].items() if not k.startswith("_")}
    entry.update(sanitize_dict(extra))

    if exc := record.get("exception"):
        entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value is not None else None,
        }

    line = orjson.dumps(entry, default=str, option=orjson.OPT_NON_STR_KEYS)
    return line.decode() + "\n"


def _json_sink(stream: TextIO) -> Callable[[Any], None]:
    def sink(message: Any) -> None:  # noqa: ANN401 - loguru's Message type is stub-only
        stream.write(format_json(message.record))
        stream.flush()

    return sink


def setup_logging(
    settings: Settings | None = None, stream: TextIO | None = None
) -> int:
    """Add a sink for this package's records and enable them.

    Every call adds a new sink; pass the returned id to ``teardown_logging``
    to remove it again.

    Args:
        settings: Settings with the log configuration. Defaults to the cached
            settings.
        stream: Where the sink writes. Defaults to ``sys.stderr``.

    Returns:
        int: The loguru handler id of the added sink.
    """
    settings = settings or get_settings()
    log_config = settings.log_config
    stream = stream or sys.stderr

    if log_config.log_formatter_type == "json":
        handler_id = logger.add(
            _json_sink(stream),
            level=log_config.log_level,
            filter=LOGGER_NAMESPACE,
            diagnose=False,
            backtrace=False,
        )
    else:
        handler_id = logger.add(
            stream,
            format=cast("Any", format_console),
            level=log_config.log_level,
            filter=LOGGER_NAMESPACE,
            diagnose=settings.debug,
            backtrace=settings.debug,
        )

    logger.enable(LOGGER_NAMESPACE)

    logger.info(
        "Logging configured with {} formatter",
        log_config.log_formatter_type,
        formatter_type=log_config.log_formatter_type,
        log_level=log_config.log_level,
    )

    return handler_id


def teardown_logging(handler_id: int) -> None:
    """Remove a sink added by ``setup_logging`` and silence the package again.

    Args:
        handler_id: Id returned by ``setup_logging``.
    """
    logger.remove(handler_id)
    logger.disable(LOGGER_NAMESPACE)
