"""Type aliases for dynamic data structures throughout the package.

This module centralizes type definitions for data that cannot be statically
typed, providing clear semantic meaning for these types.

All types defined here should be JSON-serializable to support logging,
wire payloads, and error reporting.
"""

from typing import Any, TypeAlias

# JSON-compatible type that represents any valid JSON value
JsonValue: TypeAlias = (
    dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
)

# A decoded JSON object keyed by wire field names
WireObject: TypeAlias = dict[str, JsonValue]

# Context dictionary for logging additional information
LogContext: TypeAlias = dict[str, Any]

# Context dictionary for error details and debugging information
ErrorContext: TypeAlias = dict[str, Any]
