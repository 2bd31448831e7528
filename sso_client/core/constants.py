"""Core constants."""

# Security and redaction
REDACTED = "[REDACTED]"

# Package name used to enable/disable loguru output from this library
LOGGER_NAMESPACE = "sso_client"

# Textual timestamp format of Date fields on the wire (always UTC)
WIRE_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
