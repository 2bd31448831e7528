"""Structured exception hierarchy for the model serialization layer.

Every failure raised while describing, encoding or decoding a model derives
from ``SsoClientError`` so callers can handle the whole layer with a single
``except`` clause, or single out a specific failure when they need to.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **SsoClientError**: Base exception with rich context and fingerprinting
- **Specialized exceptions**: One class per failure kind of the registry

Context attached to an error is passed through the sanitizer before it is
stored, so payload fragments such as passwords never reach logs or reprs.
"""

import hashlib
import traceback
from enum import Enum

from sso_client.core.error_context import sanitize_dict
from sso_client.core.types import ErrorContext


class ErrorCode(Enum):
    """Standardized error codes for the serialization layer."""

    UNKNOWN_TYPE = "UNKNOWN_TYPE"
    """A type name has no descriptor in the registry."""

    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    """A required field is absent from an instance or a wire payload."""

    TYPE_MISMATCH = "TYPE_MISMATCH"
    """A value's runtime shape disagrees with its declared type."""

    UNKNOWN_DISCRIMINATOR_VALUE = "UNKNOWN_DISCRIMINATOR_VALUE"
    """A discriminator value has no matching concrete subtype."""

    MALFORMED_PAYLOAD = "MALFORMED_PAYLOAD"
    """A wire payload could not be parsed as JSON."""

    INVALID_DESCRIPTOR = "INVALID_DESCRIPTOR"
    """A descriptor or registry violates its structural invariants."""


class Severity(Enum):
    """Severity levels for errors raised by the serialization layer."""

    LOW = "LOW"
    """Expected errors caused by the data being processed."""

    HIGH = "HIGH"
    """Errors that point at broken static metadata or programming mistakes."""


class SsoClientError(Exception):
    """Base exception class for all serialization layer exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = sanitize_dict(context) if context else {}
        self.cause = cause

        # Capture stack trace at creation time
        self.stack_trace = traceback.format_stack()[:-1]  # Exclude this frame

        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for error grouping.

        Returns:
            str: A hash of the error type, code and the raising location
        """
        max_frames = 5
        relevant_frames = (
            self.stack_trace[-max_frames:]
            if len(self.stack_trace) > max_frames
            else self.stack_trace
        )

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"

        for frame in relevant_frames:
            if "site-packages" not in frame and "sso_client/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether the error is caused by input data rather than a defect.

        Returns:
            bool: True if the error is expected (LOW severity)
        """
        return self.severity is Severity.LOW

    @property
    def should_alert(self) -> bool:
        """Whether the error should trigger alerts.

        Returns:
            bool: True if the error should trigger alerts (HIGH severity)
        """
        return self.severity is Severity.HIGH

    def __str__(self) -> str:
        """Return a string representation of the exception.

        Returns:
            str: A formatted string containing the error code and message
        """
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the exception.

        Returns:
            str: A string showing the class name, error code, message, severity,
                and context
        """
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class UnknownTypeError(SsoClientError):
    """Exception raised when a type name is not registered.

    Args:
        type_name: The type name that was looked up
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        type_name: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.type_name = type_name
        super().__init__(
            ErrorCode.UNKNOWN_TYPE,
            f"Unknown model type '{type_name}'",
            Severity.LOW,
            {"type_name": type_name, **(context or {})},
            cause,
        )


class MissingRequiredFieldError(SsoClientError):
    """Exception raised when a required field is absent.

    Raised both when serializing an instance that never had the field
    assigned and when deserializing a payload that lacks the wire key.

    Args:
        type_name: The model type being converted
        field: Local name of the missing field
        wire_name: Wire name of the missing field
        path: Dotted location of the field inside the outermost payload
    """

    def __init__(
        self,
        type_name: str,
        field: str,
        wire_name: str,
        path: str,
    ) -> None:
        self.type_name = type_name
        self.field = field
        self.wire_name = wire_name
        self.path = path
        super().__init__(
            ErrorCode.MISSING_REQUIRED_FIELD,
            f"Required field '{field}' of '{type_name}' is missing at '{path}'",
            Severity.LOW,
            {
                "type_name": type_name,
                "field": field,
                "wire_name": wire_name,
                "path": path,
            },
        )


class TypeMismatchError(SsoClientError):
    """Exception raised when a value does not match its declared type.

    Args:
        message: Description of the mismatch
        path: Dotted location of the value inside the outermost payload
        declared_type: The declared type string the value was checked against
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        path: str,
        declared_type: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.declared_type = declared_type
        super().__init__(
            ErrorCode.TYPE_MISMATCH,
            message,
            Severity.LOW,
            {"path": path, "declared_type": declared_type, **(context or {})},
            cause,
        )


class UnknownDiscriminatorValueError(SsoClientError):
    """Exception raised when a discriminator value selects no subtype.

    Args:
        type_name: The polymorphic base type
        discriminator: Local name of the discriminator field
        value: The discriminator value that could not be resolved
        path: Dotted location of the payload being resolved
    """

    def __init__(
        self,
        type_name: str,
        discriminator: str,
        value: object,
        path: str,
    ) -> None:
        self.type_name = type_name
        self.discriminator = discriminator
        self.value = value
        self.path = path
        super().__init__(
            ErrorCode.UNKNOWN_DISCRIMINATOR_VALUE,
            f"No subtype of '{type_name}' for {discriminator}={value!r}",
            Severity.LOW,
            {
                "type_name": type_name,
                "discriminator": discriminator,
                "value": value,
                "path": path,
            },
        )


class MalformedPayloadError(SsoClientError):
    """Exception raised when raw wire bytes are not valid JSON.

    Args:
        message: Description of the parse failure
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.MALFORMED_PAYLOAD, message, Severity.LOW, context, cause
        )


class DescriptorError(SsoClientError):
    """Exception raised when static model metadata is inconsistent.

    Duplicate names, dangling discriminators and registrations after the
    registry was frozen all end up here. These indicate broken generated
    code, so they are reported with HIGH severity.

    Args:
        message: Description of the violated invariant
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.INVALID_DESCRIPTOR, message, Severity.HIGH, context, cause
        )
