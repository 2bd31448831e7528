"""SSO client models - typed DTOs and their JSON wire serialization.

The package is the model layer of the SSO API client. It contains the
generated request and response models, together with the registry of static
descriptors that maps each model's attributes to wire keys and declared
types.

Architecture Overview:
- **Core Layer**: Configuration, errors, logging and sanitization
- **Registry Layer**: Descriptors, type parsing, serializer and codec
- **Models Layer**: Generated DTO classes and the frozen default registry

Typical use by a transport layer::

    import sso_client
    from sso_client.models import RequestUserUpdate

    body = sso_client.encode(RequestUserUpdate(id="u1", email="a@b.com"))
    links = sso_client.decode(response_bytes, "ResponseUserOauth2ProviderMany")

The library logs through loguru under the ``sso_client`` namespace, which is
disabled until ``sso_client.core.logging.setup_logging`` enables it.
"""

from functools import lru_cache
from typing import Any

from loguru import logger

from sso_client.core.constants import LOGGER_NAMESPACE

logger.disable(LOGGER_NAMESPACE)

from sso_client.core.exceptions import (  # noqa: E402
    DescriptorError,
    MalformedPayloadError,
    MissingRequiredFieldError,
    SsoClientError,
    TypeMismatchError,
    UnknownDiscriminatorValueError,
    UnknownTypeError,
)
from sso_client.core.types import WireObject  # noqa: E402
from sso_client.models import UNSET, Model, default_registry  # noqa: E402
from sso_client.registry.codec import ModelCodec  # noqa: E402
from sso_client.registry.descriptor import (  # noqa: E402
    FieldDescriptor,
    ModelDescriptor,
)
from sso_client.registry.registry import ModelRegistry  # noqa: E402
from sso_client.registry.serializer import ModelSerializer  # noqa: E402


@lru_cache
def get_serializer() -> ModelSerializer:
    """Get the cached serializer bound to the default registry."""
    return ModelSerializer(default_registry)


@lru_cache
def get_codec() -> ModelCodec:
    """Get the cached codec bound to the default serializer."""
    return ModelCodec(get_serializer())


def describe(type_name: str) -> ModelDescriptor:
    """Return the descriptor of a generated model type."""
    return default_registry.describe(type_name)


def to_wire_form(
    instance: Model, descriptor: ModelDescriptor | str | None = None
) -> WireObject:
    """Serialize a model instance into a wire object."""
    return get_serializer().to_wire_form(instance, descriptor)


def from_wire_form(wire: object, descriptor: ModelDescriptor | str) -> Model:
    """Deserialize a wire object into a model instance."""
    return get_serializer().from_wire_form(wire, descriptor)


def encode(value: Any, declared: ModelDescriptor | str | None = None) -> bytes:  # noqa: ANN401
    """Render a model (or a declared container of models) as JSON bytes."""
    return get_codec().encode(value, declared)


def decode(payload: bytes | str, declared: ModelDescriptor | str) -> Any:  # noqa: ANN401
    """Parse JSON bytes as the declared model or container type."""
    return get_codec().decode(payload, declared)


__all__ = [
    "UNSET",
    "DescriptorError",
    "FieldDescriptor",
    "MalformedPayloadError",
    "MissingRequiredFieldError",
    "Model",
    "ModelCodec",
    "ModelDescriptor",
    "ModelRegistry",
    "ModelSerializer",
    "SsoClientError",
    "TypeMismatchError",
    "UnknownDiscriminatorValueError",
    "UnknownTypeError",
    "decode",
    "default_registry",
    "describe",
    "encode",
    "from_wire_form",
    "get_codec",
    "get_serializer",
    "to_wire_form",
]
