"""Byte-level encoding of models using orjson.

The transport layer exchanges raw bytes; ``ModelCodec`` joins orjson
parsing and rendering with the serializer so a response body can be turned
into a model (or a list of models) in one call.

orjson is used for its speed and strictness: it rejects invalid UTF-8 and
non-standard JSON such as ``NaN`` literals.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from sso_client.core.exceptions import MalformedPayloadError
from sso_client.models.base import Model
from sso_client.registry.descriptor import ModelDescriptor

if TYPE_CHECKING:
    from sso_client.registry.serializer import ModelSerializer


class ModelCodec:
    """Encode values to JSON bytes and decode JSON bytes to values.

    Args:
        serializer: Serializer used to map between values and wire objects.
    """

    def __init__(self, serializer: ModelSerializer) -> None:
        self.serializer = serializer

    def encode(
        self,
        value: Any,  # noqa: ANN401 - a model or any value matching `declared`
        declared: ModelDescriptor | str | None = None,
    ) -> bytes:
        """Render a value as JSON bytes with sorted keys.

        Args:
            value: A model instance, or any value matching ``declared``.
            declared: Descriptor, model name or type string such as
                ``Array<ResponseUserOauth2Provider>``. Defaults to the
                model's own descriptor.

        Returns:
            bytes: The UTF-8 JSON document.
        """
        if isinstance(declared, ModelDescriptor) or (
            declared is None and isinstance(value, Model)
        ):
            wire = self.serializer.to_wire_form(value, declared)
        elif declared is None:
            msg = "A declared type is required to encode non-model values"
            raise TypeError(msg)
        else:
            wire = self.serializer.serialize(value, declared)
        return orjson.dumps(wire, option=orjson.OPT_SORT_KEYS)

    def decode(
        self,
        payload: bytes | bytearray | memoryview | str,
        declared: ModelDescriptor | str,
    ) -> Any:  # noqa: ANN401 - shape follows `declared`
        """Parse JSON bytes and deserialize them as the declared type.

        Args:
            payload: Raw JSON document.
            declared: Descriptor, model name or type string.

        Returns:
            Any: A model instance, or a list/dict of them for container types.

        Raises:
            MalformedPayloadError: If the payload is not valid JSON.
        """
        try:
            data = orjson.loads(payload)
        except orjson.JSONDecodeError as e:
            raise MalformedPayloadError(
                f"Payload is not valid JSON: {e.msg}",
                context={"position": e.pos},
                cause=e,
            ) from e

        if isinstance(declared, ModelDescriptor):
            return self.serializer.from_wire_form(data, declared)
        return self.serializer.deserialize(data, declared)
