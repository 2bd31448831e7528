"""Conversion between model instances and their JSON wire form.

``ModelSerializer`` walks a ``ModelDescriptor`` field by field and applies
the rule of each declared type:

- ``string``, ``boolean`` and ``number`` pass through after a shape check
- ``Date`` is written as a fixed UTC timestamp and parsed back exactly
- named models recurse into their own descriptor
- ``Array<T>`` and ``{ [key: string]: T; }`` apply the element rule to
  every member, preserving order
- enums map between members and their wire values
- ``any`` passes JSON values through unchanged

Unset optional fields are omitted from the output, never written as null.
Decoding builds the complete set of field values before instantiating the
model, so a failure never leaves a partially populated instance behind.

Errors carry a dotted ``path`` of wire names (``data[2].created_at``) that
locates the offending value within the outermost payload.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, TypeAlias

from loguru import logger

from sso_client.core.config import SerializationConfig, get_settings
from sso_client.core.error_context import sanitize_dict
from sso_client.core.exceptions import (
    MissingRequiredFieldError,
    TypeMismatchError,
    UnknownDiscriminatorValueError,
)
from sso_client.models.base import Model
from sso_client.registry.descriptor import ModelDescriptor
from sso_client.registry.timestamps import format_wire_datetime, parse_wire_datetime
from sso_client.registry.type_spec import TypeKind, TypeSpec, parse_type

if TYPE_CHECKING:
    from sso_client.core.types import JsonValue, WireObject
    from sso_client.registry.registry import ModelRegistry

ROOT_PATH = "$"

DescriptorRef: TypeAlias = ModelDescriptor | str


def _child(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _display(path: str) -> str:
    return path or ROOT_PATH


def _mismatch(
    expected: str, value: object, spec: TypeSpec, path: str
) -> TypeMismatchError:
    return TypeMismatchError(
        f"Expected {expected} at '{_display(path)}', got {type(value).__name__}",
        path=_display(path),
        declared_type=spec.declared,
        context={"value_type": type(value).__name__},
    )


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _json_value(value: object, spec: TypeSpec, path: str) -> JsonValue:
    """Copy an ``any`` value, accepting only what JSON can represent."""
    if value is None or isinstance(value, str | bool):
        return value
    if _is_number(value):
        if not math.isfinite(value):  # type: ignore[arg-type]
            raise _mismatch("a finite number", value, spec, path)
        return value  # type: ignore[return-value]
    if isinstance(value, list | tuple):
        return [
            _json_value(item, spec, f"{path}[{index}]")
            for index, item in enumerate(value)
        ]
    if isinstance(value, Mapping):
        if not all(isinstance(key, str) for key in value):
            raise _mismatch("an object with string keys", value, spec, path)
        return {
            key: _json_value(item, spec, _child(path, key))
            for key, item in value.items()
        }
    raise _mismatch("a JSON value", value, spec, path)


class ModelSerializer:
    """Converts model instances to and from wire objects using a registry.

    Args:
        registry: Registry that resolves named types.
        config: Serialization switches. Defaults to the configured settings.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        config: SerializationConfig | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or get_settings().serialization_config

    def describe(self, type_name: str) -> ModelDescriptor:
        return self.registry.describe(type_name)

    def _descriptor(self, descriptor: DescriptorRef) -> ModelDescriptor:
        if isinstance(descriptor, ModelDescriptor):
            return descriptor
        return self.registry.describe(descriptor)

    # Model level

    def to_wire_form(
        self,
        instance: Model,
        descriptor: DescriptorRef | None = None,
        *,
        path: str = "",
    ) -> WireObject:
        """Serialize a model instance into a wire object.

        Args:
            instance: The model instance to serialize.
            descriptor: Descriptor or type name to serialize as. Defaults to
                the instance's own descriptor.
            path: Location of the instance within an enclosing payload.

        Returns:
            WireObject: Dict keyed by wire names.

        Raises:
            MissingRequiredFieldError: If a required field is unset.
            TypeMismatchError: If a value disagrees with its declared type.
            UnknownDiscriminatorValueError: If polymorphic resolution fails.
        """
        if not isinstance(instance, Model):
            msg = (
                f"Expected a model instance at '{_display(path)}', "
                f"got {type(instance).__name__}"
            )
            raise TypeMismatchError(
                msg,
                path=_display(path),
                declared_type=str(getattr(descriptor, "type_name", descriptor)),
            )

        if descriptor is None:
            descriptor = instance.descriptor
        resolved = self._resolve_instance_descriptor(
            instance, self._descriptor(descriptor), path
        )
        if instance.type_name() != resolved.type_name:
            msg = (
                f"Cannot serialize {instance.type_name()} as "
                f"{resolved.type_name} at '{_display(path)}'"
            )
            raise TypeMismatchError(
                msg, path=_display(path), declared_type=resolved.type_name
            )

        wire: WireObject = {}
        for field in resolved.fields:
            field_path = _child(path, field.base_name)
            if not instance.is_set(field.name):
                if field.required:
                    raise MissingRequiredFieldError(
                        resolved.type_name, field.name, field.base_name, field_path
                    )
                continue

            value = instance.get_value(field.name)
            if value is None:
                if not field.nullable:
                    raise TypeMismatchError(
                        f"Field '{field.name}' of '{resolved.type_name}' is not "
                        "nullable",
                        path=field_path,
                        declared_type=field.type,
                    )
                wire[field.base_name] = None
                continue

            wire[field.base_name] = self._serialize(value, field.type_spec, field_path)
        return wire

    def from_wire_form(
        self,
        wire: object,
        descriptor: DescriptorRef,
        *,
        path: str = "",
    ) -> Model:
        """Deserialize a wire object into a model instance.

        Args:
            wire: Decoded JSON object keyed by wire names.
            descriptor: Descriptor or type name of the expected type.
            path: Location of the object within an enclosing payload.

        Returns:
            Model: A fully populated instance of the resolved type.

        Raises:
            MissingRequiredFieldError: If a required wire key is absent.
            TypeMismatchError: If a value disagrees with its declared type.
            UnknownDiscriminatorValueError: If polymorphic resolution fails.
        """
        base = self._descriptor(descriptor)
        if not isinstance(wire, dict):
            msg = (
                f"Expected an object for '{base.type_name}' at '{_display(path)}', "
                f"got {type(wire).__name__}"
            )
            raise TypeMismatchError(
                msg,
                path=_display(path),
                declared_type=base.type_name,
                context={"value_type": type(wire).__name__},
            )

        resolved = self._resolve_payload_descriptor(wire, base, path)

        values: dict[str, Any] = {}
        for field in resolved.fields:
            field_path = _child(path, field.base_name)
            if field.base_name not in wire:
                if field.required:
                    raise MissingRequiredFieldError(
                        resolved.type_name, field.name, field.base_name, field_path
                    )
                continue

            raw = wire[field.base_name]
            if raw is None:
                if field.nullable:
                    values[field.name] = None
                    continue
                if not field.required and self.config.treat_null_as_absent:
                    continue
                raise TypeMismatchError(
                    f"Field '{field.base_name}' of '{resolved.type_name}' is not "
                    "nullable",
                    path=field_path,
                    declared_type=field.type,
                )

            values[field.name] = self._deserialize(raw, field.type_spec, field_path)

        self._check_unknown_keys(wire, resolved, path)
        return self.registry.model_class(resolved.type_name)(**values)

    def _check_unknown_keys(
        self, wire: dict[str, Any], descriptor: ModelDescriptor, path: str
    ) -> None:
        unknown = sorted(set(wire) - descriptor.wire_names)
        if not unknown:
            return
        if not self.config.allow_unknown_fields:
            msg = (
                f"Unknown keys for '{descriptor.type_name}' at '{_display(path)}': "
                f"{unknown}"
            )
            raise TypeMismatchError(
                msg,
                path=_display(path),
                declared_type=descriptor.type_name,
                context={"unknown_keys": unknown},
            )
        logger.debug(
            "Ignoring unknown wire keys of {}",
            descriptor.type_name,
            type_name=descriptor.type_name,
            path=_display(path),
            unknown_fields=sanitize_dict({key: wire[key] for key in unknown}),
        )

    # Discriminator resolution

    def _resolve_payload_descriptor(
        self, wire: dict[str, Any], descriptor: ModelDescriptor, path: str
    ) -> ModelDescriptor:
        seen: set[str] = set()
        while descriptor.discriminator is not None and descriptor.type_name not in seen:
            seen.add(descriptor.type_name)
            field = descriptor.field(descriptor.discriminator)
            assert field is not None  # checked when the descriptor was built
            field_path = _child(path, field.base_name)
            if field.base_name not in wire:
                raise MissingRequiredFieldError(
                    descriptor.type_name, field.name, field.base_name, field_path
                )
            target = self._discriminator_target(
                descriptor, wire[field.base_name], field_path
            )
            if target == descriptor.type_name:
                break
            descriptor = self.registry.describe(target)
        return descriptor

    def _resolve_instance_descriptor(
        self, instance: Model, descriptor: ModelDescriptor, path: str
    ) -> ModelDescriptor:
        seen: set[str] = set()
        while descriptor.discriminator is not None and descriptor.type_name not in seen:
            seen.add(descriptor.type_name)
            field = descriptor.field(descriptor.discriminator)
            assert field is not None  # checked when the descriptor was built
            field_path = _child(path, field.base_name)
            if not instance.is_set(field.name):
                raise MissingRequiredFieldError(
                    descriptor.type_name, field.name, field.base_name, field_path
                )
            target = self._discriminator_target(
                descriptor, instance.get_value(field.name), field_path
            )
            if target == descriptor.type_name:
                break
            descriptor = self.registry.describe(target)
        return descriptor

    def _discriminator_target(
        self, descriptor: ModelDescriptor, value: object, path: str
    ) -> str:
        discriminator = descriptor.discriminator or ""
        if not isinstance(value, str):
            spec = parse_type("string")
            raise _mismatch("a string discriminator", value, spec, path)

        target = descriptor.discriminator_mapping.get(value)
        if target is None:
            raise UnknownDiscriminatorValueError(
                descriptor.type_name, discriminator, value, _display(path)
            )
        logger.debug(
            "Resolved {} to {} via {}={}",
            descriptor.type_name,
            target,
            discriminator,
            value,
            type_name=descriptor.type_name,
            path=_display(path),
        )
        return target

    # Value level

    def serialize(self, value: Any, declared: str) -> JsonValue:  # noqa: ANN401
        """Serialize any value according to a declared type string.

        Raises:
            TypeMismatchError: If the value disagrees with the declared type.
        """
        return self._serialize(value, parse_type(declared), "")

    def deserialize(self, data: object, declared: str) -> Any:  # noqa: ANN401
        """Deserialize a decoded JSON value according to a declared type string.

        Raises:
            TypeMismatchError: If the data disagrees with the declared type.
        """
        return self._deserialize(data, parse_type(declared), "")

    def _serialize(self, value: Any, spec: TypeSpec, path: str) -> JsonValue:
        match spec.kind:
            case TypeKind.STRING:
                if not isinstance(value, str):
                    raise _mismatch("a string", value, spec, path)
                return value
            case TypeKind.BOOLEAN:
                if not isinstance(value, bool):
                    raise _mismatch("a boolean", value, spec, path)
                return value
            case TypeKind.NUMBER:
                if not _is_number(value) or not math.isfinite(value):
                    raise _mismatch("a finite number", value, spec, path)
                return value
            case TypeKind.DATE:
                if not isinstance(value, datetime) or value.utcoffset() is None:
                    raise _mismatch("an aware datetime", value, spec, path)
                return format_wire_datetime(value)
            case TypeKind.ANY:
                return _json_value(value, spec, path)
            case TypeKind.ARRAY:
                if not isinstance(value, list | tuple):
                    raise _mismatch("a list", value, spec, path)
                return [
                    self._serialize_item(item, spec, f"{path}[{index}]")
                    for index, item in enumerate(value)
                ]
            case TypeKind.MAP:
                if not isinstance(value, Mapping) or not all(
                    isinstance(key, str) for key in value
                ):
                    raise _mismatch("a mapping with string keys", value, spec, path)
                return {
                    key: self._serialize_item(item, spec, _child(path, key))
                    for key, item in value.items()
                }
            case TypeKind.NAMED:
                return self._serialize_named(value, spec, path)
        msg = f"Unhandled type kind {spec.kind}"
        raise AssertionError(msg)

    def _serialize_item(self, item: Any, spec: TypeSpec, path: str) -> JsonValue:  # noqa: ANN401
        assert spec.item is not None
        if item is None and spec.item.kind is not TypeKind.ANY:
            raise _mismatch(spec.item.declared, item, spec.item, path)
        return self._serialize(item, spec.item, path)

    def _serialize_named(self, value: Any, spec: TypeSpec, path: str) -> JsonValue:  # noqa: ANN401
        name = spec.name or spec.declared
        if self.registry.is_enum(name):
            enum = self.registry.enum_class(name)
            if not isinstance(value, enum):
                raise _mismatch(f"a {name} member", value, spec, path)
            return value.value
        return self.to_wire_form(value, self.registry.describe(name), path=path)

    def _deserialize(self, data: object, spec: TypeSpec, path: str) -> Any:
        match spec.kind:
            case TypeKind.STRING:
                if not isinstance(data, str):
                    raise _mismatch("a string", data, spec, path)
                return data
            case TypeKind.BOOLEAN:
                if not isinstance(data, bool):
                    raise _mismatch("a boolean", data, spec, path)
                return data
            case TypeKind.NUMBER:
                if not _is_number(data):
                    raise _mismatch("a number", data, spec, path)
                return data
            case TypeKind.DATE:
                return self._deserialize_date(data, spec, path)
            case TypeKind.ANY:
                return data
            case TypeKind.ARRAY:
                if not isinstance(data, list):
                    raise _mismatch("an array", data, spec, path)
                return [
                    self._deserialize_item(item, spec, f"{path}[{index}]")
                    for index, item in enumerate(data)
                ]
            case TypeKind.MAP:
                if not isinstance(data, dict):
                    raise _mismatch("an object", data, spec, path)
                return {
                    key: self._deserialize_item(item, spec, _child(path, key))
                    for key, item in data.items()
                }
            case TypeKind.NAMED:
                return self._deserialize_named(data, spec, path)
        msg = f"Unhandled type kind {spec.kind}"
        raise AssertionError(msg)

    def _deserialize_item(self, item: object, spec: TypeSpec, path: str) -> Any:  # noqa: ANN401
        assert spec.item is not None
        if item is None and spec.item.kind is not TypeKind.ANY:
            raise _mismatch(spec.item.declared, item, spec.item, path)
        return self._deserialize(item, spec.item, path)

    def _deserialize_date(self, data: object, spec: TypeSpec, path: str) -> datetime:
        if not isinstance(data, str):
            raise _mismatch("a timestamp string", data, spec, path)
        try:
            return parse_wire_datetime(data)
        except ValueError as e:
            raise TypeMismatchError(
                f"Invalid timestamp at '{_display(path)}': {e}",
                path=_display(path),
                declared_type=spec.declared,
                cause=e,
            ) from e

    def _deserialize_named(self, data: object, spec: TypeSpec, path: str) -> Any:  # noqa: ANN401
        name = spec.name or spec.declared
        if self.registry.is_enum(name):
            enum = self.registry.enum_class(name)
            try:
                return enum(data)
            except ValueError as e:
                raise TypeMismatchError(
                    f"{data!r} is not a valid {name} at '{_display(path)}'",
                    path=_display(path),
                    declared_type=spec.declared,
                    context={"allowed": [member.value for member in enum]},
                    cause=e,
                ) from e
        return self.from_wire_form(data, self.registry.describe(name), path=path)
