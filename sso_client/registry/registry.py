"""Typed model registry.

The registry holds, for every known schema type, the static descriptor and
the model class instantiated when a payload of that type is decoded. Enum
types referenced from descriptors are registered alongside.

A registry is populated once (normally at import time, by the generated
``sso_client.models`` package) and then frozen. A frozen registry is
read-only, so concurrent readers need no locking.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING

from loguru import logger

from sso_client.core.exceptions import DescriptorError, UnknownTypeError
from sso_client.registry.type_spec import PRIMITIVE_KINDS

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sso_client.models.base import Model
    from sso_client.registry.descriptor import ModelDescriptor


class ModelRegistry:
    """Lookup table from type names to descriptors, model classes and enums."""

    def __init__(self, name: str = "default") -> None:
        self.name = name
        self._descriptors: dict[str, ModelDescriptor] = {}
        self._models: dict[str, type[Model]] = {}
        self._enums: dict[str, type[Enum]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def descriptors(self) -> Mapping[str, ModelDescriptor]:
        """Read-only view of the registered descriptors."""
        return MappingProxyType(self._descriptors)

    def _check_name(self, type_name: str) -> None:
        if self._frozen:
            msg = f"Registry '{self.name}' is frozen; cannot register '{type_name}'"
            raise DescriptorError(msg, context={"type_name": type_name})
        if type_name in PRIMITIVE_KINDS:
            msg = f"'{type_name}' is a primitive type name"
            raise DescriptorError(msg, context={"type_name": type_name})
        if type_name in self._descriptors or type_name in self._enums:
            msg = f"Type '{type_name}' is already registered"
            raise DescriptorError(msg, context={"type_name": type_name})

    def register(self, descriptor: ModelDescriptor, model: type[Model]) -> None:
        """Register a descriptor and the class its instances are built from.

        Args:
            descriptor: Static metadata of the schema type.
            model: Model class whose instances hold values of the type.

        Raises:
            DescriptorError: If the registry is frozen, the name is taken, or
                the model class is bound to a different descriptor.
        """
        self._check_name(descriptor.type_name)
        if getattr(model, "descriptor", descriptor) is not descriptor:
            msg = (
                f"Model class {model.__name__} is bound to a different descriptor "
                f"than '{descriptor.type_name}'"
            )
            raise DescriptorError(msg, context={"type_name": descriptor.type_name})

        self._descriptors[descriptor.type_name] = descriptor
        self._models[descriptor.type_name] = model
        logger.debug(
            "Registered model type {}",
            descriptor.type_name,
            type_name=descriptor.type_name,
            registry=self.name,
            field_count=len(descriptor.fields),
        )

    def register_model(self, model: type[Model]) -> type[Model]:
        """Register a model class using its own descriptor.

        Returns the class unchanged so it can be used as a decorator.
        """
        self.register(model.descriptor, model)
        return model

    def register_models(self, models: Iterable[type[Model]]) -> None:
        for model in models:
            self.register_model(model)

    def register_enum(self, type_name: str, enum: type[Enum]) -> None:
        """Register an enum type referenced by name from field declarations."""
        self._check_name(type_name)
        self._enums[type_name] = enum
        logger.debug(
            "Registered enum type {}",
            type_name,
            type_name=type_name,
            registry=self.name,
        )

    def freeze(self) -> ModelRegistry:
        """Check cross references and make the registry read-only.

        Raises:
            DescriptorError: If a descriptor references an unknown type, or a
                discriminator mapping points at a type without the
                discriminator field.
        """
        if self._frozen:
            return self

        for descriptor in self._descriptors.values():
            for name in sorted(descriptor.referenced_names()):
                if not self.is_registered(name):
                    msg = (
                        f"'{descriptor.type_name}' references unregistered "
                        f"type '{name}'"
                    )
                    raise DescriptorError(
                        msg,
                        context={"type_name": descriptor.type_name, "reference": name},
                    )
            self._check_discriminator_targets(descriptor)

        self._frozen = True
        logger.debug(
            "Froze model registry {}",
            self.name,
            registry=self.name,
            model_count=len(self._descriptors),
            enum_count=len(self._enums),
        )
        return self

    def _check_discriminator_targets(self, descriptor: ModelDescriptor) -> None:
        if descriptor.discriminator is None:
            return
        wire_name = descriptor.wire_name(descriptor.discriminator)
        for value, target in descriptor.discriminator_mapping.items():
            target_descriptor = self._descriptors.get(target)
            if target_descriptor is None:
                msg = f"Discriminator value '{value}' maps to non-model '{target}'"
                raise DescriptorError(
                    msg, context={"type_name": descriptor.type_name}
                )
            target_field = target_descriptor.field_by_wire_name(wire_name)
            if target_field is None or not target_field.required:
                msg = (
                    f"Subtype '{target}' of '{descriptor.type_name}' lacks the "
                    f"required discriminator field '{wire_name}'"
                )
                raise DescriptorError(
                    msg, context={"type_name": descriptor.type_name}
                )

    def is_registered(self, type_name: str) -> bool:
        return type_name in self._descriptors or type_name in self._enums

    def is_model(self, type_name: str) -> bool:
        return type_name in self._descriptors

    def is_enum(self, type_name: str) -> bool:
        return type_name in self._enums

    def describe(self, type_name: str) -> ModelDescriptor:
        """Return the descriptor of a registered model type.

        Raises:
            UnknownTypeError: If no model type of that name is registered.
        """
        try:
            return self._descriptors[type_name]
        except KeyError as e:
            raise UnknownTypeError(type_name, context={"registry": self.name}) from e

    def model_class(self, type_name: str) -> type[Model]:
        """Return the model class of a registered type.

        Raises:
            UnknownTypeError: If no model type of that name is registered.
        """
        try:
            return self._models[type_name]
        except KeyError as e:
            raise UnknownTypeError(type_name, context={"registry": self.name}) from e

    def enum_class(self, type_name: str) -> type[Enum]:
        """Return the enum class registered under a type name.

        Raises:
            UnknownTypeError: If no enum of that name is registered.
        """
        try:
            return self._enums[type_name]
        except KeyError as e:
            raise UnknownTypeError(type_name, context={"registry": self.name}) from e

    def __contains__(self, type_name: object) -> bool:
        return isinstance(type_name, str) and self.is_registered(type_name)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return (
            f"ModelRegistry(name='{self.name}', models={len(self._descriptors)}, "
            f"enums={len(self._enums)}, {state})"
        )
