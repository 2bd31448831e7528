"""Static descriptors of generated model types.

A ``ModelDescriptor`` is the explicit form of a generated attribute table:
the ordered list of fields with their local name, wire name and declared
type, plus the optional discriminator used for polymorphic payloads.

Descriptors are frozen pydantic models. Their structural invariants are
checked when they are built, so a descriptor that exists is a valid one.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sso_client.core.exceptions import DescriptorError
from sso_client.registry.type_spec import TypeKind, TypeSpec, parse_type


class FieldDescriptor(BaseModel):
    """Mapping of one model attribute to its wire key and declared type."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Attribute name used in code")
    base_name: str = Field(
        ..., min_length=1, description="Key used in the serialized payload"
    )
    type: str = Field(..., min_length=1, description="Declared type string")
    required: bool = Field(default=False, description="Field must always be present")
    nullable: bool = Field(
        default=False, description="JSON null is a valid value, distinct from absence"
    )

    @property
    def type_spec(self) -> TypeSpec:
        """Parsed form of the declared type."""
        return parse_type(self.type)

    def as_attribute_entry(self) -> dict[str, str]:
        """Return the entry in the shape of a generated attribute table."""
        return {"name": self.name, "baseName": self.base_name, "type": self.type}


class ModelDescriptor(BaseModel):
    """Static metadata describing one schema type."""

    model_config = ConfigDict(frozen=True)

    type_name: str = Field(..., min_length=1)
    fields: tuple[FieldDescriptor, ...] = ()
    discriminator: str | None = None
    discriminator_mapping: Mapping[str, str] = Field(default_factory=dict)

    @field_validator("discriminator_mapping", mode="after")
    @classmethod
    def _freeze_mapping(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    def __hash__(self) -> int:
        return hash(
            (
                self.type_name,
                self.fields,
                self.discriminator,
                tuple(sorted(self.discriminator_mapping.items())),
            )
        )

    @model_validator(mode="after")
    def _check_invariants(self) -> Self:
        names = [field.name for field in self.fields]
        base_names = [field.base_name for field in self.fields]
        context = {"type_name": self.type_name}

        if duplicates := _duplicates(names):
            msg = f"Duplicate local field names in '{self.type_name}': {duplicates}"
            raise DescriptorError(msg, context=context)
        if duplicates := _duplicates(base_names):
            msg = f"Duplicate wire field names in '{self.type_name}': {duplicates}"
            raise DescriptorError(msg, context=context)

        # Fail early on malformed declarations
        for field in self.fields:
            _ = field.type_spec

        if self.discriminator is None:
            if self.discriminator_mapping:
                msg = (
                    f"'{self.type_name}' has a discriminator mapping but no "
                    "discriminator"
                )
                raise DescriptorError(msg, context=context)
            return self

        field = self.field(self.discriminator)
        if field is None:
            msg = (
                f"Discriminator '{self.discriminator}' is not a field of "
                f"'{self.type_name}'"
            )
            raise DescriptorError(msg, context=context)
        if not field.required or field.type_spec.kind is not TypeKind.STRING:
            msg = (
                f"Discriminator '{self.discriminator}' of '{self.type_name}' must be "
                "a required string field"
            )
            raise DescriptorError(msg, context=context)
        if not self.discriminator_mapping:
            msg = f"'{self.type_name}' declares a discriminator without a mapping"
            raise DescriptorError(msg, context=context)
        return self

    def field(self, name: str) -> FieldDescriptor | None:
        """Look up a field by its local name."""
        return next((f for f in self.fields if f.name == name), None)

    def field_by_wire_name(self, base_name: str) -> FieldDescriptor | None:
        """Look up a field by its wire name."""
        return next((f for f in self.fields if f.base_name == base_name), None)

    def wire_name(self, name: str) -> str:
        """Return the wire name of a local field.

        Raises:
            KeyError: If the descriptor has no such field.
        """
        field = self.field(name)
        if field is None:
            raise KeyError(name)
        return field.base_name

    @property
    def required_fields(self) -> tuple[FieldDescriptor, ...]:
        return tuple(f for f in self.fields if f.required)

    @property
    def wire_names(self) -> frozenset[str]:
        return frozenset(f.base_name for f in self.fields)

    def referenced_names(self) -> set[str]:
        """Return every model or enum name referenced by a field or the mapping."""
        names: set[str] = set(self.discriminator_mapping.values())
        for field in self.fields:
            names |= field.type_spec.referenced_names()
        return names

    def attribute_type_map(self) -> list[dict[str, str]]:
        """Return the fields in the shape of a generated attribute table."""
        return [field.as_attribute_entry() for field in self.fields]


def _duplicates(values: list[str]) -> list[str]:
    seen: set[str] = set()
    duplicates: set[str] = set()
    for value in values:
        if value in seen:
            duplicates.add(value)
        seen.add(value)
    return sorted(duplicates)
