"""Base class for generated model types.

Generated models are plain attribute containers. Each field is in one of
three states:

- **unset**: never assigned; reading it returns ``UNSET``
- **null**: assigned ``None``
- **value**: assigned anything else

The distinction matters on the wire: an unset optional field is omitted from
the payload entirely, while ``None`` is written as ``null`` when the field
allows it.
"""

from __future__ import annotations

from typing import Any, ClassVar, Final, final

from sso_client.core.constants import REDACTED
from sso_client.core.error_context import is_sensitive_field
from sso_client.core.exceptions import DescriptorError
from sso_client.registry.descriptor import ModelDescriptor


@final
class Unset:
    """Type of the ``UNSET`` sentinel."""

    _instance: ClassVar[Unset | None] = None

    def __new__(cls) -> Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __reduce__(self) -> str:
        return "UNSET"


UNSET: Final = Unset()


def _is_reserved(name: str) -> bool:
    return name in {"descriptor", "_values"} or hasattr(Model, name)


class Model:
    """Attribute container backed by a static ``ModelDescriptor``.

    Subclasses set ``descriptor``; the field names it lists are the only
    attributes an instance accepts. A field may not share its name with a
    member of this class.
    """

    descriptor: ClassVar[ModelDescriptor]
    _field_names: ClassVar[frozenset[str]] = frozenset()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "descriptor" in cls.__dict__:
            names = frozenset(f.name for f in cls.descriptor.fields)
            reserved = sorted(name for name in names if _is_reserved(name))
            if reserved:
                msg = (
                    f"Fields of '{cls.descriptor.type_name}' shadow model "
                    f"members: {', '.join(reserved)}"
                )
                raise DescriptorError(
                    msg,
                    context={
                        "type_name": cls.descriptor.type_name,
                        "fields": reserved,
                    },
                )
            cls._field_names = names

    def __init__(self, **values: Any) -> None:
        object.__setattr__(self, "_values", {})
        for name, value in values.items():
            setattr(self, name, value)

    @classmethod
    def get_attribute_type_map(cls) -> list[dict[str, str]]:
        """Return the static name/wire name/type table of this model."""
        return cls.descriptor.attribute_type_map()

    @classmethod
    def type_name(cls) -> str:
        return cls.descriptor.type_name

    def __getattr__(self, name: str) -> Any:  # noqa: ANN401 - field values are dynamic
        # Only reached when regular lookup fails
        if name != "_values" and name in type(self)._field_names:
            return self._values.get(name, UNSET)
        msg = f"'{type(self).__name__}' object has no attribute '{name}'"
        raise AttributeError(msg)

    def __setattr__(self, name: str, value: Any) -> None:  # noqa: ANN401
        if name not in type(self)._field_names:
            msg = f"'{type(self).__name__}' has no field '{name}'"
            raise AttributeError(msg)
        if value is UNSET:
            self._values.pop(name, None)
        else:
            self._values[name] = value

    def __delattr__(self, name: str) -> None:
        self.unset(name)

    def get_value(self, name: str) -> Any:  # noqa: ANN401 - field values are dynamic
        """Read a field by name, returning ``UNSET`` when it was never assigned."""
        if name not in type(self)._field_names:
            msg = f"'{type(self).__name__}' has no field '{name}'"
            raise AttributeError(msg)
        return self._values.get(name, UNSET)

    def is_set(self, name: str) -> bool:
        """Check whether a field has been assigned, including to None."""
        return name in self._values

    def unset(self, name: str) -> None:
        """Return a field to the unset state."""
        if name not in type(self)._field_names:
            msg = f"'{type(self).__name__}' has no field '{name}'"
            raise AttributeError(msg)
        self._values.pop(name, None)

    def fields_set(self) -> tuple[str, ...]:
        """Names of the assigned fields, in descriptor order."""
        return tuple(f.name for f in self.descriptor.fields if f.name in self._values)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._values == other._values  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        parts = []
        for name in self.fields_set():
            value = REDACTED if is_sensitive_field(name) else repr(self._values[name])
            parts.append(f"{name}={value}")
        return f"{type(self).__name__}({', '.join(parts)})"
