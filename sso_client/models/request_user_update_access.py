"""Access settings of the update user request."""

from __future__ import annotations

from typing import ClassVar

from sso_client.models.base import Model, Unset
from sso_client.registry.descriptor import FieldDescriptor, ModelDescriptor


class RequestUserUpdateAccess(Model):
    """Per-client access of the user being updated."""

    enable: bool | Unset
    scope: str | Unset

    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        type_name="RequestUserUpdateAccess",
        fields=(
            FieldDescriptor(name="enable", base_name="enable", type="boolean"),
            FieldDescriptor(name="scope", base_name="scope", type="string"),
        ),
    )
