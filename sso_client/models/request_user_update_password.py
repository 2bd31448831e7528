"""Password settings of the update user request."""

from __future__ import annotations

from typing import ClassVar

from sso_client.models.base import Model, Unset
from sso_client.registry.descriptor import FieldDescriptor, ModelDescriptor


class RequestUserUpdatePassword(Model):
    """Password policy flags of the user being updated."""

    allowReset: bool | Unset  # noqa: N815 - generated attribute name
    requireUpdate: bool | Unset  # noqa: N815 - generated attribute name

    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        type_name="RequestUserUpdatePassword",
        fields=(
            FieldDescriptor(name="allowReset", base_name="allow_reset", type="boolean"),
            FieldDescriptor(
                name="requireUpdate", base_name="require_update", type="boolean"
            ),
        ),
    )
