"""Body of the update user request."""

from __future__ import annotations

from typing import ClassVar

from sso_client.models.base import Model, Unset
from sso_client.models.request_user_update_access import RequestUserUpdateAccess
from sso_client.models.request_user_update_password import RequestUserUpdatePassword
from sso_client.registry.descriptor import FieldDescriptor, ModelDescriptor


class RequestUserUpdate(Model):
    """Partial update of a user; only ``id`` is required.

    Fields left unset are not sent, so the server keeps their current values.
    """

    access: RequestUserUpdateAccess | Unset
    email: str | Unset
    enable: bool | Unset
    id: str
    locale: str | Unset
    name: str | Unset
    password: RequestUserUpdatePassword | Unset
    timezone: str | Unset

    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        type_name="RequestUserUpdate",
        fields=(
            FieldDescriptor(
                name="access", base_name="access", type="RequestUserUpdateAccess"
            ),
            FieldDescriptor(name="email", base_name="email", type="string"),
            FieldDescriptor(name="enable", base_name="enable", type="boolean"),
            FieldDescriptor(name="id", base_name="id", type="string", required=True),
            FieldDescriptor(name="locale", base_name="locale", type="string"),
            FieldDescriptor(name="name", base_name="name", type="string"),
            FieldDescriptor(
                name="password", base_name="password", type="RequestUserUpdatePassword"
            ),
            FieldDescriptor(name="timezone", base_name="timezone", type="string"),
        ),
    )
