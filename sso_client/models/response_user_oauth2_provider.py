"""OAuth2 provider link of a user."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from sso_client.models.base import Model
from sso_client.registry.descriptor import FieldDescriptor, ModelDescriptor

if TYPE_CHECKING:
    from datetime import datetime


class ResponseUserOauth2Provider(Model):
    """Association between a user and an OAuth2 provider account.

    ``static`` is a reserved word in the generated client, so the attribute
    is ``_static`` while the wire key stays ``static``.
    """

    createdAt: datetime  # noqa: N815 - generated attribute name
    oauth2Provider: str  # noqa: N815 - generated attribute name
    _static: bool
    sub: str
    userId: str  # noqa: N815 - generated attribute name

    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        type_name="ResponseUserOauth2Provider",
        fields=(
            FieldDescriptor(
                name="createdAt", base_name="created_at", type="Date", required=True
            ),
            FieldDescriptor(
                name="oauth2Provider",
                base_name="oauth2_provider",
                type="string",
                required=True,
            ),
            FieldDescriptor(
                name="_static", base_name="static", type="boolean", required=True
            ),
            FieldDescriptor(name="sub", base_name="sub", type="string", required=True),
            FieldDescriptor(
                name="userId", base_name="user_id", type="string", required=True
            ),
        ),
    )
