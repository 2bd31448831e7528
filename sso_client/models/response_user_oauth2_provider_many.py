"""List response of a user's OAuth2 provider links."""

from __future__ import annotations

from typing import ClassVar

from sso_client.models.base import Model
from sso_client.models.response_user_oauth2_provider import ResponseUserOauth2Provider
from sso_client.registry.descriptor import FieldDescriptor, ModelDescriptor


class ResponseUserOauth2ProviderMany(Model):
    data: list[ResponseUserOauth2Provider]

    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        type_name="ResponseUserOauth2ProviderMany",
        fields=(
            FieldDescriptor(
                name="data",
                base_name="data",
                type="Array<ResponseUserOauth2Provider>",
                required=True,
            ),
        ),
    )
