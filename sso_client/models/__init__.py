"""Generated models of the SSO API and the default registry holding them.

``default_registry`` is populated and frozen when this package is imported;
it is shared, read-only process state.
"""

from sso_client.models.base import UNSET, Model, Unset
from sso_client.models.request_user_update import RequestUserUpdate
from sso_client.models.request_user_update_access import RequestUserUpdateAccess
from sso_client.models.request_user_update_password import RequestUserUpdatePassword
from sso_client.models.response_user_oauth2_provider import ResponseUserOauth2Provider
from sso_client.models.response_user_oauth2_provider_many import (
    ResponseUserOauth2ProviderMany,
)
from sso_client.registry.registry import ModelRegistry

GENERATED_MODELS: tuple[type[Model], ...] = (
    RequestUserUpdate,
    RequestUserUpdateAccess,
    RequestUserUpdatePassword,
    ResponseUserOauth2Provider,
    ResponseUserOauth2ProviderMany,
)

default_registry = ModelRegistry("default")
default_registry.register_models(GENERATED_MODELS)
default_registry.freeze()

__all__ = [
    "GENERATED_MODELS",
    "UNSET",
    "Model",
    "RequestUserUpdate",
    "RequestUserUpdateAccess",
    "RequestUserUpdatePassword",
    "ResponseUserOauth2Provider",
    "ResponseUserOauth2ProviderMany",
    "Unset",
    "default_registry",
]
