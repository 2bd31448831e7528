"""Fixtures for registry tests.

Besides the generated SSO models, the tests need a polymorphic family, an
enum, maps and nullable fields. They are declared here as a small audit
event schema registered in its own registry.
"""

from enum import Enum
from typing import ClassVar

import pytest

from sso_client.core.config import SerializationConfig
from sso_client.models.base import Model
from sso_client.registry.codec import ModelCodec
from sso_client.registry.descriptor import FieldDescriptor, ModelDescriptor
from sso_client.registry.registry import ModelRegistry
from sso_client.registry.serializer import ModelSerializer


class AuditStatus(Enum):
    """Outcome of an audited action."""

    OK = "ok"
    FAILED = "failed"


class AuditEvent(Model):
    """Polymorphic base; the ``kind`` wire value selects the subtype."""

    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        type_name="AuditEvent",
        fields=(
            FieldDescriptor(name="kind", base_name="kind", type="string", required=True),
            FieldDescriptor(
                name="createdAt", base_name="created_at", type="Date", required=True
            ),
        ),
        discriminator="kind",
        discriminator_mapping={
            "login": "AuditLogin",
            "password_reset": "AuditPasswordReset",
        },
    )


class AuditLogin(Model):
    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        type_name="AuditLogin",
        fields=(
            FieldDescriptor(name="kind", base_name="kind", type="string", required=True),
            FieldDescriptor(
                name="createdAt", base_name="created_at", type="Date", required=True
            ),
            FieldDescriptor(
                name="clientId", base_name="client_id", type="string", required=True
            ),
            FieldDescriptor(
                name="userAgent", base_name="user_agent", type="string", nullable=True
            ),
        ),
    )


class AuditPasswordReset(Model):
    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        type_name="AuditPasswordReset",
        fields=(
            FieldDescriptor(name="kind", base_name="kind", type="string", required=True),
            FieldDescriptor(
                name="createdAt", base_name="created_at", type="Date", required=True
            ),
            FieldDescriptor(
                name="userId", base_name="user_id", type="string", required=True
            ),
            FieldDescriptor(
                name="data", base_name="data", type="{ [key: string]: any; }"
            ),
        ),
    )


class AuditList(Model):
    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        type_name="AuditList",
        fields=(
            FieldDescriptor(
                name="data", base_name="data", type="Array<AuditEvent>", required=True
            ),
            FieldDescriptor(name="status", base_name="status", type="AuditStatus"),
            FieldDescriptor(
                name="counts", base_name="counts", type="{ [key: string]: number; }"
            ),
            FieldDescriptor(name="tags", base_name="tags", type="Array<string>"),
        ),
    )


AUDIT_MODELS: tuple[type[Model], ...] = (
    AuditEvent,
    AuditLogin,
    AuditPasswordReset,
    AuditList,
)


def build_audit_registry() -> ModelRegistry:
    """Build a frozen registry with the audit schema."""
    registry = ModelRegistry("audit")
    registry.register_enum("AuditStatus", AuditStatus)
    registry.register_models(AUDIT_MODELS)
    return registry.freeze()


@pytest.fixture
def audit_registry() -> ModelRegistry:
    """Provide a frozen registry holding the audit schema.

    Returns:
        ModelRegistry: Registry with audit models and the status enum.
    """
    return build_audit_registry()


@pytest.fixture
def serializer(audit_registry: ModelRegistry) -> ModelSerializer:
    """Provide a serializer with default configuration over the audit schema.

    Args:
        audit_registry: Audit registry fixture.

    Returns:
        ModelSerializer: Serializer bound to the audit registry.
    """
    return ModelSerializer(audit_registry, SerializationConfig())


@pytest.fixture
def codec(serializer: ModelSerializer) -> ModelCodec:
    """Provide a codec over the audit serializer.

    Args:
        serializer: Audit serializer fixture.

    Returns:
        ModelCodec: Codec bound to the serializer.
    """
    return ModelCodec(serializer)
