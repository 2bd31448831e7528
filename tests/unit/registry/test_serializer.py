"""Unit tests for ModelSerializer.

Covers the field-level rules of to_wire_form/from_wire_form over the
generated SSO models, and the value-level rules of every declared type kind
over the audit schema from conftest.
"""

from datetime import UTC, datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_check
from pytest_mock import MockerFixture

from sso_client.core.config import SerializationConfig
from sso_client.core.exceptions import (
    ErrorCode,
    MissingRequiredFieldError,
    TypeMismatchError,
    UnknownTypeError,
)
from sso_client.models import (
    UNSET,
    RequestUserUpdate,
    RequestUserUpdateAccess,
    RequestUserUpdatePassword,
    ResponseUserOauth2Provider,
    ResponseUserOauth2ProviderMany,
    default_registry,
)
from sso_client.registry.serializer import ModelSerializer

from .conftest import AuditList, AuditLogin, AuditPasswordReset, AuditStatus

CREATED_AT = datetime(2024, 5, 1, 12, 30, 0, 123456, tzinfo=UTC)
CREATED_AT_WIRE = "2024-05-01T12:30:00.123456Z"


@pytest.fixture
def sso_serializer() -> ModelSerializer:
    """Provide a serializer over the generated SSO models.

    Returns:
        ModelSerializer: Serializer bound to the default registry.
    """
    return ModelSerializer(default_registry, SerializationConfig())


@pytest.fixture
def provider() -> ResponseUserOauth2Provider:
    """Provide a fully populated OAuth2 provider link.

    Returns:
        ResponseUserOauth2Provider: Instance with every field set.
    """
    return ResponseUserOauth2Provider(
        createdAt=CREATED_AT,
        oauth2Provider="github",
        _static=False,
        sub="12345",
        userId="u1",
    )


@pytest.fixture
def provider_wire() -> dict[str, Any]:
    """Provide the wire form of the provider fixture.

    Returns:
        dict[str, Any]: Wire object keyed by wire names.
    """
    return {
        "created_at": CREATED_AT_WIRE,
        "oauth2_provider": "github",
        "static": False,
        "sub": "12345",
        "user_id": "u1",
    }


@pytest.mark.unit
class TestToWireForm:
    """Test serialization of model instances."""

    def test_wire_names_are_used(
        self,
        sso_serializer: ModelSerializer,
        provider: ResponseUserOauth2Provider,
        provider_wire: dict[str, Any],
    ) -> None:
        """Keys are wire names, never local names."""
        wire = sso_serializer.to_wire_form(provider)

        assert wire == provider_wire
        assert "createdAt" not in wire
        assert "_static" not in wire

    def test_descriptor_by_name(
        self,
        sso_serializer: ModelSerializer,
        provider: ResponseUserOauth2Provider,
        provider_wire: dict[str, Any],
    ) -> None:
        """The descriptor can be given as a type name."""
        assert (
            sso_serializer.to_wire_form(provider, "ResponseUserOauth2Provider")
            == provider_wire
        )

    def test_unset_optional_fields_are_omitted(
        self, sso_serializer: ModelSerializer
    ) -> None:
        """Unset optional fields produce no key at all."""
        wire = sso_serializer.to_wire_form(RequestUserUpdate(id="u1", enable=False))

        assert wire == {"id": "u1", "enable": False}

    def test_nested_models(self, sso_serializer: ModelSerializer) -> None:
        """Named references recurse into the referenced descriptor."""
        update = RequestUserUpdate(
            id="u1",
            access=RequestUserUpdateAccess(enable=True),
            password=RequestUserUpdatePassword(allowReset=True, requireUpdate=False),
        )

        wire = sso_serializer.to_wire_form(update)

        assert wire == {
            "id": "u1",
            "access": {"enable": True},
            "password": {"allow_reset": True, "require_update": False},
        }

    def test_collections_preserve_order(
        self,
        sso_serializer: ModelSerializer,
        provider: ResponseUserOauth2Provider,
    ) -> None:
        """Array fields serialize element-wise in order."""
        second = ResponseUserOauth2Provider(
            createdAt=CREATED_AT,
            oauth2Provider="microsoft",
            _static=True,
            sub="678",
            userId="u1",
        )
        many = ResponseUserOauth2ProviderMany(data=[second, provider])

        wire = sso_serializer.to_wire_form(many)

        assert [item["oauth2_provider"] for item in wire["data"]] == [
            "microsoft",
            "github",
        ]

    def test_missing_required_field(self, sso_serializer: ModelSerializer) -> None:
        """A required field that was never set fails serialization."""
        with pytest.raises(MissingRequiredFieldError) as exc:
            sso_serializer.to_wire_form(RequestUserUpdate(email="a@b.com"))

        with pytest_check.check:
            assert exc.value.field == "id"
        with pytest_check.check:
            assert exc.value.path == "id"
        with pytest_check.check:
            assert exc.value.error_code == ErrorCode.MISSING_REQUIRED_FIELD.value

    def test_missing_required_field_in_nested_model(
        self, sso_serializer: ModelSerializer, provider: ResponseUserOauth2Provider
    ) -> None:
        """The error path locates the field inside the enclosing payload."""
        provider.unset("sub")

        with pytest.raises(MissingRequiredFieldError) as exc:
            sso_serializer.to_wire_form(
                ResponseUserOauth2ProviderMany(data=[provider])
            )

        assert exc.value.path == "data[0].sub"

    def test_none_on_non_nullable_field(self, sso_serializer: ModelSerializer) -> None:
        """None is only written for nullable fields."""
        with pytest.raises(TypeMismatchError, match="not nullable") as exc:
            sso_serializer.to_wire_form(RequestUserUpdate(id="u1", email=None))

        assert exc.value.path == "email"

    def test_none_on_nullable_field(self, serializer: ModelSerializer) -> None:
        """A nullable field set to None is written as null."""
        login = AuditLogin(
            kind="login", createdAt=CREATED_AT, clientId="c1", userAgent=None
        )

        wire = serializer.to_wire_form(login)

        assert wire["user_agent"] is None

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("email", 42),
            ("enable", "yes"),
            ("enable", 1),
            ("access", {"enable": True}),
        ],
    )
    def test_type_mismatch(
        self, sso_serializer: ModelSerializer, field: str, value: object
    ) -> None:
        """Values that disagree with the declared type are rejected."""
        update = RequestUserUpdate(id="u1")
        setattr(update, field, value)

        with pytest.raises(TypeMismatchError) as exc:
            sso_serializer.to_wire_form(update)

        assert exc.value.path == field

    def test_instance_of_another_type(
        self, sso_serializer: ModelSerializer, provider: ResponseUserOauth2Provider
    ) -> None:
        """An instance cannot be serialized with another model's descriptor."""
        with pytest.raises(TypeMismatchError, match="Cannot serialize"):
            sso_serializer.to_wire_form(provider, "RequestUserUpdate")

    def test_not_a_model(self, sso_serializer: ModelSerializer) -> None:
        """Plain dicts are not model instances."""
        with pytest.raises(TypeMismatchError, match="Expected a model instance"):
            sso_serializer.to_wire_form({"id": "u1"}, "RequestUserUpdate")  # type: ignore[arg-type]

    def test_unknown_descriptor_name(
        self, sso_serializer: ModelSerializer, provider: ResponseUserOauth2Provider
    ) -> None:
        """Naming an unregistered type raises UnknownTypeError."""
        with pytest.raises(UnknownTypeError):
            sso_serializer.to_wire_form(provider, "NoSuchType")


@pytest.mark.unit
class TestFromWireForm:
    """Test deserialization of wire objects."""

    def test_wire_names_map_to_local_names(
        self,
        sso_serializer: ModelSerializer,
        provider: ResponseUserOauth2Provider,
        provider_wire: dict[str, Any],
    ) -> None:
        """Wire keys are assigned to their local attributes."""
        instance = sso_serializer.from_wire_form(
            provider_wire, "ResponseUserOauth2Provider"
        )

        assert isinstance(instance, ResponseUserOauth2Provider)
        assert instance == provider
        assert instance._static is False
        assert instance.createdAt == CREATED_AT

    def test_absent_optional_fields_stay_unset(
        self, sso_serializer: ModelSerializer
    ) -> None:
        """Absent optional keys leave the field unset, not defaulted."""
        instance = sso_serializer.from_wire_form({"id": "u1"}, "RequestUserUpdate")

        assert instance.fields_set() == ("id",)
        assert instance.email is UNSET

    def test_missing_required_key(
        self, sso_serializer: ModelSerializer, provider_wire: dict[str, Any]
    ) -> None:
        """Removing a required wire key raises MissingRequiredFieldError."""
        del provider_wire["user_id"]

        with pytest.raises(MissingRequiredFieldError) as exc:
            sso_serializer.from_wire_form(provider_wire, "ResponseUserOauth2Provider")

        assert exc.value.field == "userId"
        assert exc.value.wire_name == "user_id"

    def test_local_name_is_not_a_wire_key(
        self, sso_serializer: ModelSerializer, provider_wire: dict[str, Any]
    ) -> None:
        """A payload keyed by local names does not satisfy the mapping."""
        provider_wire["createdAt"] = provider_wire.pop("created_at")

        with pytest.raises(MissingRequiredFieldError, match="createdAt"):
            sso_serializer.from_wire_form(provider_wire, "ResponseUserOauth2Provider")

    def test_nested_error_path(self, sso_serializer: ModelSerializer) -> None:
        """Errors in nested values report the full wire path."""
        wire = {"id": "u1", "password": {"allow_reset": "yes"}}

        with pytest.raises(TypeMismatchError) as exc:
            sso_serializer.from_wire_form(wire, "RequestUserUpdate")

        assert exc.value.path == "password.allow_reset"
        assert exc.value.declared_type == "boolean"

    def test_not_an_object(self, sso_serializer: ModelSerializer) -> None:
        """Top-level payloads must be JSON objects."""
        with pytest.raises(TypeMismatchError, match="Expected an object") as exc:
            sso_serializer.from_wire_form(["u1"], "RequestUserUpdate")

        assert exc.value.path == "$"

    def test_null_on_non_nullable_field(self, sso_serializer: ModelSerializer) -> None:
        """null is rejected for non-nullable fields by default."""
        with pytest.raises(TypeMismatchError, match="not nullable"):
            sso_serializer.from_wire_form({"id": "u1", "email": None}, "RequestUserUpdate")

    def test_null_treated_as_absent(self) -> None:
        """With treat_null_as_absent, null on an optional field means unset."""
        lenient = ModelSerializer(
            default_registry, SerializationConfig(treat_null_as_absent=True)
        )

        instance = lenient.from_wire_form({"id": "u1", "email": None}, "RequestUserUpdate")

        assert instance.is_set("email") is False

    def test_null_on_required_field_is_never_absent(self) -> None:
        """treat_null_as_absent does not excuse a null required field."""
        lenient = ModelSerializer(
            default_registry, SerializationConfig(treat_null_as_absent=True)
        )

        with pytest.raises(TypeMismatchError, match="not nullable"):
            lenient.from_wire_form({"id": None}, "RequestUserUpdate")

    def test_null_on_nullable_field(self, serializer: ModelSerializer) -> None:
        """null on a nullable field is kept as None, distinct from unset."""
        wire = {
            "kind": "login",
            "created_at": CREATED_AT_WIRE,
            "client_id": "c1",
            "user_agent": None,
        }

        instance = serializer.from_wire_form(wire, "AuditLogin")

        assert instance.is_set("userAgent") is True
        assert instance.userAgent is None

    def test_unknown_keys_are_ignored(self, sso_serializer: ModelSerializer) -> None:
        """Keys without a mapping are ignored by default."""
        instance = sso_serializer.from_wire_form(
            {"id": "u1", "created_by": "admin"}, "RequestUserUpdate"
        )

        assert instance == RequestUserUpdate(id="u1")

    def test_unknown_keys_rejected_when_configured(self) -> None:
        """Strict mode rejects keys that have no mapping."""
        strict = ModelSerializer(
            default_registry, SerializationConfig(allow_unknown_fields=False)
        )

        with pytest.raises(TypeMismatchError, match="Unknown keys") as exc:
            strict.from_wire_form({"id": "u1", "created_by": "admin"}, "RequestUserUpdate")

        assert exc.value.context["unknown_keys"] == ["created_by"]

    def test_failure_produces_no_instance(
        self, sso_serializer: ModelSerializer, mocker: MockerFixture
    ) -> None:
        """No model class is looked up when a later field fails."""
        spy = mocker.spy(default_registry, "model_class")
        wire = {"id": "u1", "email": "a@b.com", "timezone": 7}

        with pytest.raises(TypeMismatchError):
            sso_serializer.from_wire_form(wire, "RequestUserUpdate")

        spy.assert_not_called()


@pytest.mark.unit
class TestValueRules:
    """Test the rules applied per declared type."""

    @pytest.mark.parametrize(
        ("declared", "value"),
        [
            ("string", "text"),
            ("boolean", True),
            ("number", 3),
            ("number", 2.5),
            ("any", {"free": ["form", 1, None]}),
            ("Array<string>", ["b", "a"]),
            ("{ [key: string]: number; }", {"a": 1, "b": 2.5}),
        ],
    )
    def test_pass_through(
        self, serializer: ModelSerializer, declared: str, value: object
    ) -> None:
        """Primitives and containers of primitives pass through unchanged."""
        assert serializer.serialize(value, declared) == value
        assert serializer.deserialize(value, declared) == value

    @pytest.mark.parametrize(
        ("declared", "value"),
        [
            ("string", 1),
            ("boolean", 0),
            ("number", True),
            ("number", "1"),
            ("Array<string>", "abc"),
            ("Array<string>", ["a", None]),
            ("Array<number>", [1, "2"]),
            ("{ [key: string]: number; }", [1, 2]),
            ("Date", "2024-05-01"),
            ("Date", 1714566600),
            ("AuditStatus", "unknown"),
            ("AuditLogin", "login"),
        ],
    )
    def test_deserialize_mismatch(
        self, serializer: ModelSerializer, declared: str, value: object
    ) -> None:
        """Wire values of the wrong shape raise TypeMismatchError."""
        with pytest.raises(TypeMismatchError):
            serializer.deserialize(value, declared)

    @pytest.mark.parametrize(
        ("declared", "value"),
        [
            ("number", float("nan")),
            ("number", float("inf")),
            ("Date", datetime(2024, 5, 1)),  # noqa: DTZ001 - naive on purpose
            ("Date", "2024-05-01T12:30:00Z"),
            ("AuditStatus", "ok"),
            ("{ [key: string]: number; }", {1: 1}),
            ("Array<string>", {"a"}),
        ],
    )
    def test_serialize_mismatch(
        self, serializer: ModelSerializer, declared: str, value: object
    ) -> None:
        """Values of the wrong runtime shape raise TypeMismatchError."""
        with pytest.raises(TypeMismatchError):
            serializer.serialize(value, declared)

    def test_date_format(self, serializer: ModelSerializer) -> None:
        """Dates are written in UTC with microseconds and a Z suffix."""
        local = CREATED_AT.astimezone(timezone(timedelta(hours=2)))

        assert serializer.serialize(local, "Date") == CREATED_AT_WIRE
        assert serializer.deserialize(CREATED_AT_WIRE, "Date") == CREATED_AT

    def test_date_parsing_normalizes_to_utc(self, serializer: ModelSerializer) -> None:
        """Offsets are accepted and normalized; extra precision is truncated."""
        parsed = serializer.deserialize("2024-05-01T14:30:00.123456789+02:00", "Date")

        assert parsed == CREATED_AT
        assert parsed.tzinfo == UTC

    def test_enum(self, serializer: ModelSerializer) -> None:
        """Enum members map to their wire values and back."""
        assert serializer.serialize(AuditStatus.FAILED, "AuditStatus") == "failed"
        assert serializer.deserialize("ok", "AuditStatus") is AuditStatus.OK

    def test_enum_error_lists_allowed_values(self, serializer: ModelSerializer) -> None:
        """Unknown enum values report the allowed ones."""
        with pytest.raises(TypeMismatchError) as exc:
            serializer.deserialize("maybe", "AuditStatus")

        assert exc.value.context["allowed"] == ["ok", "failed"]

    def test_map_of_any(self, serializer: ModelSerializer) -> None:
        """Free-form maps keep their values untouched."""
        reset = AuditPasswordReset(
            kind="password_reset",
            createdAt=CREATED_AT,
            userId="u1",
            data={"ip": "10.0.0.1", "attempts": 3},
        )

        wire = serializer.to_wire_form(reset)

        assert wire["data"] == {"ip": "10.0.0.1", "attempts": 3}
        assert serializer.from_wire_form(wire, "AuditPasswordReset") == reset

    @pytest.mark.parametrize(
        ("data", "path"),
        [
            ({"x": {1, 2}}, "data.x"),
            ({"x": RequestUserUpdate(id="u1")}, "data.x"),
            ({"x": [1, {"when": CREATED_AT}]}, "data.x[1].when"),
            ({"x": {"ratio": float("nan")}}, "data.x.ratio"),
            ({"x": {1: "a"}}, "data.x"),
        ],
    )
    def test_map_of_any_rejects_non_json_values(
        self, serializer: ModelSerializer, data: dict[str, Any], path: str
    ) -> None:
        """Free-form values must be plain JSON all the way down."""
        reset = AuditPasswordReset(
            kind="password_reset", createdAt=CREATED_AT, userId="u1", data=data
        )

        with pytest.raises(TypeMismatchError) as exc:
            serializer.to_wire_form(reset)

        assert exc.value.path == path
        assert exc.value.context["declared_type"] == "any"

    def test_any_copies_containers(self, serializer: ModelSerializer) -> None:
        """Tuples become lists and the input is not shared with the output."""
        value = {"tags": ("a", "b"), "nested": {"n": None}}

        wire = serializer.serialize(value, "any")

        assert wire == {"tags": ["a", "b"], "nested": {"n": None}}
        assert wire is not value

    def test_map_error_path(self, serializer: ModelSerializer) -> None:
        """Map members are located by key in error paths."""
        wire = {"data": [], "counts": {"ok": 1, "failed": "two"}}

        with pytest.raises(TypeMismatchError) as exc:
            serializer.from_wire_form(wire, AuditList.descriptor)

        assert exc.value.path == "counts.failed"

    def test_unknown_named_type(self, serializer: ModelSerializer) -> None:
        """A named type missing from the registry raises UnknownTypeError."""
        with pytest.raises(UnknownTypeError):
            serializer.deserialize({}, "RequestUserUpdate")
