"""Unit tests for the XML entity serializer."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import timedelta

import pytest
from hub_management.config.config import SerializationConfig
from hub_management.domain.constants import MANAGEMENT_NAMESPACE
from hub_management.domain.entities import (
    ApnsCredential,
    BaiduCredential,
    FcmCredential,
    NotificationHubDescription,
)
from hub_management.domain.exceptions import ReadOnlyViolationError, SerializationError
from hub_management.infrastructure.serialization import XmlEntitySerializer

NS = f"{{{MANAGEMENT_NAMESPACE}}}"


def _children(document: bytes) -> list[str]:
    root = ET.fromstring(document)
    return [child.tag.removeprefix(NS) for child in root]


def _document(body: str, namespace: str = MANAGEMENT_NAMESPACE) -> str:
    return (
        f'<NotificationHubDescription xmlns="{namespace}" '
        f'xmlns:i="http://www.w3.org/2001/XMLSchema-instance">'
        f"{body}</NotificationHubDescription>"
    )


@pytest.fixture
def serializer() -> XmlEntitySerializer:
    return XmlEntitySerializer()


@pytest.fixture
def populated() -> NotificationHubDescription:
    description = NotificationHubDescription("tenants/contoso")
    description.apns_credential = ApnsCredential(
        token="token", key_id="KEY", app_id="TEAM", app_name="com.contoso"
    )
    description.baidu_credential = BaiduCredential(baidu_api_key="api", baidu_secret_key="secret")
    description.registration_ttl = timedelta(days=30)
    description.user_metadata = "tenant=contoso"
    description.is_disabled = True
    description.set_access_passwords("full", "p1", "listen", "p2")
    return description


class TestSerialize:
    """Test rendering descriptions."""

    def test_minimal_document_omits_absent_fields(self, serializer: XmlEntitySerializer) -> None:
        """Test that a fresh description only carries its path."""
        document = serializer.serialize(NotificationHubDescription("hub"))

        root = ET.fromstring(document)
        assert root.tag == f"{NS}NotificationHubDescription"
        assert _children(document) == ["Path"]
        assert root.find(f"{NS}Path").text == "hub"  # type: ignore[union-attr]

    def test_xml_declaration(self, serializer: XmlEntitySerializer) -> None:
        """Test that documents start with an XML declaration by default."""
        document = serializer.serialize(NotificationHubDescription("hub"))

        assert document.startswith(b"<?xml")

    def test_serializing_does_not_materialize_defaults(
        self, serializer: XmlEntitySerializer
    ) -> None:
        """Test that serializing never triggers the lazy accessors."""
        description = NotificationHubDescription("hub")

        serializer.serialize(description)

        assert description.internal_registration_ttl is None
        assert description.internal_authorization is None

    def test_read_default_ttl_is_emitted(self, serializer: XmlEntitySerializer) -> None:
        """Test that a TTL materialized by a read is persisted."""
        description = NotificationHubDescription("hub")
        _ = description.registration_ttl

        root = ET.fromstring(serializer.serialize(description))

        assert root.find(f"{NS}RegistrationTtl").text == "P90D"  # type: ignore[union-attr]

    def test_fields_in_order(
        self, serializer: XmlEntitySerializer, populated: NotificationHubDescription
    ) -> None:
        """Test that present fields are emitted in ascending order key."""
        populated._apply_server_state({"daily_operations": 12})

        assert _children(serializer.serialize(populated)) == [
            "Path",
            "ApnsCredential",
            "RegistrationTtl",
            "AuthorizationRules",
            "DailyOperations",
            "UserMetadata",
            "BaiduCredential",
            "Status",
        ]

    def test_explicit_enabled_status_is_emitted(self, serializer: XmlEntitySerializer) -> None:
        """Test that an explicit False status is persisted while an unset one is not."""
        description = NotificationHubDescription("hub")
        description.is_disabled = False

        root = ET.fromstring(serializer.serialize(description))

        assert root.find(f"{NS}Status").text == "false"  # type: ignore[union-attr]

    def test_credential_properties(
        self, serializer: XmlEntitySerializer, populated: NotificationHubDescription
    ) -> None:
        """Test the credential property layout."""
        root = ET.fromstring(serializer.serialize(populated))

        properties = root.findall(f"{NS}ApnsCredential/{NS}Properties/{NS}Property")
        pairs = {
            prop.find(f"{NS}Name").text: prop.find(f"{NS}Value").text  # type: ignore[union-attr]
            for prop in properties
        }
        assert pairs == {
            "Token": "token",
            "KeyId": "KEY",
            "AppId": "TEAM",
            "AppName": "com.contoso",
        }

    def test_authorization_rule_layout(
        self, serializer: XmlEntitySerializer, populated: NotificationHubDescription
    ) -> None:
        """Test the authorization rule layout."""
        root = ET.fromstring(serializer.serialize(populated))

        rules = root.findall(f"{NS}AuthorizationRules/{NS}AuthorizationRule")
        assert len(rules) == 2
        full = rules[0]
        assert (
            full.get("{http://www.w3.org/2001/XMLSchema-instance}type")
            == "SharedAccessAuthorizationRule"
        )
        assert full.find(f"{NS}KeyName").text == "full"  # type: ignore[union-attr]
        assert full.find(f"{NS}PrimaryKey").text == "p1"  # type: ignore[union-attr]
        assert [right.text for right in full.findall(f"{NS}Rights/{NS}AccessRights")] == [
            "Listen",
            "Send",
            "Manage",
        ]

    def test_pretty_print(self) -> None:
        """Test indented output."""
        serializer = XmlEntitySerializer(
            config=SerializationConfig(pretty_print=True, xml_declaration=False)
        )

        document = serializer.serialize(NotificationHubDescription("hub")).decode("utf-8")

        assert document.startswith("<NotificationHubDescription")
        assert "\n  <Path>hub</Path>\n" in document

    def test_wrong_entity_type_rejected(self, serializer: XmlEntitySerializer) -> None:
        """Test that the serializer only accepts its schema's entity type."""
        with pytest.raises(SerializationError):
            serializer.serialize(object())  # type: ignore[arg-type]


class TestDeserialize:
    """Test building descriptions from documents."""

    def test_round_trip(
        self, serializer: XmlEntitySerializer, populated: NotificationHubDescription
    ) -> None:
        """Test that a populated description survives a round trip."""
        populated._apply_server_state(
            {
                "daily_operations": 1500,
                "daily_max_active_devices": 40,
                "daily_max_active_registrations": 55,
            }
        )

        restored = serializer.deserialize(serializer.serialize(populated))

        assert isinstance(restored, NotificationHubDescription)
        assert restored.path == "tenants/contoso"
        assert restored.apns_credential == populated.apns_credential
        assert restored.baidu_credential == populated.baidu_credential
        assert restored.fcm_credential is None
        assert restored.registration_ttl == timedelta(days=30)
        assert restored.user_metadata == "tenant=contoso"
        assert restored.is_disabled is True
        assert restored.daily_operations == 1500
        assert restored.daily_max_active_devices == 40
        assert restored.daily_max_active_registrations == 55
        assert restored.authorization.key_names() == ["full", "listen"]
        full = restored.authorization.try_get_shared_access_rule("full")
        assert full is not None
        assert full == populated.authorization.try_get_shared_access_rule("full")
        assert restored.is_read_only is False

    def test_read_only_result(self, serializer: XmlEntitySerializer) -> None:
        """Test that a description can be frozen on arrival."""
        restored = serializer.deserialize(_document("<Path>hub</Path>"), read_only=True)

        assert restored.is_read_only is True
        with pytest.raises(ReadOnlyViolationError):
            restored.path = "other"  # type: ignore[attr-defined]

    def test_absent_fields_stay_absent(self, serializer: XmlEntitySerializer) -> None:
        """Test that omitted elements leave backing fields empty."""
        restored = serializer.deserialize(_document("<Path>hub</Path>"))

        assert isinstance(restored, NotificationHubDescription)
        assert restored.internal_status is None
        assert restored.internal_registration_ttl is None
        assert restored.internal_authorization is None
        assert restored.user_metadata is None

    def test_nil_elements_treated_as_absent(self, serializer: XmlEntitySerializer) -> None:
        """Test that xsi:nil elements are skipped."""
        restored = serializer.deserialize(
            _document('<Path>hub</Path><UserMetadata i:nil="true"/>')
        )

        assert isinstance(restored, NotificationHubDescription)
        assert restored.user_metadata is None

    def test_fcm_read_from_gcm_element(self, serializer: XmlEntitySerializer) -> None:
        """Test that the FCM credential is read from the GcmCredential element."""
        restored = serializer.deserialize(
            _document(
                "<Path>hub</Path><GcmCredential><Properties><Property>"
                "<Name>GoogleApiKey</Name><Value>key</Value>"
                "</Property></Properties></GcmCredential>"
            )
        )

        assert isinstance(restored, NotificationHubDescription)
        assert restored.fcm_credential == FcmCredential(google_api_key="key")

    def test_unknown_elements_skipped(
        self, serializer: XmlEntitySerializer, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that elements outside the schema are ignored."""
        with caplog.at_level(logging.DEBUG):
            restored = serializer.deserialize(
                _document("<Path>hub</Path><PartitionCount>4</PartitionCount>")
            )

        assert isinstance(restored, NotificationHubDescription)
        assert restored.path == "hub"
        assert "Skipping unknown element" in caplog.text

    def test_unsupported_rule_type_skipped(self, serializer: XmlEntitySerializer) -> None:
        """Test that rules of other types are skipped."""
        restored = serializer.deserialize(
            _document(
                "<Path>hub</Path><AuthorizationRules>"
                '<AuthorizationRule i:type="AllowRule"><KeyName>x</KeyName></AuthorizationRule>'
                "</AuthorizationRules>"
            )
        )

        assert isinstance(restored, NotificationHubDescription)
        assert len(restored.authorization) == 0

    @pytest.mark.parametrize(
        ("body", "element"),
        [
            ("<Path>hub</Path><RegistrationTtl>P1Y</RegistrationTtl>", "RegistrationTtl"),
            ("<Path>hub</Path><Status>maybe</Status>", "Status"),
            ("<Path>hub</Path><DailyOperations>many</DailyOperations>", "DailyOperations"),
            (
                "<Path>hub</Path><AuthorizationRules><AuthorizationRule>"
                "<Rights><AccessRights>Everything</AccessRights></Rights>"
                "<KeyName>x</KeyName></AuthorizationRule></AuthorizationRules>",
                "AuthorizationRules",
            ),
        ],
    )
    def test_invalid_values_rejected(
        self, serializer: XmlEntitySerializer, body: str, element: str
    ) -> None:
        """Test that unparsable values raise SerializationError naming the element."""
        with pytest.raises(SerializationError) as exc_info:
            serializer.deserialize(_document(body))

        assert exc_info.value.details["element"] == element

    @pytest.mark.parametrize(
        ("body", "element"),
        [
            ("<Path>hub</Path><RegistrationTtl>PT1H</RegistrationTtl>", "RegistrationTtl"),
            (f"<Path>hub</Path><UserMetadata>{'m' * 1025}</UserMetadata>", "UserMetadata"),
        ],
    )
    def test_entity_constraints_enforced(
        self, serializer: XmlEntitySerializer, body: str, element: str
    ) -> None:
        """Test that well-formed values outside the entity's limits are refused."""
        with pytest.raises(SerializationError) as exc_info:
            serializer.deserialize(_document(body))

        assert exc_info.value.details["element"] == element

    def test_minimum_ttl_accepted(self, serializer: XmlEntitySerializer) -> None:
        """Test that a TTL of exactly one day is accepted."""
        restored = serializer.deserialize(
            _document("<Path>hub</Path><RegistrationTtl>P1D</RegistrationTtl>")
        )

        assert isinstance(restored, NotificationHubDescription)
        assert restored.registration_ttl == timedelta(days=1)

    def test_blank_metadata_cleared(self, serializer: XmlEntitySerializer) -> None:
        """Test that whitespace-only metadata is normalized to None."""
        restored = serializer.deserialize(
            _document("<Path>hub</Path><UserMetadata>   </UserMetadata>")
        )

        assert isinstance(restored, NotificationHubDescription)
        assert restored.user_metadata is None
        assert restored.internal_user_metadata is None

    def test_missing_path_rejected(self, serializer: XmlEntitySerializer) -> None:
        """Test that the required path element must be present."""
        with pytest.raises(SerializationError, match="required element is missing"):
            serializer.deserialize(_document("<UserMetadata>x</UserMetadata>"))

    def test_blank_path_rejected(self, serializer: XmlEntitySerializer) -> None:
        """Test that entity validation failures surface as SerializationError."""
        with pytest.raises(SerializationError):
            serializer.deserialize(_document("<Path>  </Path>"))

    def test_negative_counter_rejected(self, serializer: XmlEntitySerializer) -> None:
        """Test that negative counters from the wire are refused."""
        with pytest.raises(SerializationError):
            serializer.deserialize(
                _document("<Path>hub</Path><DailyOperations>-1</DailyOperations>")
            )

    def test_malformed_xml_rejected(self, serializer: XmlEntitySerializer) -> None:
        """Test that malformed documents are refused."""
        with pytest.raises(SerializationError, match="malformed XML"):
            serializer.deserialize("<NotificationHubDescription>")

    def test_wrong_root_rejected(self, serializer: XmlEntitySerializer) -> None:
        """Test that other entity documents are refused."""
        with pytest.raises(SerializationError):
            serializer.deserialize(f'<QueueDescription xmlns="{MANAGEMENT_NAMESPACE}"/>')

    def test_wrong_namespace_rejected(self, serializer: XmlEntitySerializer) -> None:
        """Test that documents in another namespace are refused."""
        with pytest.raises(SerializationError, match="unexpected namespace"):
            serializer.deserialize(_document("<Path>hub</Path>", namespace="urn:other"))
