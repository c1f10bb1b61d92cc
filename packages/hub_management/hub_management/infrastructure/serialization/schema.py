"""Schema descriptors driving entity serialization.

A schema lists, for each persisted attribute, the wire element name, its
position in the document and how its value is encoded. The serializer walks
the schema instead of relying on per-attribute annotations on the entity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ...domain.constants import MANAGEMENT_NAMESPACE
from ...domain.entities import EntityDescription, NotificationHubDescription


class FieldKind(Enum):
    """Value encodings understood by the serializer."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    DURATION = "duration"
    CREDENTIAL = "credential"
    AUTHORIZATION_RULES = "authorization_rules"


@dataclass(frozen=True)
class FieldSpec:
    """Serialization metadata for a single entity attribute.

    Attributes:
        attribute: Entity attribute read on serialize
        wire_name: Element name in the document
        order: Position key; elements are emitted in ascending order
        kind: Value encoding
        required: Whether the element must be present
        emit_default: Emit the element even when it holds a default (None or 0)
        server_managed: Populated by the service; restored through the entity's
            server state hook instead of a public setter
        assign_to: Public attribute written on deserialize so the entity's own
            validation applies; defaults to ``attribute``
    """

    attribute: str
    wire_name: str
    order: int
    kind: FieldKind
    required: bool = False
    emit_default: bool = False
    server_managed: bool = False
    assign_to: str | None = None

    def __post_init__(self) -> None:
        if not self.attribute:
            raise ValueError("Field attribute cannot be empty")
        if not self.wire_name:
            raise ValueError("Field wire name cannot be empty")

    @property
    def target(self) -> str:
        return self.assign_to or self.attribute


@dataclass(frozen=True)
class EntitySchema:
    """Ordered set of field specs for one entity type."""

    root_name: str
    namespace: str
    entity_type: type[EntityDescription]
    fields: tuple[FieldSpec, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        orders: dict[int, str] = {}
        wire_names: set[str] = set()
        for spec in self.fields:
            if spec.order in orders:
                raise ValueError(
                    f"Order key {spec.order} is used by both '{orders[spec.order]}' "
                    f"and '{spec.wire_name}'"
                )
            if spec.wire_name in wire_names:
                raise ValueError(f"Duplicate wire name '{spec.wire_name}'")
            orders[spec.order] = spec.wire_name
            wire_names.add(spec.wire_name)
        object.__setattr__(
            self, "fields", tuple(sorted(self.fields, key=lambda spec: spec.order))
        )

    def by_wire_name(self, wire_name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.wire_name == wire_name:
                return spec
        return None

    @property
    def required_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.required)


NOTIFICATION_HUB_SCHEMA = EntitySchema(
    root_name="NotificationHubDescription",
    namespace=MANAGEMENT_NAMESPACE,
    entity_type=NotificationHubDescription,
    fields=(
        FieldSpec("path", "Path", 1000, FieldKind.STRING, required=True),
        FieldSpec("apns_credential", "ApnsCredential", 1001, FieldKind.CREDENTIAL),
        FieldSpec(
            "internal_registration_ttl",
            "RegistrationTtl",
            1002,
            FieldKind.DURATION,
            assign_to="registration_ttl",
        ),
        FieldSpec("wns_credential", "WnsCredential", 1003, FieldKind.CREDENTIAL),
        FieldSpec(
            "internal_authorization", "AuthorizationRules", 1004, FieldKind.AUTHORIZATION_RULES
        ),
        FieldSpec("fcm_credential", "GcmCredential", 1005, FieldKind.CREDENTIAL),
        FieldSpec("mpns_credential", "MpnsCredential", 1006, FieldKind.CREDENTIAL),
        FieldSpec(
            "daily_operations", "DailyOperations", 1007, FieldKind.INTEGER, server_managed=True
        ),
        FieldSpec(
            "daily_max_active_devices",
            "DailyMaxActiveDevices",
            1008,
            FieldKind.INTEGER,
            server_managed=True,
        ),
        FieldSpec(
            "daily_max_active_registrations",
            "DailyMaxActiveRegistrations",
            1009,
            FieldKind.INTEGER,
            server_managed=True,
        ),
        FieldSpec(
            "internal_user_metadata",
            "UserMetadata",
            1010,
            FieldKind.STRING,
            assign_to="user_metadata",
        ),
        FieldSpec("adm_credential", "AdmCredential", 1014, FieldKind.CREDENTIAL),
        FieldSpec("baidu_credential", "BaiduCredential", 1016, FieldKind.CREDENTIAL),
        FieldSpec(
            "internal_status", "Status", 1017, FieldKind.BOOLEAN, assign_to="is_disabled"
        ),
    ),
)
