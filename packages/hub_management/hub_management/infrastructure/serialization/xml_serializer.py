"""Schema-driven XML serializer for entity descriptions.

Documents follow the management service's data contract layout: a root
element in the entity namespace with one child per present field, in
ascending order key. Absent optional fields are omitted rather than sent
as empty or nil elements.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from ...config.config import SerializationConfig
from ...domain.constants import SCHEMA_INSTANCE_NAMESPACE
from ...domain.entities import (
    CREDENTIAL_TYPES,
    AuthorizationRules,
    EntityDescription,
    PushCredential,
    SharedAccessAuthorizationRule,
)
from ...domain.enums import AccessRights
from ...domain.exceptions import DomainError, SerializationError
from ..logging import get_logger
from .durations import format_duration, parse_duration
from .schema import NOTIFICATION_HUB_SCHEMA, EntitySchema, FieldKind, FieldSpec

logger = get_logger(__name__)

SHARED_ACCESS_RULE_TYPE = "SharedAccessAuthorizationRule"
SHARED_ACCESS_CLAIM_TYPE = "SharedAccessKey"


def _local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on parsed tags."""
    return tag.rsplit("}", 1)[-1]


def _namespace_of(tag: str) -> str:
    return tag[1:].split("}", 1)[0] if tag.startswith("{") else ""


def _child_text(element: ET.Element, name: str) -> str | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child.text or ""
    return None


class XmlEntitySerializer:
    """Convert entity descriptions to and from XML documents.

    Example:
        serializer = XmlEntitySerializer()
        document = serializer.serialize(description)
        restored = serializer.deserialize(document, read_only=True)
    """

    def __init__(
        self,
        schema: EntitySchema = NOTIFICATION_HUB_SCHEMA,
        config: SerializationConfig | None = None,
    ) -> None:
        """
        Initialize the serializer.

        Args:
            schema: Field layout of the entity type handled by this serializer
            config: Document settings; the schema namespace is used when omitted
        """
        self.schema = schema
        self.config = config or SerializationConfig(namespace=schema.namespace)

    def serialize(self, entity: EntityDescription) -> bytes:
        """Render ``entity`` as an XML document.

        Raises:
            SerializationError: If a required field is missing or a value cannot be encoded
        """
        if not isinstance(entity, self.schema.entity_type):
            raise SerializationError(
                "serialize",
                f"expected {self.schema.entity_type.__name__}, got {type(entity).__name__}",
            )

        root = ET.Element(
            self.schema.root_name,
            {"xmlns": self.config.namespace, "xmlns:i": SCHEMA_INSTANCE_NAMESPACE},
        )
        for spec in self.schema.fields:
            value = getattr(entity, spec.attribute)
            if self._is_default(spec, value):
                if spec.required:
                    raise SerializationError(
                        "serialize", "required field is missing", element=spec.wire_name
                    )
                if not spec.emit_default:
                    continue
            element = ET.SubElement(root, spec.wire_name)
            if value is not None:
                self._encode(spec, value, element)

        if self.config.pretty_print:
            ET.indent(root, space=" " * self.config.indent)
        return ET.tostring(
            root,
            encoding=self.config.encoding,
            xml_declaration=self.config.xml_declaration,
        )

    def deserialize(
        self, document: bytes | str, *, read_only: bool = False
    ) -> EntityDescription:
        """Build an entity from an XML document.

        Args:
            document: XML text or bytes
            read_only: Freeze the resulting entity, as after a creation round-trip

        Raises:
            SerializationError: If the document is malformed or a value is invalid
        """
        try:
            root = ET.fromstring(document)
        except ET.ParseError as e:
            raise SerializationError("deserialize", f"malformed XML: {e}") from e

        if _local_name(root.tag) != self.schema.root_name:
            raise SerializationError(
                "deserialize",
                f"expected root element '{self.schema.root_name}'",
                element=_local_name(root.tag),
            )
        if _namespace_of(root.tag) != self.config.namespace:
            raise SerializationError(
                "deserialize",
                f"unexpected namespace '{_namespace_of(root.tag)}'",
                element=self.schema.root_name,
            )

        decoded: dict[str, tuple[FieldSpec, Any]] = {}
        for child in root:
            wire_name = _local_name(child.tag)
            spec = self.schema.by_wire_name(wire_name)
            if spec is None:
                logger.debug(
                    "Skipping unknown element",
                    extra={"element": wire_name, "entity": self.schema.root_name},
                )
                continue
            if self._is_nil(child):
                continue
            try:
                decoded[spec.attribute] = (spec, self._decode(spec, child))
            except (ValueError, DomainError) as e:
                raise SerializationError("deserialize", str(e), element=wire_name) from e

        for spec in self.schema.required_fields:
            if spec.attribute not in decoded:
                raise SerializationError(
                    "deserialize", "required element is missing", element=spec.wire_name
                )

        required = {
            spec.attribute: decoded.pop(spec.attribute)[1] for spec in self.schema.required_fields
        }
        try:
            entity = self.schema.entity_type(**required)
        except DomainError as e:
            raise SerializationError(
                "deserialize",
                e.message,
                element=", ".join(spec.wire_name for spec in self.schema.required_fields),
            ) from e

        server_state: dict[str, Any] = {}
        for attribute, (spec, value) in decoded.items():
            if spec.server_managed:
                server_state[attribute] = value
                continue
            try:
                setattr(entity, spec.target, value)
            except DomainError as e:
                raise SerializationError("deserialize", e.message, element=spec.wire_name) from e
        try:
            entity._apply_server_state(server_state)
        except DomainError as e:
            raise SerializationError("deserialize", e.message) from e

        if read_only:
            entity.mark_read_only()
        return entity

    @staticmethod
    def _is_default(spec: FieldSpec, value: Any) -> bool:
        if value is None:
            return True
        return spec.kind is FieldKind.INTEGER and value == 0

    @staticmethod
    def _is_nil(element: ET.Element) -> bool:
        return element.get(f"{{{SCHEMA_INSTANCE_NAMESPACE}}}nil") == "true"

    def _encode(self, spec: FieldSpec, value: Any, element: ET.Element) -> None:
        try:
            if spec.kind is FieldKind.STRING:
                element.text = str(value)
            elif spec.kind is FieldKind.BOOLEAN:
                element.text = "true" if value else "false"
            elif spec.kind is FieldKind.INTEGER:
                element.text = str(int(value))
            elif spec.kind is FieldKind.DURATION:
                element.text = format_duration(value)
            elif spec.kind is FieldKind.CREDENTIAL:
                self._encode_credential(value, element)
            elif spec.kind is FieldKind.AUTHORIZATION_RULES:
                self._encode_authorization_rules(value, element)
        except (TypeError, ValueError) as e:
            raise SerializationError("serialize", str(e), element=spec.wire_name) from e

    def _decode(self, spec: FieldSpec, element: ET.Element) -> Any:
        text = (element.text or "").strip()
        if spec.kind is FieldKind.STRING:
            return element.text or ""
        if spec.kind is FieldKind.BOOLEAN:
            if text in ("true", "1"):
                return True
            if text in ("false", "0"):
                return False
            raise ValueError(f"Invalid boolean: {text!r}")
        if spec.kind is FieldKind.INTEGER:
            return int(text)
        if spec.kind is FieldKind.DURATION:
            return parse_duration(text)
        if spec.kind is FieldKind.CREDENTIAL:
            return self._decode_credential(spec.wire_name, element)
        return self._decode_authorization_rules(element)

    @staticmethod
    def _encode_credential(credential: PushCredential, element: ET.Element) -> None:
        properties = ET.SubElement(element, "Properties")
        for name, value in credential.properties.items():
            prop = ET.SubElement(properties, "Property")
            ET.SubElement(prop, "Name").text = name
            ET.SubElement(prop, "Value").text = value

    @staticmethod
    def _decode_credential(wire_name: str, element: ET.Element) -> PushCredential:
        credential_type = CREDENTIAL_TYPES[wire_name]
        properties: dict[str, str] = {}
        for container in element:
            if _local_name(container.tag) != "Properties":
                continue
            for prop in container:
                name = _child_text(prop, "Name")
                if not name:
                    raise ValueError("Credential property without a name")
                properties[name] = _child_text(prop, "Value") or ""
        return credential_type(properties)

    @staticmethod
    def _encode_authorization_rules(rules: AuthorizationRules, element: ET.Element) -> None:
        for rule in rules:
            rule_element = ET.SubElement(
                element, "AuthorizationRule", {"i:type": SHARED_ACCESS_RULE_TYPE}
            )
            ET.SubElement(rule_element, "ClaimType").text = SHARED_ACCESS_CLAIM_TYPE
            ET.SubElement(rule_element, "ClaimValue").text = "None"
            rights_element = ET.SubElement(rule_element, "Rights")
            # Stable wire order regardless of set iteration order
            for right in AccessRights:
                if right in rule.rights:
                    ET.SubElement(rights_element, "AccessRights").text = right.value
            ET.SubElement(rule_element, "KeyName").text = rule.key_name
            ET.SubElement(rule_element, "PrimaryKey").text = rule.primary_key
            ET.SubElement(rule_element, "SecondaryKey").text = rule.secondary_key

    @staticmethod
    def _decode_authorization_rules(element: ET.Element) -> AuthorizationRules:
        rules = AuthorizationRules()
        for rule_element in element:
            if _local_name(rule_element.tag) != "AuthorizationRule":
                continue
            rule_type = rule_element.get(f"{{{SCHEMA_INSTANCE_NAMESPACE}}}type")
            if rule_type is not None and _local_name(rule_type.split(":")[-1]) != (
                SHARED_ACCESS_RULE_TYPE
            ):
                logger.warning(
                    "Skipping unsupported authorization rule type",
                    extra={"rule_type": rule_type},
                )
                continue

            rights: list[AccessRights] = []
            for container in rule_element:
                if _local_name(container.tag) == "Rights":
                    rights.extend(AccessRights((right.text or "").strip()) for right in container)

            key_name = _child_text(rule_element, "KeyName")
            if key_name is None:
                raise ValueError("Authorization rule without a KeyName")
            rules.add(
                SharedAccessAuthorizationRule(
                    key_name,
                    primary_key=_child_text(rule_element, "PrimaryKey"),
                    rights=rights,
                    secondary_key=_child_text(rule_element, "SecondaryKey"),
                )
            )
        return rules

