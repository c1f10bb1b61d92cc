"""Build hub descriptions from plain mappings such as parsed JSON files."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..domain.constants import DEFAULT_REGISTRATION_TTL
from ..domain.entities import (
    AdmCredential,
    ApnsCredential,
    BaiduCredential,
    FcmCredential,
    MpnsCredential,
    NotificationHubDescription,
    PushCredential,
    SharedAccessAuthorizationRule,
    WnsCredential,
)
from ..domain.enums import AccessRights
from ..domain.exceptions import ValidationError
from ..infrastructure.logging import get_logger
from ..infrastructure.serialization.durations import format_duration
from .models import HubDescriptionInput

logger = get_logger(__name__)

# Platform key -> (description attribute, credential type)
CREDENTIAL_KEYS: dict[str, tuple[str, type[PushCredential]]] = {
    "apns": ("apns_credential", ApnsCredential),
    "wns": ("wns_credential", WnsCredential),
    "fcm": ("fcm_credential", FcmCredential),
    "mpns": ("mpns_credential", MpnsCredential),
    "adm": ("adm_credential", AdmCredential),
    "baidu": ("baidu_credential", BaiduCredential),
}


def _to_validation_error(error: PydanticValidationError) -> ValidationError:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    if location:
        message = f"Invalid hub description at '{location}': {first['msg']}"
    else:
        message = f"Invalid hub description: {first['msg']}"
    return ValidationError(
        message, field=location or None, details={"error_count": error.error_count()}
    )


def description_from_mapping(data: Any) -> NotificationHubDescription:
    """Build a NotificationHubDescription from a plain mapping.

    The mapping is validated against HubDescriptionInput first; entity rules
    (lengths, TTL minimum, rights combinations) are then enforced by the
    description itself.

    Args:
        data: Parsed description file contents

    Returns:
        A mutable description

    Raises:
        ValidationError: If the mapping is malformed or a value violates an entity rule
        DuplicateAuthorizationRuleError: If two rules share a key name
    """
    try:
        hub = HubDescriptionInput.model_validate(data)
    except PydanticValidationError as e:
        raise _to_validation_error(e) from e

    description = NotificationHubDescription(hub.path)
    if hub.registration_ttl is not None:
        description.registration_ttl = hub.registration_ttl
    if "user_metadata" in hub.model_fields_set:
        description.user_metadata = hub.user_metadata
    if hub.is_disabled is not None:
        description.is_disabled = hub.is_disabled

    for platform, properties in hub.credentials.items():
        attribute, credential_type = CREDENTIAL_KEYS[platform]
        setattr(description, attribute, credential_type(properties))

    for rule in hub.authorization_rules:
        description.authorization.add(
            SharedAccessAuthorizationRule(
                rule.key_name,
                primary_key=rule.primary_key,
                rights=rule.rights,
                secondary_key=rule.secondary_key,
            )
        )

    logger.debug(
        "Built hub description",
        extra={
            "hub_path": description.path,
            "credential_count": len(hub.credentials),
            "rule_count": len(hub.authorization_rules),
        },
    )
    return description


def description_to_summary(description: NotificationHubDescription) -> dict[str, Any]:
    """Summarize a description as JSON-safe data.

    Keys and credential property values are never included.
    """
    rules = description.internal_authorization or ()
    return {
        "path": description.path,
        "is_disabled": description.is_disabled,
        "is_read_only": description.is_read_only,
        "registration_ttl": format_duration(
            description.internal_registration_ttl or DEFAULT_REGISTRATION_TTL
        ),
        "user_metadata": description.user_metadata,
        "credentials": {
            key: sorted(credential.properties)
            for key, (attribute, _) in CREDENTIAL_KEYS.items()
            if (credential := getattr(description, attribute)) is not None
        },
        "authorization_rules": [
            {
                "key_name": rule.key_name,
                "rights": [right.value for right in AccessRights if right in rule.rights],
            }
            for rule in rules
        ],
        "usage": {
            "daily_operations": description.daily_operations,
            "daily_max_active_devices": description.daily_max_active_devices,
            "daily_max_active_registrations": description.daily_max_active_registrations,
        },
    }
