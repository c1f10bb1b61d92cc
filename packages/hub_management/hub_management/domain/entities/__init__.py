"""Domain entities for notification hub management."""

from __future__ import annotations

from .authorization import AuthorizationRules, SharedAccessAuthorizationRule
from .credentials import (
    CREDENTIAL_TYPES,
    AdmCredential,
    ApnsCredential,
    BaiduCredential,
    FcmCredential,
    MpnsCredential,
    PushCredential,
    WnsCredential,
)
from .entity_description import EntityDescription
from .hub_description import NotificationHubDescription

__all__ = [
    "CREDENTIAL_TYPES",
    "AdmCredential",
    "ApnsCredential",
    "AuthorizationRules",
    "BaiduCredential",
    "EntityDescription",
    "FcmCredential",
    "MpnsCredential",
    "NotificationHubDescription",
    "PushCredential",
    "SharedAccessAuthorizationRule",
    "WnsCredential",
]
