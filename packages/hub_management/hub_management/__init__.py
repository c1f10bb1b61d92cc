"""Notification hub management: hub descriptions and their wire format."""

from __future__ import annotations

from .domain.entities import (
    AdmCredential,
    ApnsCredential,
    AuthorizationRules,
    BaiduCredential,
    FcmCredential,
    MpnsCredential,
    NotificationHubDescription,
    SharedAccessAuthorizationRule,
    WnsCredential,
)
from .domain.enums import AccessRights
from .domain.exceptions import (
    InvalidArgumentError,
    NotificationHubsError,
    OutOfRangeError,
    ReadOnlyViolationError,
    SerializationError,
)
from .infrastructure.serialization import XmlEntitySerializer

__version__ = "0.1.0"

__all__ = [
    "AccessRights",
    "AdmCredential",
    "ApnsCredential",
    "AuthorizationRules",
    "BaiduCredential",
    "FcmCredential",
    "InvalidArgumentError",
    "MpnsCredential",
    "NotificationHubDescription",
    "NotificationHubsError",
    "OutOfRangeError",
    "ReadOnlyViolationError",
    "SerializationError",
    "SharedAccessAuthorizationRule",
    "WnsCredential",
    "XmlEntitySerializer",
]
