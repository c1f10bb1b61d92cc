"""Push platform credentials carried by a notification hub description.

Each credential is an opaque, ordered bag of named string properties. The
management service defines the property names per platform; the subclasses
below expose the well-known ones as attributes for convenience.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import ClassVar

from ..exceptions import InvalidArgumentError


class _CredentialProperty:
    """Descriptor mapping a Python attribute onto a named credential property."""

    def __init__(self, property_name: str) -> None:
        self.property_name = property_name

    def __get__(self, instance: PushCredential | None, owner: type) -> object:
        if instance is None:
            return self
        return instance.get_property(self.property_name)

    def __set__(self, instance: PushCredential, value: str | None) -> None:
        instance.set_property(self.property_name, value)


class PushCredential:
    """Base class for platform credentials.

    Attributes:
        wire_name: Element name the credential is exchanged under
        properties: Credential properties in insertion order
    """

    wire_name: ClassVar[str] = ""

    def __init__(self, properties: Mapping[str, str] | None = None, **known: str | None) -> None:
        self.properties: dict[str, str] = {}
        for name, value in (properties or {}).items():
            self.set_property(name, value)
        for attribute, value in known.items():
            descriptor = getattr(type(self), attribute, None)
            if not isinstance(descriptor, _CredentialProperty):
                raise InvalidArgumentError(
                    attribute, f"not a known property of {type(self).__name__}"
                )
            descriptor.__set__(self, value)

    def get_property(self, name: str) -> str | None:
        return self.properties.get(name)

    def set_property(self, name: str, value: str | None) -> None:
        """Set or clear a property. ``None`` removes it."""
        if not name or not name.strip():
            raise InvalidArgumentError("name", "credential property name must not be empty")
        if value is None:
            self.properties.pop(name, None)
            return
        if not isinstance(value, str):
            raise InvalidArgumentError(name, "credential property values must be strings")
        self.properties[name] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PushCredential):
            return NotImplemented
        return type(self) is type(other) and self.properties == other.properties

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        # Values are secrets; only property names are shown
        return f"{type(self).__name__}(properties={sorted(self.properties)!r})"


class ApnsCredential(PushCredential):
    """Apple Push Notification service credential (certificate or token based)."""

    wire_name = "ApnsCredential"

    APNS_PRODUCTION_ENDPOINT: ClassVar[str] = "gateway.push.apple.com"
    APNS_SANDBOX_ENDPOINT: ClassVar[str] = "gateway.sandbox.push.apple.com"

    apns_certificate = _CredentialProperty("ApnsCertificate")
    certificate_key = _CredentialProperty("CertificateKey")
    endpoint = _CredentialProperty("Endpoint")
    token = _CredentialProperty("Token")
    key_id = _CredentialProperty("KeyId")
    app_name = _CredentialProperty("AppName")
    app_id = _CredentialProperty("AppId")


class WnsCredential(PushCredential):
    """Windows Push Notification Services credential."""

    wire_name = "WnsCredential"

    package_sid = _CredentialProperty("PackageSid")
    secret_key = _CredentialProperty("SecretKey")
    windows_live_endpoint = _CredentialProperty("WindowsLiveEndpoint")


class FcmCredential(PushCredential):
    """Firebase Cloud Messaging legacy credential, exchanged under the GCM name."""

    wire_name = "GcmCredential"

    google_api_key = _CredentialProperty("GoogleApiKey")
    gcm_endpoint = _CredentialProperty("GcmEndpoint")


class MpnsCredential(PushCredential):
    """Microsoft Push Notification Service credential.

    A credential without a certificate enables unauthenticated MPNS.
    """

    wire_name = "MpnsCredential"

    mpns_certificate = _CredentialProperty("MpnsCertificate")
    certificate_key = _CredentialProperty("CertificateKey")


class AdmCredential(PushCredential):
    """Amazon Device Messaging credential."""

    wire_name = "AdmCredential"

    client_id = _CredentialProperty("ClientId")
    client_secret = _CredentialProperty("ClientSecret")
    auth_token_url = _CredentialProperty("AuthTokenUrl")
    send_url_template = _CredentialProperty("SendUrlTemplate")


class BaiduCredential(PushCredential):
    wire_name = "BaiduCredential"

    baidu_api_key = _CredentialProperty("BaiduApiKey")
    baidu_secret_key = _CredentialProperty("BaiduSecretKey")
    baidu_end_point = _CredentialProperty("BaiduEndPoint")


CREDENTIAL_TYPES: dict[str, type[PushCredential]] = {
    credential_type.wire_name: credential_type
    for credential_type in (
        ApnsCredential,
        WnsCredential,
        FcmCredential,
        MpnsCredential,
        AdmCredential,
        BaiduCredential,
    )
}
