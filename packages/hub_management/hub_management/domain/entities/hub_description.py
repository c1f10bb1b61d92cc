"""Notification hub description entity."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any

from ...infrastructure.logging import get_logger
from ..constants import (
    DEFAULT_REGISTRATION_TTL,
    MAXIMUM_USER_METADATA_LENGTH,
    MINIMUM_REGISTRATION_TTL,
    NOTIFICATION_HUB_NAME_MAXIMUM_LENGTH,
)
from ..enums import AccessRights
from ..exceptions import InvalidArgumentError, OutOfRangeError
from .authorization import AuthorizationRules, SharedAccessAuthorizationRule
from .credentials import (
    AdmCredential,
    ApnsCredential,
    BaiduCredential,
    FcmCredential,
    MpnsCredential,
    PushCredential,
    WnsCredential,
)
from .entity_description import EntityDescription

logger = get_logger(__name__)

FULL_ACCESS_RIGHTS = frozenset({AccessRights.LISTEN, AccessRights.SEND, AccessRights.MANAGE})
LISTEN_ACCESS_RIGHTS = frozenset({AccessRights.LISTEN})


def _require_non_blank(field: str, value: str | None) -> None:
    if value is None or not str(value).strip():
        raise InvalidArgumentError(field, "must not be empty")
    if not isinstance(value, str):
        raise InvalidArgumentError(field, "must be a string")


class _CredentialSlot:
    """Guarded, type-checked attribute holding one platform credential."""

    def __init__(self, credential_type: type[PushCredential]) -> None:
        self.credential_type = credential_type

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.storage = f"_{name}"

    def __get__(
        self, instance: NotificationHubDescription | None, owner: type
    ) -> PushCredential | None | _CredentialSlot:
        if instance is None:
            return self
        return getattr(instance, self.storage, None)

    def __set__(self, instance: NotificationHubDescription, value: PushCredential | None) -> None:
        instance._throw_if_read_only(self.name)
        if value is not None and not isinstance(value, self.credential_type):
            raise InvalidArgumentError(
                self.name, f"expected {self.credential_type.__name__}, got {type(value).__name__}"
            )
        setattr(instance, self.storage, value)


class NotificationHubDescription(EntityDescription):
    """Metadata description of a notification hub.

    The description holds the hub path, one optional credential per push
    platform, shared access authorization rules, the registration time-to-live,
    the disabled flag, free-form user metadata and read-only usage counters.

    Lazy accessors (authorization, registration_ttl) materialize their backing
    field with a check-then-set and are not thread-safe on their own. Only
    set_access_password is synchronized; share an instance across threads only
    if all other mutation is coordinated by the caller.
    """

    apns_credential = _CredentialSlot(ApnsCredential)
    wns_credential = _CredentialSlot(WnsCredential)
    fcm_credential = _CredentialSlot(FcmCredential)
    mpns_credential = _CredentialSlot(MpnsCredential)
    adm_credential = _CredentialSlot(AdmCredential)
    baidu_credential = _CredentialSlot(BaiduCredential)

    def __init__(self, path: str) -> None:
        """
        Initialize a description for the hub at ``path``.

        Args:
            path: Hub path relative to the namespace

        Raises:
            InvalidArgumentError: If the path is blank or too long
        """
        super().__init__()
        self._authorization_lock = threading.Lock()
        self.internal_authorization: AuthorizationRules | None = None
        self.internal_registration_ttl: timedelta | None = None
        self.internal_user_metadata: str | None = None
        # Persisted as the Status element; None means the service default (enabled)
        self.internal_status: bool | None = None
        self._daily_operations = 0
        self._daily_max_active_devices = 0
        self._daily_max_active_registrations = 0
        self.path = path

    @property
    def path(self) -> str:
        """Hub path relative to the namespace base address."""
        return self._path

    @path.setter
    def path(self, value: str) -> None:
        self._throw_if_read_only("path")
        _require_non_blank("path", value)
        if len(value) > NOTIFICATION_HUB_NAME_MAXIMUM_LENGTH:
            raise InvalidArgumentError(
                "path",
                f"notification hub name must be at most "
                f"{NOTIFICATION_HUB_NAME_MAXIMUM_LENGTH} characters",
                details={"length": len(value)},
            )
        self._path = value

    @property
    def authorization(self) -> AuthorizationRules:
        """Authorization rules, materialized empty on first access."""
        if self.internal_authorization is None:
            self.internal_authorization = AuthorizationRules()
        return self.internal_authorization

    def set_access_password(
        self, rule_name: str, password: str, rights: Iterable[AccessRights]
    ) -> None:
        """Create or update the rule ``rule_name`` with the given key and rights.

        An existing rule keeps its identity and secondary key; only its primary
        key and rights are replaced.

        Args:
            rule_name: Key name of the rule
            password: Primary key to assign
            rights: Access rights to grant

        Raises:
            InvalidArgumentError: If a string argument is blank or a rule value is invalid
            ReadOnlyViolationError: If the description is frozen
        """
        self._throw_if_read_only("authorization")
        candidate = self._access_rule_candidate(
            "rule_name", rule_name, "password", password, rights
        )

        with self._authorization_lock:
            self._upsert_access_rule(candidate)

    def set_access_passwords(
        self,
        full_access_rule_name: str,
        full_access_password: str,
        listen_access_rule_name: str,
        listen_access_password: str,
    ) -> None:
        """Upsert a full access rule and a listen-only rule.

        Both rules are fully validated before either is written, so a failure
        leaves the authorization rules unchanged.

        Raises:
            InvalidArgumentError: If any argument is blank or violates a rule constraint
            ReadOnlyViolationError: If the description is frozen
        """
        self._throw_if_read_only("authorization")
        _require_non_blank("full_access_rule_name", full_access_rule_name)
        _require_non_blank("full_access_password", full_access_password)
        _require_non_blank("listen_access_rule_name", listen_access_rule_name)
        _require_non_blank("listen_access_password", listen_access_password)

        full_access = self._access_rule_candidate(
            "full_access_rule_name",
            full_access_rule_name,
            "full_access_password",
            full_access_password,
            FULL_ACCESS_RIGHTS,
        )
        listen_access = self._access_rule_candidate(
            "listen_access_rule_name",
            listen_access_rule_name,
            "listen_access_password",
            listen_access_password,
            LISTEN_ACCESS_RIGHTS,
        )

        with self._authorization_lock:
            self._upsert_access_rule(full_access)
            self._upsert_access_rule(listen_access)

    @staticmethod
    def _access_rule_candidate(
        name_field: str,
        rule_name: str,
        password_field: str,
        password: str,
        rights: Iterable[AccessRights],
    ) -> SharedAccessAuthorizationRule:
        """Validate upsert arguments by building the rule they describe."""
        _require_non_blank(name_field, rule_name)
        _require_non_blank(password_field, password)
        if rights is None:
            raise InvalidArgumentError("rights", "must not be None")
        try:
            return SharedAccessAuthorizationRule(rule_name, password, rights)
        except InvalidArgumentError as e:
            # Report the caller's argument name rather than the rule attribute
            if e.field == "key_name":
                raise InvalidArgumentError(name_field, e.reason) from e
            if e.field == "primary_key":
                raise InvalidArgumentError(password_field, e.reason) from e
            raise

    def _upsert_access_rule(self, candidate: SharedAccessAuthorizationRule) -> None:
        # Caller holds the authorization lock; candidate values are already valid
        rule = self.authorization.try_get_shared_access_rule(candidate.key_name)
        if rule is not None:
            rule.primary_key = candidate.primary_key
            rule.rights = candidate.rights
            logger.debug(
                "Updated authorization rule",
                extra={"hub_path": self._path, "key_name": candidate.key_name},
            )
        else:
            self.authorization.add(candidate)
            logger.debug(
                "Added authorization rule",
                extra={"hub_path": self._path, "key_name": candidate.key_name},
            )

    @property
    def registration_ttl(self) -> timedelta:
        """Lifetime of device registrations, defaulting to the service default."""
        if self.internal_registration_ttl is None:
            self.internal_registration_ttl = DEFAULT_REGISTRATION_TTL
        return self.internal_registration_ttl

    @registration_ttl.setter
    def registration_ttl(self, value: timedelta) -> None:
        self._throw_if_read_only("registration_ttl")
        if not isinstance(value, timedelta):
            raise InvalidArgumentError("registration_ttl", "must be a timedelta")
        if value < MINIMUM_REGISTRATION_TTL:
            raise OutOfRangeError(
                "registration_ttl",
                value,
                MINIMUM_REGISTRATION_TTL,
                f"registration TTL must be at least {MINIMUM_REGISTRATION_TTL}",
            )
        self.internal_registration_ttl = value

    @property
    def is_disabled(self) -> bool:
        """Whether the hub is disabled.

        While disabled, the service answers every registration management and
        send operation with 403 Forbidden. Multi-tenant applications use this
        to suspend a single tenant's hub.
        """
        return self.internal_status or False

    @is_disabled.setter
    def is_disabled(self, value: bool) -> None:
        self.internal_status = bool(value)

    @property
    def is_anonymous_accessible(self) -> bool:
        return False

    @property
    def user_metadata(self) -> str | None:
        """Free-form user metadata associated with the hub."""
        return self.internal_user_metadata

    @user_metadata.setter
    def user_metadata(self, value: str | None) -> None:
        self._throw_if_read_only("user_metadata")
        if value is None or not value.strip():
            self.internal_user_metadata = None
            return
        if len(value) > MAXIMUM_USER_METADATA_LENGTH:
            raise OutOfRangeError(
                "user_metadata",
                len(value),
                MAXIMUM_USER_METADATA_LENGTH,
                f"user metadata must be at most {MAXIMUM_USER_METADATA_LENGTH} characters",
            )
        self.internal_user_metadata = value

    @property
    def daily_operations(self) -> int:
        return self._daily_operations

    @property
    def daily_max_active_devices(self) -> int:
        return self._daily_max_active_devices

    @property
    def daily_max_active_registrations(self) -> int:
        return self._daily_max_active_registrations

    def _update_usage_counters(
        self,
        daily_operations: int | None = None,
        daily_max_active_devices: int | None = None,
        daily_max_active_registrations: int | None = None,
    ) -> None:
        """Refresh usage counters from a service response.

        Only the serialization layer calls this; counters are not part of the
        configurable state and are therefore not subject to the read-only guard.
        """
        counters = {
            "daily_operations": daily_operations,
            "daily_max_active_devices": daily_max_active_devices,
            "daily_max_active_registrations": daily_max_active_registrations,
        }
        for name, value in counters.items():
            if value is not None and value < 0:
                raise OutOfRangeError(name, value, 0, "usage counters must be non-negative")
        for name, value in counters.items():
            if value is not None:
                setattr(self, f"_{name}", value)

    def _apply_server_state(self, values: Mapping[str, Any]) -> None:
        self._update_usage_counters(**values)

    @property
    def requires_encryption(self) -> bool:
        return True

    def __repr__(self) -> str:
        return (
            f"NotificationHubDescription(path={self._path!r}, "
            f"is_disabled={self.is_disabled}, is_read_only={self.is_read_only})"
        )
