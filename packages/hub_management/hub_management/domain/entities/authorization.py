"""Shared access authorization rules attached to a notification hub."""

from __future__ import annotations

import base64
import secrets
from collections.abc import Iterable, Iterator

from ..constants import (
    SHARED_ACCESS_KEY_BYTES,
    SHARED_ACCESS_KEY_MAXIMUM_LENGTH,
    SHARED_ACCESS_KEY_NAME_MAXIMUM_LENGTH,
)
from ..enums import AccessRights
from ..exceptions import DuplicateAuthorizationRuleError, InvalidArgumentError


def _validate_key(field: str, value: str) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentError(field, "must be a string")
    if not value.strip():
        raise InvalidArgumentError(field, "must not be empty")
    if len(value) > SHARED_ACCESS_KEY_MAXIMUM_LENGTH:
        raise InvalidArgumentError(
            field, f"must be at most {SHARED_ACCESS_KEY_MAXIMUM_LENGTH} characters"
        )
    return value


def _validate_rights(rights: Iterable[AccessRights]) -> frozenset[AccessRights]:
    try:
        normalized = frozenset(rights)
    except TypeError as e:
        raise InvalidArgumentError("rights", "must be a collection of AccessRights") from e
    if not normalized:
        raise InvalidArgumentError("rights", "at least one access right is required")
    for right in normalized:
        if not isinstance(right, AccessRights):
            raise InvalidArgumentError("rights", f"unknown access right {right!r}")
    if AccessRights.MANAGE in normalized and not {
        AccessRights.LISTEN,
        AccessRights.SEND,
    } <= normalized:
        raise InvalidArgumentError("rights", "Manage requires both Listen and Send")
    return normalized


class SharedAccessAuthorizationRule:
    """A named key pair scoped to a set of access rights.

    Attributes:
        key_name: Unique name of the rule within its collection
        primary_key: Primary shared access key
        secondary_key: Secondary shared access key
        rights: Capabilities granted to holders of either key
    """

    def __init__(
        self,
        key_name: str,
        primary_key: str | None = None,
        rights: Iterable[AccessRights] = (AccessRights.LISTEN,),
        secondary_key: str | None = None,
    ) -> None:
        if not isinstance(key_name, str):
            raise InvalidArgumentError("key_name", "must be a string")
        if not key_name.strip():
            raise InvalidArgumentError("key_name", "must not be empty")
        if len(key_name) > SHARED_ACCESS_KEY_NAME_MAXIMUM_LENGTH:
            raise InvalidArgumentError(
                "key_name",
                f"must be at most {SHARED_ACCESS_KEY_NAME_MAXIMUM_LENGTH} characters",
            )
        self.key_name = key_name
        self.primary_key = (
            self.generate_random_key() if primary_key is None else primary_key
        )
        self.secondary_key = (
            self.generate_random_key() if secondary_key is None else secondary_key
        )
        self.rights = rights

    @staticmethod
    def generate_random_key() -> str:
        """Generate a base64 encoded random key."""
        return base64.b64encode(secrets.token_bytes(SHARED_ACCESS_KEY_BYTES)).decode("ascii")

    @property
    def primary_key(self) -> str:
        return self._primary_key

    @primary_key.setter
    def primary_key(self, value: str) -> None:
        self._primary_key = _validate_key("primary_key", value)

    @property
    def secondary_key(self) -> str:
        return self._secondary_key

    @secondary_key.setter
    def secondary_key(self, value: str) -> None:
        self._secondary_key = _validate_key("secondary_key", value)

    @property
    def rights(self) -> frozenset[AccessRights]:
        return self._rights

    @rights.setter
    def rights(self, value: Iterable[AccessRights]) -> None:
        self._rights = _validate_rights(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SharedAccessAuthorizationRule):
            return NotImplemented
        return (
            self.key_name == other.key_name
            and self.primary_key == other.primary_key
            and self.secondary_key == other.secondary_key
            and self.rights == other.rights
        )

    def __hash__(self) -> int:
        return hash(self.key_name)

    def __repr__(self) -> str:
        rights = sorted(right.value for right in self.rights)
        return f"SharedAccessAuthorizationRule(key_name={self.key_name!r}, rights={rights})"


class AuthorizationRules:
    """Ordered collection of authorization rules, unique by key name.

    The collection itself is not synchronized. Callers sharing a hub
    description mutate rules through NotificationHubDescription.set_access_password,
    which holds the description's lock.
    """

    def __init__(self, rules: Iterable[SharedAccessAuthorizationRule] = ()) -> None:
        self._rules: dict[str, SharedAccessAuthorizationRule] = {}
        for rule in rules:
            self.add(rule)

    def add(self, rule: SharedAccessAuthorizationRule) -> None:
        """Add a rule to the collection.

        Args:
            rule: The rule to add

        Raises:
            DuplicateAuthorizationRuleError: If a rule with the same key name exists
        """
        if rule.key_name in self._rules:
            raise DuplicateAuthorizationRuleError(rule.key_name)
        self._rules[rule.key_name] = rule

    def try_get_shared_access_rule(self, key_name: str) -> SharedAccessAuthorizationRule | None:
        """Look up a rule by key name, returning None when absent."""
        return self._rules.get(key_name)

    def remove(self, key_name: str) -> SharedAccessAuthorizationRule | None:
        """Remove and return the rule with ``key_name``, or None if not found."""
        return self._rules.pop(key_name, None)

    def key_names(self) -> list[str]:
        return list(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[SharedAccessAuthorizationRule]:
        return iter(list(self._rules.values()))

    def __contains__(self, key_name: object) -> bool:
        return key_name in self._rules

    def __repr__(self) -> str:
        return f"AuthorizationRules({self.key_names()!r})"
