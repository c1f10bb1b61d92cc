"""Base type for management entity descriptions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ...infrastructure.logging import get_logger
from ..exceptions import ReadOnlyViolationError

logger = get_logger(__name__)


class EntityDescription:
    """Common lifecycle for descriptions exchanged with the management service.

    A description is mutable until it is marked read-only, typically after a
    successful creation round-trip. From then on every guarded mutator raises
    ReadOnlyViolationError and leaves the instance untouched.
    """

    def __init__(self) -> None:
        self._is_read_only = False

    @property
    def is_read_only(self) -> bool:
        """Whether the description has been frozen."""
        return self._is_read_only

    def mark_read_only(self) -> None:
        """Freeze the description. There is no way back."""
        if not self._is_read_only:
            logger.debug(
                "Entity description marked read-only",
                extra={"entity_type": type(self).__name__},
            )
        self._is_read_only = True

    @property
    def requires_encryption(self) -> bool:
        """Whether the entity must only travel over an encrypted channel."""
        return False

    def _throw_if_read_only(self, attribute: str) -> None:
        """Reject a mutation of ``attribute`` when the description is frozen.

        Raises:
            ReadOnlyViolationError: If the description is read-only
        """
        if self._is_read_only:
            raise ReadOnlyViolationError(type(self).__name__, attribute)

    def _apply_server_state(self, values: Mapping[str, Any]) -> None:
        """Restore attributes that only the service may set.

        Subclasses with server-managed attributes override this.

        Raises:
            AttributeError: If ``values`` names an attribute the entity does not manage
        """
        if values:
            raise AttributeError(
                f"{type(self).__name__} has no server-managed attributes: {sorted(values)}"
            )
