"""Domain enums for notification hub management."""

from __future__ import annotations

from enum import Enum


class AccessRights(Enum):
    """Capabilities granted by a shared access authorization rule."""

    LISTEN = "Listen"
    SEND = "Send"
    MANAGE = "Manage"
