"""Wire serialization for entity descriptions."""

from __future__ import annotations

from .durations import format_duration, parse_duration
from .schema import NOTIFICATION_HUB_SCHEMA, EntitySchema, FieldKind, FieldSpec
from .xml_serializer import XmlEntitySerializer

__all__ = [
    "NOTIFICATION_HUB_SCHEMA",
    "EntitySchema",
    "FieldKind",
    "FieldSpec",
    "XmlEntitySerializer",
    "format_duration",
    "parse_duration",
]
