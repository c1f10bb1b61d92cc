"""Conversion between ``timedelta`` and ``xs:duration`` text.

ISO 8601 parsing and rendering is delegated to pydantic. Only day and time
components are accepted: years and months have no fixed length and cannot
be represented by a ``timedelta``.
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

_TIMEDELTA_ADAPTER = TypeAdapter(timedelta)

_CALENDAR_DESIGNATORS = ("Y", "M", "W")


def format_duration(value: timedelta) -> str:
    """Render a timedelta as an xs:duration string, e.g. ``P1DT2H30M``.

    Whole days are always written with the ``D`` designator.
    """
    sign = "-" if value < timedelta(0) else ""
    magnitude = abs(value)
    days = magnitude.days
    time_of_day = magnitude - timedelta(days=days)

    text = f"{sign}P{days}D" if days else f"{sign}P"
    if time_of_day or not days:
        rendered = _TIMEDELTA_ADAPTER.dump_python(time_of_day, mode="json")
        text += rendered.removeprefix("P")
    return text


def parse_duration(text: str) -> timedelta:
    """Parse an xs:duration string into a timedelta.

    Raises:
        ValueError: If the text is not a day/time duration
    """
    candidate = text.strip()
    negative = candidate.startswith("-")
    body = candidate.removeprefix("-")
    date_part = body.partition("T")[0]
    if (
        not body.startswith("P")
        or body.endswith(("P", "T"))
        or any(designator in date_part for designator in _CALENDAR_DESIGNATORS)
    ):
        raise ValueError(f"Invalid duration: {text!r}")

    try:
        result = _TIMEDELTA_ADAPTER.validate_python(body)
    except PydanticValidationError as e:
        raise ValueError(f"Invalid duration: {text!r}") from e
    return -result if negative else result
