"""Application layer helpers for hub management tooling."""

from __future__ import annotations

from .builders import description_from_mapping, description_to_summary
from .models import AuthorizationRuleInput, HubDescriptionInput

__all__ = [
    "AuthorizationRuleInput",
    "HubDescriptionInput",
    "description_from_mapping",
    "description_to_summary",
]
