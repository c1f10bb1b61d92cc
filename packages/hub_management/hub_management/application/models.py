"""Pydantic models for hub description input files."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Literal

from pydantic import BaseModel, Field, StrictBool, field_validator

from ..domain.enums import AccessRights
from ..infrastructure.serialization.durations import parse_duration

CredentialPlatform = Literal["apns", "wns", "fcm", "mpns", "adm", "baidu"]


class AuthorizationRuleInput(BaseModel):
    """Shared access authorization rule as written in a description file.

    Keys left out are generated when the rule is created.
    """

    key_name: str = Field(..., description="Unique rule name within the hub")
    primary_key: str | None = Field(default=None, description="Primary shared access key")
    secondary_key: str | None = Field(default=None, description="Secondary shared access key")
    rights: list[AccessRights] = Field(
        default_factory=lambda: [AccessRights.LISTEN], description="Granted access rights"
    )

    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "example": {
                "key_name": "DefaultListenSharedAccessSignature",
                "rights": ["Listen"],
            }
        },
    }


class HubDescriptionInput(BaseModel):
    """Notification hub description as written in a description file."""

    path: str = Field(..., description="Hub path relative to the namespace")
    registration_ttl: timedelta | None = Field(
        default=None, description="Registration lifetime as xs:duration text or seconds"
    )
    user_metadata: str | None = Field(default=None, description="Free-form user metadata")
    is_disabled: StrictBool | None = Field(default=None, description="Suspend the hub")
    credentials: dict[CredentialPlatform, dict[str, str]] = Field(
        default_factory=dict, description="Credential properties keyed by platform"
    )
    authorization_rules: list[AuthorizationRuleInput] = Field(
        default_factory=list, description="Shared access authorization rules"
    )

    @field_validator("registration_ttl", mode="before")
    @classmethod
    def validate_registration_ttl(cls, v: Any) -> Any:
        """Accept xs:duration text or a number of seconds."""
        if isinstance(v, bool):
            raise ValueError("Registration TTL must be a duration string or seconds")
        if isinstance(v, str):
            return parse_duration(v)
        return v

    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "example": {
                "path": "tenants/contoso",
                "registration_ttl": "P30D",
                "credentials": {"fcm": {"GoogleApiKey": "<key>"}},
                "authorization_rules": [
                    {
                        "key_name": "DefaultFullSharedAccessSignature",
                        "rights": ["Listen", "Send", "Manage"],
                    }
                ],
            }
        },
    }
