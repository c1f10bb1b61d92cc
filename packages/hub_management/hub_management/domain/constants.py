"""Platform limits and defaults enforced by the notification hub service."""

from __future__ import annotations

from datetime import timedelta

NOTIFICATION_HUB_NAME_MAXIMUM_LENGTH = 260
MAXIMUM_USER_METADATA_LENGTH = 1024

DEFAULT_REGISTRATION_TTL = timedelta(days=90)
MINIMUM_REGISTRATION_TTL = timedelta(days=1)

SHARED_ACCESS_KEY_NAME_MAXIMUM_LENGTH = 256
SHARED_ACCESS_KEY_MAXIMUM_LENGTH = 256
# Random keys are generated from this many bytes before base64 encoding
SHARED_ACCESS_KEY_BYTES = 32

MANAGEMENT_NAMESPACE = "http://schemas.microsoft.com/netservices/2010/10/servicebus/connect"
SCHEMA_INSTANCE_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
