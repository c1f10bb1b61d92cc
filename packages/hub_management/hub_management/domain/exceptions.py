"""Domain-specific exceptions for notification hub management.

This module defines the exception hierarchy used by the hub entities and the
serialization layer. Domain exceptions are independent of infrastructure
concerns; infrastructure exceptions wrap wire and configuration failures.
"""

from typing import Any


class NotificationHubsError(Exception):
    """Base exception for all notification hub management errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code for programmatic handling
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class DomainError(NotificationHubsError):
    """Base class for domain-layer errors."""

    pass


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: str = "VALIDATION_ERROR",
        **kwargs: Any,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Validation error message
            field: Field that failed validation
            error_code: Machine-readable error code
            **kwargs: Additional error details
        """
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        super().__init__(message, error_code=error_code, details=details)
        self.field = field


class InvalidArgumentError(ValidationError, ValueError):
    """Raised when a required string is blank or exceeds its maximum length."""

    def __init__(self, field: str, reason: str, **kwargs: Any) -> None:
        """
        Initialize invalid argument error.

        Args:
            field: Name of the offending argument or attribute
            reason: Why the value was rejected
            **kwargs: Additional error details
        """
        message = f"Invalid value for '{field}': {reason}"
        super().__init__(message, field=field, error_code="INVALID_ARGUMENT", **kwargs)
        self.reason = reason


class OutOfRangeError(ValidationError, ValueError):
    """Raised when a duration or length violates its bound."""

    def __init__(self, field: str, value: Any, bound: Any, reason: str, **kwargs: Any) -> None:
        """
        Initialize out of range error.

        Args:
            field: Name of the offending attribute
            value: Rejected value (or a measure of it, such as its length)
            bound: The limit that was violated
            reason: Human-readable description of the bound
            **kwargs: Additional error details
        """
        message = f"Value for '{field}' is out of range: {reason}"
        details = {
            "value": str(value),
            "bound": str(bound),
            **kwargs.pop("details", {}),
        }
        super().__init__(
            message, field=field, error_code="OUT_OF_RANGE", details=details, **kwargs
        )
        self.value = value
        self.bound = bound


class ReadOnlyViolationError(DomainError):
    """Raised when a mutator is invoked on a frozen entity description."""

    def __init__(self, entity_type: str, attribute: str, **kwargs: Any) -> None:
        """
        Initialize read-only violation error.

        Args:
            entity_type: Class name of the frozen entity
            attribute: Attribute or operation that attempted the mutation
            **kwargs: Additional error details
        """
        message = f"{entity_type} is read-only; cannot modify '{attribute}'"
        details = {
            "entity_type": entity_type,
            "attribute": attribute,
            **kwargs.pop("details", {}),
        }
        super().__init__(message, error_code="READ_ONLY_VIOLATION", details=details)
        self.attribute = attribute


class ConflictError(DomainError):
    """Raised when an operation conflicts with existing state."""

    def __init__(
        self, message: str, conflicting_resource: str | None = None, **kwargs: Any
    ) -> None:
        """
        Initialize conflict error.

        Args:
            message: Conflict description
            conflicting_resource: Identifier of conflicting resource
            **kwargs: Additional error details
        """
        details = kwargs.pop("details", {})
        if conflicting_resource:
            details["conflicting_resource"] = conflicting_resource
        super().__init__(message, error_code="CONFLICT", details=details)


class DuplicateAuthorizationRuleError(ConflictError):
    """Raised when adding a rule whose key name is already present."""

    def __init__(self, key_name: str, **kwargs: Any) -> None:
        message = f"Authorization rule with key name '{key_name}' already exists"
        super().__init__(message, conflicting_resource=key_name, details={"key_name": key_name})
        self.key_name = key_name


class InfrastructureError(NotificationHubsError):
    """Base class for infrastructure-layer errors."""

    pass


class SerializationError(InfrastructureError):
    """Raised when an entity cannot be converted to or from its wire document."""

    def __init__(
        self, operation: str, reason: str, element: str | None = None, **kwargs: Any
    ) -> None:
        """
        Initialize serialization error.

        Args:
            operation: Either "serialize" or "deserialize"
            reason: Failure reason
            element: Wire element involved, if known
            **kwargs: Additional error details
        """
        message = f"Failed to {operation} entity"
        if element:
            message += f" at element '{element}'"
        message += f": {reason}"
        details = {
            "operation": operation,
            "element": element,
            "reason": reason,
            **kwargs.pop("details", {}),
        }
        super().__init__(message, error_code="SERIALIZATION_ERROR", details=details)


class ConfigurationError(InfrastructureError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, reason: str, **kwargs: Any) -> None:
        """
        Initialize configuration error.

        Args:
            config_key: Configuration key that has issues
            reason: Reason for configuration error
            **kwargs: Additional error details
        """
        message = f"Configuration error for '{config_key}': {reason}"
        details = {
            "config_key": config_key,
            "reason": reason,
            **kwargs.pop("details", {}),
        }
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details)
