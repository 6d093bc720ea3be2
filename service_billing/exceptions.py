"""Custom exception hierarchy for service-billing."""


class ServiceBillingError(Exception):
    """Base exception for all service-billing errors."""


class EntityNotFoundError(ServiceBillingError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(ServiceBillingError):
    """Raised when an entity is in an invalid state for the operation."""


class BulkTransitionError(InvalidEntityStateError):
    """Raised when a bulk status transition fails and is rolled back.

    Parameters
    ----------
    message : str
        Error description.
    order_id : str | None
        Order whose write failed.
    """

    def __init__(self, message: str, order_id: str | None = None) -> None:
        super().__init__(message)
        self.order_id = order_id


class ValidationError(ServiceBillingError):
    """Raised when admin input is rejected before persistence.

    ``errors`` maps each offending field to a human readable message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        detail = ", ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(f"Invalid data: {detail}")


class ConfigurationError(ServiceBillingError):
    """Raised when configuration is invalid or missing."""


class RemoteServiceError(ServiceBillingError):
    """Raised when a remote store or third-party API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
