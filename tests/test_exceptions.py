"""Tests for custom exception hierarchy."""

from service_billing.exceptions import (
    BulkTransitionError,
    ConfigurationError,
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
    RemoteServiceError,
    ServiceBillingError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_root_is_exception(self) -> None:
        assert isinstance(ServiceBillingError("test"), Exception)

    def test_referential_integrity_is_entity_not_found(self) -> None:
        err = ReferentialIntegrityError("test")
        assert isinstance(err, EntityNotFoundError)
        assert isinstance(err, ServiceBillingError)

    def test_bulk_transition_is_invalid_state(self) -> None:
        err = BulkTransitionError("Could not suspend order o-2", order_id="o-2")

        assert isinstance(err, InvalidEntityStateError)
        assert err.order_id == "o-2"
        assert str(err) == "Could not suspend order o-2"

    def test_configuration_and_remote_errors(self) -> None:
        assert isinstance(ConfigurationError("test"), ServiceBillingError)
        assert isinstance(RemoteServiceError("test"), ServiceBillingError)

    def test_remote_status_code(self) -> None:
        assert RemoteServiceError("boom", status_code=502).status_code == 502
        assert RemoteServiceError("boom").status_code is None


class TestValidationError:
    """Tests for ValidationError."""

    def test_errors_and_message(self) -> None:
        err = ValidationError({"price": "invalid amount", "name": "name is required"})

        assert isinstance(err, ServiceBillingError)
        assert err.errors == {"price": "invalid amount", "name": "name is required"}
        assert str(err) == "Invalid data: price: invalid amount, name: name is required"

    def test_errors_are_copied(self) -> None:
        errors = {"price": "invalid amount"}
        err = ValidationError(errors)
        errors.clear()

        assert err.errors == {"price": "invalid amount"}
