"""Tests for service lookups and operation waits."""

import logging

import pytest

from paas_provider.exceptions import (
    EmptyResultError,
    ErrorCode,
    NotFoundError,
    RemoteAPIError,
    ServiceRolledBackError,
    UnexpectedStateError,
    WaitTimeoutError,
)
from paas_provider.paas.find import find_service_by_id
from paas_provider.paas.status import status_service
from paas_provider.paas.wait import (
    wait_service_created,
    wait_service_deleted,
    wait_service_updated,
)

NOT_FOUND = RemoteAPIError("Document.NotFound", "service not found")


@pytest.fixture
def wait_kwargs(wait_config, fake_clock):
    """Keyword arguments that make waits run on the fake clock."""
    return {'wait_config': wait_config, 'clock': fake_clock, 'sleep': fake_clock.sleep}


class TestFindServiceById:
    """Test single service lookups."""

    def test_found(self, mock_client, make_service):
        """Test the described service is returned."""
        service = make_service("READY")
        mock_client.describe_service.return_value = service

        assert find_service_by_id(mock_client, "svc-1") is service
        mock_client.describe_service.assert_called_once_with("svc-1")

    def test_not_found_code(self, mock_client):
        """Test the not-found API code becomes NotFoundError."""
        mock_client.describe_service.side_effect = NOT_FOUND

        with pytest.raises(NotFoundError) as exc_info:
            find_service_by_id(mock_client, "svc-1")

        assert exc_info.value.cause is NOT_FOUND
        assert exc_info.value.last_request == {'serviceId': "svc-1"}

    def test_empty_result(self, mock_client):
        """Test a missing service in the output becomes EmptyResultError."""
        mock_client.describe_service.return_value = None

        with pytest.raises(EmptyResultError) as exc_info:
            find_service_by_id(mock_client, "svc-1")

        assert exc_info.value.error_code == ErrorCode.EMPTY_RESULT

    def test_other_errors_propagate(self, mock_client):
        """Test other API errors are not translated."""
        mock_client.describe_service.side_effect = RemoteAPIError("Auth.Failure", "denied")

        with pytest.raises(RemoteAPIError) as exc_info:
            find_service_by_id(mock_client, "svc-1")

        assert exc_info.value.code == "Auth.Failure"


class TestStatusService:
    """Test the status probe."""

    def test_status(self, mock_client, make_service):
        """Test the probe reports the service and its status."""
        service = make_service("CREATING")
        mock_client.describe_service.return_value = service

        assert status_service(mock_client, "svc-1")() == (service, "CREATING")

    def test_not_found(self, mock_client):
        """Test a missing service is reported as no object and no status."""
        mock_client.describe_service.side_effect = NOT_FOUND

        assert status_service(mock_client, "svc-1")() == (None, "")

    def test_empty_result_is_not_found(self, mock_client):
        """Test an empty result counts as not found."""
        mock_client.describe_service.return_value = None

        assert status_service(mock_client, "svc-1")() == (None, "")

    def test_error_propagates(self, mock_client):
        """Test other errors are raised from the probe."""
        mock_client.describe_service.side_effect = RemoteAPIError("Internal.Error")

        with pytest.raises(RemoteAPIError):
            status_service(mock_client, "svc-1")()


class TestWaitServiceCreated:
    """Test waiting for creation."""

    def test_ready_after_three_probes(self, mock_client, make_service, wait_kwargs):
        """Test the wait passes through pending statuses to READY."""
        ready = make_service("READY")
        mock_client.describe_service.side_effect = [
            make_service("PENDING"),
            make_service("PROVISIONING"),
            ready,
        ]

        assert wait_service_created(mock_client, "svc-1", **wait_kwargs) is ready
        assert mock_client.describe_service.call_count == 3

    def test_error_status_attaches_last_error(self, mock_client, make_service, wait_kwargs):
        """Test a service in ERROR carries its error code and description."""
        failed = make_service("ERROR", errorCode="Quota.Exceeded", errorDescription="no capacity")
        mock_client.describe_service.side_effect = [make_service("CREATING"), failed]

        with pytest.raises(UnexpectedStateError) as exc_info:
            wait_service_created(mock_client, "svc-1", **wait_kwargs)

        error = exc_info.value
        assert error.service is failed
        assert error.last_error.remote_error_code == "Quota.Exceeded"
        assert error.last_error.message == "code: Quota.Exceeded, description: no capacity"
        assert error.details['error_code'] == "Quota.Exceeded"
        assert error.details['error_description'] == "no capacity"
        assert "last error: code: Quota.Exceeded" in str(error)

    def test_timeout(self, mock_client, make_service, wait_kwargs):
        """Test the create timeout from the wait configuration."""
        mock_client.describe_service.return_value = make_service("CREATING")

        with pytest.raises(WaitTimeoutError) as exc_info:
            wait_service_created(mock_client, "svc-1", **wait_kwargs)

        assert exc_info.value.timeout_seconds == 60
        assert exc_info.value.last_status == "CREATING"
        assert exc_info.value.last_error is None

    def test_explicit_timeout(self, mock_client, make_service, wait_kwargs):
        """Test an explicit timeout overrides the configured one."""
        mock_client.describe_service.return_value = make_service("CREATING")

        with pytest.raises(WaitTimeoutError) as exc_info:
            wait_service_created(mock_client, "svc-1", timeout=5, **wait_kwargs)

        assert exc_info.value.timeout_seconds == 5

    def test_wait_logged(self, mock_client, make_service, wait_kwargs, caplog):
        """Test the outcome is recorded by the operation logger."""
        mock_client.describe_service.return_value = make_service("READY")

        with caplog.at_level(logging.INFO, logger="paas_provider.operations"):
            wait_service_created(mock_client, "svc-1", **wait_kwargs)

        record = next(r for r in caplog.records if r.name == "paas_provider.operations")
        assert record.service_id == "svc-1"
        assert record.operation == "wait_create"
        assert record.status == "READY"


class TestWaitServiceUpdated:
    """Test waiting for updates."""

    def test_ready(self, mock_client, make_service, wait_kwargs):
        """Test the wait passes through UPDATING and RECOVERING."""
        ready = make_service("READY", isRolledBack=False)
        mock_client.describe_service.side_effect = [
            make_service("UPDATING"),
            make_service("RECOVERING"),
            ready,
        ]

        assert wait_service_updated(mock_client, "svc-1", **wait_kwargs) is ready

    def test_rolled_back(self, mock_client, make_service, wait_kwargs):
        """Test a rolled back update raises with the service attached."""
        rolled_back = make_service("READY", isRolledBack=True)
        mock_client.describe_service.side_effect = [make_service("UPDATING"), rolled_back]

        with pytest.raises(ServiceRolledBackError) as exc_info:
            wait_service_updated(mock_client, "svc-1", **wait_kwargs)

        assert exc_info.value.service is rolled_back
        assert exc_info.value.error_code == ErrorCode.ROLLED_BACK

    def test_pending_create_statuses_are_unexpected(self, mock_client, make_service, wait_kwargs):
        """Test only update statuses are pending for updates."""
        mock_client.describe_service.return_value = make_service("CREATING")

        with pytest.raises(UnexpectedStateError) as exc_info:
            wait_service_updated(mock_client, "svc-1", **wait_kwargs)

        assert exc_info.value.last_error is None


class TestWaitServiceDeleted:
    """Test waiting for deletion."""

    def test_not_found_means_deleted(self, mock_client, make_service, wait_kwargs):
        """Test a vanished service completes the wait with no object."""
        mock_client.describe_service.side_effect = [make_service("DELETING"), NOT_FOUND]

        assert wait_service_deleted(mock_client, "svc-1", **wait_kwargs) is None

    def test_deleted_status(self, mock_client, make_service, wait_kwargs):
        """Test the DELETED status completes the wait with the object."""
        deleted = make_service("DELETED")
        mock_client.describe_service.side_effect = [make_service("DELETING"), deleted]

        assert wait_service_deleted(mock_client, "svc-1", **wait_kwargs) is deleted

    def test_single_not_found_check(self, mock_client, make_service, wait_kwargs):
        """Test deletion doesn't use the configured not-found tolerance."""
        mock_client.describe_service.side_effect = [
            make_service("PENDING"),
            make_service("DELETING"),
            NOT_FOUND,
            make_service("DELETING"),
        ]

        assert wait_service_deleted(mock_client, "svc-1", **wait_kwargs) is None
        assert mock_client.describe_service.call_count == 3

    def test_error_status(self, mock_client, make_service, wait_kwargs):
        """Test a failed deletion carries the service error."""
        failed = make_service("ERROR", errorCode="Volume.Busy", errorDescription="detach failed")
        mock_client.describe_service.side_effect = [make_service("DELETING"), failed]

        with pytest.raises(UnexpectedStateError) as exc_info:
            wait_service_deleted(mock_client, "svc-1", **wait_kwargs)

        assert exc_info.value.last_error.remote_error_description == "detach failed"

    def test_api_error_propagates(self, mock_client, wait_kwargs):
        """Test API errors other than not found are raised."""
        mock_client.describe_service.side_effect = RemoteAPIError("Internal.Error", "boom")

        with pytest.raises(RemoteAPIError):
            wait_service_deleted(mock_client, "svc-1", **wait_kwargs)
