"""Custom exception classes for the PaaS provider core."""

from typing import Optional, Dict, Any, Iterable
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for different types of failures."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Parameter mapping errors
    UNKNOWN_SERVICE_TYPE = "UNKNOWN_SERVICE_TYPE"
    UNSUPPORTED_DIMENSION = "UNSUPPORTED_DIMENSION"

    # Remote API errors
    REMOTE_API_ERROR = "REMOTE_API_ERROR"
    NOT_FOUND = "NOT_FOUND"
    EMPTY_RESULT = "EMPTY_RESULT"
    OPERATION_ERROR = "OPERATION_ERROR"

    # Wait errors
    WAIT_TIMEOUT = "WAIT_TIMEOUT"
    WAIT_CANCELLED = "WAIT_CANCELLED"
    UNEXPECTED_STATE = "UNEXPECTED_STATE"
    ROLLED_BACK = "ROLLED_BACK"

    # Resource operation errors
    SERVICE_OPERATION_FAILED = "SERVICE_OPERATION_FAILED"


class PaaSProviderError(Exception):
    """Base exception class for the PaaS provider core."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Specific error code for the failure
            details: Additional context about the error
            cause: The underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary."""
        result = {
            'error': self.error_code.value,
            'message': self.message,
            'details': self.details
        }

        if self.cause:
            result['cause'] = str(self.cause)

        return result

    def __str__(self) -> str:
        """String representation of the exception."""
        base_str = f"{self.error_code.value}: {self.message}"

        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            base_str += f" ({details_str})"

        if self.cause:
            base_str += f" [caused by: {self.cause}]"

        return base_str


class ConfigurationError(PaaSProviderError):
    """Exception for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {}
        if config_key:
            details['config_key'] = config_key

        super().__init__(
            message=message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            details=details
        )


class UnknownServiceTypeError(PaaSProviderError):
    """Exception for service types missing from the registry."""

    def __init__(self, service_type: str):
        super().__init__(
            message=f"Unknown service type: {service_type}",
            error_code=ErrorCode.UNKNOWN_SERVICE_TYPE,
            details={'service_type': service_type}
        )
        self.service_type = service_type


class UnsupportedDimensionError(PaaSProviderError):
    """Exception for unit tags that can't be converted to bytes."""

    def __init__(self, dimension: Any):
        super().__init__(
            message=f"unsupported dimension: {dimension}",
            error_code=ErrorCode.UNSUPPORTED_DIMENSION,
            details={'dimension': str(dimension)}
        )
        self.dimension = dimension


class RemoteAPIError(PaaSProviderError):
    """Error reported by the remote control-plane client.

    ``code`` is the API error code (for example ``Document.NotFound``) and is
    what callers match on.
    """

    def __init__(self, code: str, message: str = "", request: Optional[Any] = None):
        super().__init__(
            message=message or code,
            error_code=ErrorCode.REMOTE_API_ERROR,
            details={'code': code}
        )
        self.code = code
        self.request = request


class NotFoundError(PaaSProviderError):
    """Exception for resources the remote API reports as absent."""

    def __init__(
        self,
        message: str = "couldn't find resource",
        last_request: Optional[Any] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(
            message=message,
            error_code=ErrorCode.NOT_FOUND,
            cause=cause
        )
        self.last_request = last_request


class EmptyResultError(NotFoundError):
    """Exception for successful API calls that returned no object."""

    def __init__(self, last_request: Optional[Any] = None):
        super().__init__(message="empty result", last_request=last_request)
        self.error_code = ErrorCode.EMPTY_RESULT


class RemoteOperationError(PaaSProviderError):
    """Error detail reported by a service that reached the ERROR status."""

    def __init__(self, error_code: Optional[str], error_description: Optional[str]):
        super().__init__(
            message=f"code: {error_code or ''}, description: {error_description or ''}",
            error_code=ErrorCode.OPERATION_ERROR,
            details={
                'error_code': error_code or '',
                'error_description': error_description or ''
            }
        )
        self.remote_error_code = error_code or ''
        self.remote_error_description = error_description or ''


class WaitError(PaaSProviderError):
    """Base exception for failed waits.

    ``service`` holds the last object returned by the status probe, when there
    was one, so callers can inspect the final remote state.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        service: Optional[Any] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message=message, error_code=error_code, details=details, cause=cause)
        self.service = service
        self.last_error: Optional[RemoteOperationError] = None

    def set_last_error(self, last_error: RemoteOperationError):
        """Attach the remote error reported by the service."""
        self.last_error = last_error
        self.details.update(last_error.details)

    def __str__(self) -> str:
        base_str = super().__str__()
        if self.last_error is not None:
            base_str += f" last error: {self.last_error.message}"
        return base_str


class WaitTimeoutError(WaitError):
    """Exception for waits that ran out of time while still pending."""

    def __init__(
        self,
        timeout_seconds: float,
        last_status: str = "",
        expected: Iterable[str] = (),
        service: Optional[Any] = None
    ):
        expected = list(expected)
        super().__init__(
            message=(
                f"timeout while waiting for state to become '{', '.join(expected)}' "
                f"(last state: '{last_status}', timeout: {timeout_seconds}s)"
            ),
            error_code=ErrorCode.WAIT_TIMEOUT,
            details={
                'timeout_seconds': timeout_seconds,
                'last_status': last_status,
                'expected': expected
            },
            service=service
        )
        self.timeout_seconds = timeout_seconds
        self.last_status = last_status
        self.expected = expected


class WaitCancelledError(WaitError):
    """Exception for waits interrupted by the caller."""

    def __init__(self, last_status: str = "", service: Optional[Any] = None):
        super().__init__(
            message="wait cancelled",
            error_code=ErrorCode.WAIT_CANCELLED,
            details={'last_status': last_status},
            service=service
        )
        self.last_status = last_status


class UnexpectedStateError(WaitError):
    """Exception for statuses that are neither pending nor target."""

    def __init__(self, status: str, expected: Iterable[str] = (), service: Optional[Any] = None):
        expected = list(expected)
        super().__init__(
            message=f"unexpected state '{status}', wanted target '{', '.join(expected)}'",
            error_code=ErrorCode.UNEXPECTED_STATE,
            details={'status': status, 'expected': expected},
            service=service
        )
        self.status = status
        self.expected = expected


class ServiceRolledBackError(WaitError):
    """Exception for updates the remote API rolled back."""

    def __init__(self, service: Optional[Any] = None):
        super().__init__(
            message=(
                "an error occurred while updating the service and "
                "it was rolled back to the previous version. "
                "Please check the updated parameters and apply the changes again"
            ),
            error_code=ErrorCode.ROLLED_BACK,
            service=service
        )


class ServiceOperationError(PaaSProviderError):
    """Exception raised by the service CRUD glue with resource context."""

    def __init__(self, message: str, service_id: Optional[str] = None,
                 operation: Optional[str] = None, cause: Optional[Exception] = None):
        details = {}
        if service_id:
            details['service_id'] = service_id
        if operation:
            details['operation'] = operation

        super().__init__(
            message=message,
            error_code=ErrorCode.SERVICE_OPERATION_FAILED,
            details=details,
            cause=cause
        )


def is_not_found(error: Optional[BaseException]) -> bool:
    """Return True if the error means the remote resource doesn't exist."""
    return isinstance(error, NotFoundError)


def format_error_response(error: Exception, include_traceback: bool = False) -> Dict[str, Any]:
    """Format an exception into a standardized error response."""
    if isinstance(error, PaaSProviderError):
        response = error.to_dict()
    else:
        response = {
            'error': ErrorCode.INTERNAL_ERROR.value,
            'message': str(error),
            'details': {}
        }

    if include_traceback:
        import traceback
        response['traceback'] = traceback.format_exc()

    return response
