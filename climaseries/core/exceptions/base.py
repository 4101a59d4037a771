"""climaseries core exceptions."""

from typing import Any


class ClimaSeriesError(Exception):
    """Base exception for climaseries."""

    def __init__(
        self,
        message: str,
        error_code: str = "GENERAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        """Initialise the error.

        Args:
            message: human readable message
            error_code: stable machine readable code
            details: extra context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class MalformedValueError(ClimaSeriesError):
    """A scalar value could not be parsed into its declared type."""

    def __init__(
        self,
        message: str,
        field: str,
        value: str,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["field"] = field
        super_details["value"] = value
        super().__init__(message, "MALFORMED_VALUE", super_details)
        self.field = field
        self.value = value


class UnsupportedConversionError(ClimaSeriesError):
    """Requested time step conversion is not implemented."""

    def __init__(self, native: str, requested: str, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details.update({"native": native, "requested": requested})
        super().__init__(
            f"conversion from {native} to {requested} is not supported",
            "UNSUPPORTED_CONVERSION",
            super_details,
        )
        self.native = native
        self.requested = requested


class TransportError(ClimaSeriesError):
    """Remote climate service failure."""

    def __init__(
        self,
        message: str,
        service: str,
        error_code: str = "TRANSPORT_ERROR",
        status_code: int | None = None,
        retryable: bool = False,
        details: dict[str, Any] | None = None,
        retry_after: float | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super_details["retryable"] = retryable
        super().__init__(message, error_code, super_details)
        self.service = service
        self.status_code = status_code
        self.retryable = retryable
        # seconds the server asked to wait before the next request
        self.retry_after = retry_after


class NetworkError(TransportError):
    """Connection level failure or timeout while talking to the service."""

    def __init__(
        self,
        message: str,
        service: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, service, "NETWORK_ERROR", None, True, details)


class UnknownClimateError(ClimaSeriesError):
    """The remote service does not list a climate with this name."""

    def __init__(self, name: str, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details["name"] = name
        super().__init__(f"unknown climate '{name}'", "UNKNOWN_CLIMATE", super_details)
        self.name = name


class ConfigurationError(ClimaSeriesError):
    """Invalid configuration value."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "CONFIGURATION_ERROR", details)
