"""Error types raised by the NLU service layer."""

from fastapi import HTTPException, status


class NLUServiceError(Exception):
    """Base class for errors the service maps onto HTTP responses.

    Attributes:
        code: Machine-readable error code returned to the caller.
        status_code: HTTP status code used when the error reaches a route.
        message: Human-readable description.
    """

    code = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.to_detail())


class InputError(NLUServiceError):
    """The inbound request is unusable (missing, blank or oversized text)."""

    code = "invalid_input"
    status_code = status.HTTP_400_BAD_REQUEST


class ConfigurationError(NLUServiceError):
    """Credentials, endpoint or feature configuration are missing or invalid."""

    code = "configuration_error"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class ProviderError(NLUServiceError):
    """The call to the NLU provider failed.

    Attributes:
        provider_status: HTTP status returned by the provider, if any.
    """

    code = "provider_error"
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, provider_status: int | None = None) -> None:
        super().__init__(message)
        self.provider_status = provider_status
