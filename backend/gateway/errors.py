"""Normalized error taxonomy shared by every provider adapter and transport binding."""
from enum import Enum


class ErrorKind(str, Enum):
    MISSING_CREDENTIAL = "missing_credential"
    INVALID_CREDENTIAL_FORMAT = "invalid_credential_format"
    UNSUPPORTED_PROVIDER = "unsupported_provider"
    UPSTREAM_HTTP_ERROR = "upstream_http_error"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    UPSTREAM_MALFORMED_RESPONSE = "upstream_malformed_response"


class GatewayError(Exception):
    """Terminal failure of a single gateway call.

    `provider` is the identifier the caller asked for (possibly unknown),
    `status_code` is only set for upstream HTTP errors.
    """

    kind: ErrorKind = ErrorKind.UPSTREAM_HTTP_ERROR

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.message = message
        self.status_code = status_code


class MissingCredential(GatewayError):
    kind = ErrorKind.MISSING_CREDENTIAL


class InvalidCredentialFormat(GatewayError):
    kind = ErrorKind.INVALID_CREDENTIAL_FORMAT


class UnsupportedProvider(GatewayError):
    kind = ErrorKind.UNSUPPORTED_PROVIDER


class UpstreamHttpError(GatewayError):
    kind = ErrorKind.UPSTREAM_HTTP_ERROR


class UpstreamTimeout(GatewayError):
    kind = ErrorKind.UPSTREAM_TIMEOUT


class UpstreamMalformedResponse(GatewayError):
    kind = ErrorKind.UPSTREAM_MALFORMED_RESPONSE
