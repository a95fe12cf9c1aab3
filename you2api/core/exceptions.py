"""Core exceptions for the gateway."""


class GatewayError(Exception):
    """Base exception for gateway errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(GatewayError):
    """Raised when there's an issue with the configuration."""
    pass


class AuthorizationError(GatewayError):
    """Raised when the Authorization header is missing or not a bearer token."""

    def __init__(self, message: str = "Missing or invalid authorization header") -> None:
        super().__init__(message)


class InvalidRequestError(GatewayError):
    """Raised when an incoming request body cannot be used."""

    def __init__(self, message: str, code: str = "invalid_request") -> None:
        super().__init__(message)
        self.code = code


class UpstreamTransportError(GatewayError):
    """Raised when the upstream call fails before a response body is available."""
    pass


class UpstreamReadError(GatewayError):
    """Raised when reading the upstream event stream fails part way."""
    pass
