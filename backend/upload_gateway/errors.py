"""
Error taxonomy for the upload gateway.

Request-time errors carry the HTTP status they map to and are rendered as
plain-text responses by the handler registered in main.create_app().
Startup errors are fatal and never reach a request.
"""


class GatewayError(Exception):
    """Base class for all upload gateway errors."""


class RequestError(GatewayError):
    """An error that terminates a single request."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientInputError(RequestError):
    """The multipart file part is missing or unparsable."""

    status_code = 400


class LocalIOError(RequestError):
    """The uploaded part could not be opened as a stream."""

    status_code = 500


class BackendError(RequestError):
    """The storage backend rejected or failed the write."""

    status_code = 500


class StartupConfigurationError(GatewayError):
    """Required configuration is missing at boot."""


class BindConflictError(GatewayError):
    """None of the candidate listen ports could be bound."""

    def __init__(self, ports):
        self.ports = list(ports)
        super().__init__(
            f"All candidate ports are already in use: {', '.join(str(p) for p in self.ports)}"
        )
