class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DownstreamServiceError(ServiceError):
    """Raised when a call to the appointment service does not succeed."""

    def __init__(self, message: str, status_code: int | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class TransportError(DownstreamServiceError):
    """Raised when the appointment service cannot be reached or times out."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message, status_code=None, cause=cause)


class ServerError(DownstreamServiceError):
    """Raised when the appointment service answers with an error status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        server_message: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, status_code=status_code, cause=cause)
        self.server_message = server_message


class UnexpectedError(ServiceError):
    """Raised when a reply cannot be decoded into the expected shape."""
