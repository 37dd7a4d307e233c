"""Infrastructure-level errors."""


class HTTPClientError(Exception):
    """Outbound HTTP request failed (transport error or non-2xx status)."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)
