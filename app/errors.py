from typing import Any, Dict, Optional

import httpx


class ResolverError(Exception):
    """Base class for every failure surfaced to API callers.

    ``status_code`` and ``message`` become the HTTP status and the ``error``
    field of the response body; ``details`` is the low-level cause.
    """

    kind = "unexpected"
    status_code = 500
    message = "An unexpected error occurred while processing your request."

    def __init__(self, details: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(details or self.message)
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidInput(ResolverError):
    kind = "invalid_input"
    status_code = 400
    message = "Invalid or missing MediaFire URL."


class LinkNotFound(ResolverError):
    kind = "not_found"
    status_code = 404
    message = (
        "Direct download link not found on the MediaFire page. "
        "The page structure might have changed."
    )


class UpstreamError(ResolverError):
    kind = "upstream"

    def __init__(self, status_code: int, details: Optional[str] = None):
        super().__init__(details, status_code=status_code)
        self.message = f"Failed to retrieve file: Remote server responded with status {status_code}."


class NetworkError(ResolverError):
    kind = "network"
    message = "Failed to retrieve file: No response received from MediaFire."


class FetchTimeoutError(NetworkError):
    kind = "timeout"


class RequestSetupError(ResolverError):
    kind = "request_setup"
    message = "Failed to retrieve file: Error setting up the request."


class UnexpectedError(ResolverError):
    pass


def classify_http_error(exc: Exception) -> ResolverError:
    """Map an httpx exception onto the error taxonomy."""
    if isinstance(exc, ResolverError):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        return UpstreamError(exc.response.status_code, str(exc))
    # raised before anything is sent on the wire
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError)):
        return RequestSetupError(str(exc))
    if isinstance(exc, httpx.TimeoutException):
        return FetchTimeoutError(str(exc) or "timeout")
    if isinstance(exc, httpx.RequestError):
        return NetworkError(str(exc) or exc.__class__.__name__)
    return UnexpectedError(str(exc))
