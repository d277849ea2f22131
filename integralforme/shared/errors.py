"""Error taxonomy shared by the services and the HTTP layer.

ValidationError covers bad caller input (reported as 400, never a fault).
UpstreamError covers the external collaborators, split by what went wrong:
the collaborator answered with a failure status, could not be reached, or
answered with something we cannot interpret.
"""

from typing import Optional


class IntegralformeError(Exception):
    """Base class for all service errors."""


class ValidationError(IntegralformeError):
    """Malformed or out-of-domain input."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class QueryValidationError(ValidationError):
    """Rejected daily puzzle query parameters."""


class TranslationValidationError(ValidationError):
    """Rejected translation request."""


class UpstreamError(IntegralformeError):
    """An external collaborator failed us."""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message


class UpstreamHTTPError(UpstreamError):
    """The upstream answered with a non-success status.

    ``body`` is the raw response text so it can be passed through verbatim.
    """

    def __init__(
        self,
        service: str,
        status_code: int,
        body: str,
        content_type: Optional[str] = None,
    ):
        super().__init__(service, f"error {status_code}: {body}")
        self.status_code = status_code
        self.body = body
        self.content_type = content_type


class UpstreamTransportError(UpstreamError):
    """The upstream could not be reached (DNS, connection, timeout)."""


class UpstreamProtocolError(UpstreamError):
    """The upstream answered, but not in the shape we expect."""
