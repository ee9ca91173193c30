"""
Error Taxonomy

Exceptions raised by fetchers, adapters and the run coordinator.
Each carries a user-facing message and an optional remediation hint.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for every extraction failure."""

    default_hint = ""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = self.default_hint if hint is None else hint

    def with_hint(self, hint: str) -> "CatalogError":
        """Replace the remediation hint, keeping the classification."""
        self.hint = hint
        return self

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} {self.hint}"
        return self.message


class InvalidInput(CatalogError):
    """Malformed store URL, identifier or missing credential."""


class RequestTimeout(CatalogError):
    default_hint = "The store took too long to respond. Try again later."


class NetworkUnreachable(CatalogError):
    default_hint = (
        "The store could not be reached. Check your connection or whether "
        "a firewall is blocking the request."
    )


class MalformedResponse(CatalogError):
    default_hint = (
        "The response was not valid JSON. Check that the URL points to a "
        "store of the selected platform."
    )


class HttpStatusError(CatalogError):
    """Upstream answered with a non-success status."""

    default_hint = "Check the store details and try again."

    def __init__(self, status_code: int, message: Optional[str] = None, hint: Optional[str] = None):
        super().__init__(message or f"Upstream returned HTTP {status_code}.", hint)
        self.status_code = status_code


class Unauthorized(HttpStatusError):
    default_hint = "Check the store name and the access credentials."

    def __init__(self, status_code: int = 401, message: Optional[str] = None, hint: Optional[str] = None):
        super().__init__(status_code, message or "Unauthorized access.", hint)


class NotFound(HttpStatusError):
    default_hint = "Check that the store URL is correct and belongs to the selected platform."

    def __init__(self, message: Optional[str] = None, hint: Optional[str] = None):
        super().__init__(404, message or "Resource not found.", hint)


class UpstreamRedirect(HttpStatusError):
    """Upstream answered 3xx while redirects were not being followed."""

    def __init__(self, status_code: int, location: str):
        super().__init__(status_code, f"Upstream redirected to {location}.")
        self.location = location


class AllProxiesFailed(CatalogError):
    """Every public relay in the chain failed."""

    def __init__(self, last_error: Optional[CatalogError] = None, attempts: int = 0):
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(
            f"All {attempts} relays failed.",
            hint=self._hint_for(last_error),
        )

    @staticmethod
    def _hint_for(error: Optional[CatalogError]) -> str:
        if isinstance(error, RequestTimeout):
            return "The relays timed out; the store may be slow or rate limiting. Try again later."
        if isinstance(error, MalformedResponse):
            return "The relays returned unreadable data; the store may block proxied requests."
        if isinstance(error, NetworkUnreachable):
            return "No relay could be reached; a firewall or network policy may be blocking them."
        if error is not None:
            return f"Last error: {error.message}"
        return ""


class EmptyResult(CatalogError):
    """A structurally successful run produced zero products."""

    default_hint = "No products were found. Review the store details."
