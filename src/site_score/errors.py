"""Errors that abort an audit and map onto an HTTP status."""


class AuditError(Exception):
    """Base class for audit failures shown to the user."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidURLError(AuditError):
    """The submitted URL is missing or malformed."""
    status_code = 400


class UnusableResultError(AuditError):
    """PageSpeed answered without a Lighthouse result."""
    status_code = 400


class RateLimitedError(AuditError):
    """PageSpeed rejected the call with a 429."""
    status_code = 429


class UpstreamError(AuditError):
    """PageSpeed failed in a way the caller cannot fix."""
    status_code = 502


class UpstreamTimeoutError(AuditError):
    """PageSpeed (or the audit as a whole) did not answer in time."""
    status_code = 504
