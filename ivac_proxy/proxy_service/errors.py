"""Errors raised while forwarding a request upstream."""


class ProxyError(Exception):
    """Base class for failures that abort a single proxied request."""


class TransientNetworkError(ProxyError):
    """Transport-level fault during one attempt (connect, DNS, timeout)."""


class RetriesExhaustedError(ProxyError):
    """Every attempt failed with a transient network error."""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed to fetch after {attempts} attempts: {last_error}")


class UpstreamMalformedBodyError(ProxyError):
    """Upstream body was expected to be JSON but did not parse."""


class UpstreamPayloadError(ProxyError):
    """Upstream answered, but its body could not be read or decoded."""
