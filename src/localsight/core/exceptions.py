from typing import Optional


class LocalSightError(Exception):
    """Base exception for localsight."""

    pass


class ConfigError(LocalSightError):
    """Raised when the environment configuration cannot be parsed or is invalid."""

    pass


class FetchError(LocalSightError):
    """Base exception for failures while polling the kubelet summary endpoint."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class CertificateError(FetchError):
    """Raised when the client certificate/key pair cannot be loaded."""

    pass


class FetchTimeoutError(FetchError):
    """Raised when a poll does not complete within its timeout."""

    pass


class BadStatusError(FetchError):
    """Raised when the summary endpoint answers with a non-200 status."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        super().__init__(f"unexpected status code: {status_code}", url=url)
        self.status_code = status_code


class SummaryDecodeError(FetchError):
    """Raised when the response body is not a valid summary payload."""

    pass
