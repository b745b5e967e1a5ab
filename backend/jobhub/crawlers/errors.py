from __future__ import annotations


class JobSourceError(Exception):
    """A failure confined to one job board; the search carries on without it."""

    def __init__(self, source: str, message: str):
        super().__init__(message)
        self.source = source


class RateLimitExceeded(JobSourceError):
    def __init__(self, source: str):
        super().__init__(source, f"Rate limit exceeded for {source}")


class SourceAPIError(JobSourceError):
    def __init__(self, source: str, status: int | None = None, message: str | None = None):
        if message is None:
            message = f"{source} API error: {status}"
        super().__init__(source, message)
        self.status = status


class AuthenticationRequired(JobSourceError):
    def __init__(self, source: str, auth_url: str = ""):
        message = f"{source} authentication required"
        if auth_url:
            message = f"{message}: {auth_url}"
        super().__init__(source, message)
        self.auth_url = auth_url


class StorageFailure(Exception):
    pass


class UnknownSourceError(ValueError):
    def __init__(self, source: str):
        super().__init__(f"Unknown job source: {source}")
        self.source = source
