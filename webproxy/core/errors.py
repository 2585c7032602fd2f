"""
Error taxonomy shared by the fetch gateway, the rewriter and the HTTP boundary.
"""

from typing import Optional


class ProxyError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidInput(ProxyError):
    """Empty or unparseable target URL. Raised before any network call."""

    status_code = 400


class FetchFailed(ProxyError):
    """Network error, timeout, redirect cap or non-2xx status during retrieval."""

    status_code = 502

    def __init__(self, message: str, code: Optional[str] = None, upstream_status: Optional[int] = None):
        super().__init__(message, details=code)
        self.code = code
        self.upstream_status = upstream_status
