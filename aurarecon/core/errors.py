"""Scan error taxonomy.

Only the primary page can fail a scan. Script-resource failures are
recovered inside the engine and surface as warnings; a pattern that does
not match is normal output, never an error.
"""

from typing import Optional


class ScanError(Exception):
    """Base class for errors that end a scan."""


class InputError(ScanError, ValueError):
    """Malformed request: missing or non-absolute URL. No I/O is attempted."""


class UpstreamFetchError(ScanError):
    """The target page could not be retrieved (transport error or non-2xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
