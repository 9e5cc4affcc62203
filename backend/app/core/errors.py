"""
Error types raised by services and mapped to HTTP responses at the route boundary.

- ValidationFailed -> 400 (missing field, bad file, missing schedule date/time)
- NotFound         -> 404
Not-permitted outcomes are not exceptions: services return
{"success": False, "message": ...} and the route picks the status code.
"""


class ValidationFailed(ValueError):
    """Input rejected before any write happened."""


class FileRejected(ValidationFailed):
    """Upload rejected by size, encoded size or MIME type."""

    def __init__(self, message: str, file_name: str = ""):
        super().__init__(message)
        self.file_name = file_name


class NotFound(LookupError):
    """Requested record does not exist (or is not visible to the caller)."""
