"""
Backend error types.
Raised by the hosted backend client for failed table, auth and storage calls.
"""


class BackendError(Exception):
    """A request to the hosted backend failed."""

    def __init__(self, message, code=None, details=None, status=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.status = status

    def __str__(self):
        if self.code:
            return f'{self.message} (code {self.code})'
        return self.message


class AuthError(BackendError):
    """Authentication failed (invalid or duplicate credentials)."""
