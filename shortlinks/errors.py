"""Error types raised by the link store and admin layer."""

from typing import Optional


class ShortLinkError(Exception):
    """Base class for short link errors.

    Every error carries a machine-readable ``code`` used by the HTTP layer
    in ``{code, message}`` error bodies.
    """

    code = "error"

    def __init__(self, message: str = "", code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class InvalidInput(ShortLinkError, ValueError):
    """Missing or malformed title, URL or short code."""

    code = "invalid_input"


class DuplicateCode(ShortLinkError, ValueError):
    """The requested short code is already in use."""

    code = "alias_exists"

    def __init__(self, short_code: str):
        super().__init__(f"Short code '{short_code}' already exists")
        self.short_code = short_code


class CodeGenerationExhausted(ShortLinkError):
    """No free short code was found within the retry budget."""

    code = "code_generation_exhausted"

    def __init__(self, attempts: int):
        super().__init__(f"Unable to generate a unique short code after {attempts} attempts")
        self.attempts = attempts


class NotFound(ShortLinkError):
    """Unknown short code or link id."""

    code = "not_found"


class StorageFailure(ShortLinkError):
    """The underlying store is unavailable or returned an error."""

    code = "storage_failure"

    def __init__(self, operation: str, detail: str = ""):
        message = f"Storage failure during {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation
        self.detail = detail
