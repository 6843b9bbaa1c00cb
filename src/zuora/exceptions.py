from __future__ import annotations

from typing import Optional


class MissingCredentialsError(RuntimeError):
    """Raised when the Zuora username or password is not configured."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required Zuora credentials: " + ", ".join(missing))


class Fault(RuntimeError):
    """A transport failure or SOAP fault reported while talking to Zuora."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code
        super().__init__(message)
