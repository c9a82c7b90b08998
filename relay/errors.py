from __future__ import annotations

from enum import Enum
from typing import Optional


class RelayErrorKind(Enum):
    """Failures the relay can report, with the status and message the caller sees."""

    INVALID_REQUEST = (400, "Question is required")
    RATE_LIMITED = (429, "Rate limit exceeded, please try again later")
    # 500 rather than 401: the caller is not the one holding the credential.
    AUTHENTICATION_FAILED = (500, "API authentication failed")
    UNEXPECTED_PROVIDER_RESPONSE = (500, "Unexpected response format from Claude")
    PROVIDER_CALL_FAILED = (500, "Failed to get response from Claude")

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message


class RelayError(Exception):
    """Terminal failure for a single /ask request.

    ``detail`` is for server logs only; callers get ``kind.message``.
    """

    def __init__(self, kind: RelayErrorKind, detail: Optional[str] = None) -> None:
        super().__init__(detail or kind.message)
        self.kind = kind
        self.detail = detail or kind.message

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def message(self) -> str:
        return self.kind.message

    def to_envelope(self) -> dict:
        return {"error": self.kind.message}
