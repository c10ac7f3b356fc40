from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    MISSING_FIELD = "missing_field"
    INVALID_LENGTH = "invalid_length"
    INVALID_VERSION = "invalid_version"
    INVALID_ADDRESS = "invalid_address"
    INTEGRITY_MISMATCH = "integrity_mismatch"
    POLICY_VIOLATION = "policy_violation"
    INTERNAL_FAILURE = "internal_failure"


GENERIC_FAILURE_MESSAGE = "failed to parse JSON"


class Failure(BaseModel):
    """A rejected check: what kind of problem, and the caller-facing reason."""
    kind: ErrorKind
    message: str


# Response schema
class Verdict(BaseModel):
    valid: bool
    linted: Optional[str] = None
    message: Optional[str] = None
    # Kept for logging only, never serialized to the caller
    kind: Optional[ErrorKind] = Field(default=None, exclude=True)

    @classmethod
    def accept(cls, linted: str) -> "Verdict":
        return cls(valid=True, linted=linted)

    @classmethod
    def reject(cls, failure: Failure) -> "Verdict":
        return cls(valid=False, message=failure.message, kind=failure.kind)

    def as_response(self) -> dict:
        return self.model_dump(exclude_none=True)
