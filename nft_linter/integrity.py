from typing import Optional

from . import canonical
from .models import ErrorKind, Failure


def verify_metahash(descriptor: dict) -> Optional[Failure]:
    """Recompute the metadata digest and compare it to the declared metahash."""
    if canonical.digest(descriptor["metadata"]) != descriptor["metahash"].lower():
        return Failure(kind=ErrorKind.INTEGRITY_MISMATCH, message="invalid hash of metadata")
    return None
