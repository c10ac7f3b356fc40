from typing import Callable, Optional

from jsonschema import Draft202012Validator

from .models import ErrorKind, Failure

HASH_LENGTH = 128
STANDARD_VERSION = 1
PROVIDER_MAX_LENGTH = 79

# Values a JSON producer treats as "not set"
_UNSET = {"enum": [None, False, 0, ""]}


def _fixed_length_string(key: str) -> dict:
    return {
        "required": [key],
        "properties": {
            key: {"type": "string", "minLength": HASH_LENGTH, "maxLength": HASH_LENGTH}
        },
    }


# Checked in this order; the first rule that does not hold is reported.
STRUCTURE_RULES = [
    (
        ErrorKind.MISSING_FIELD,
        "provider key not present",
        {"type": "object", "required": ["provider"], "properties": {"provider": {"not": _UNSET}}},
    ),
    (
        ErrorKind.MISSING_FIELD,
        "metadata key not present",
        {"required": ["metadata"], "properties": {"metadata": {"not": _UNSET}}},
    ),
    (ErrorKind.INVALID_LENGTH, "invalid filehash length", _fixed_length_string("filehash")),
    (
        ErrorKind.INVALID_VERSION,
        "invalid standard version",
        {"required": ["standard"], "properties": {"standard": {"type": "integer", "const": STANDARD_VERSION}}},
    ),
    (ErrorKind.INVALID_LENGTH, "invalid metahash length", _fixed_length_string("metahash")),
]

_validators = [
    (kind, message, Draft202012Validator(schema)) for kind, message, schema in STRUCTURE_RULES
]


def check_structure(descriptor, address_validator: Callable) -> Optional[Failure]:
    """
    Returns the first violated structural rule, or None when the descriptor
    has every required field in the right shape and a well-formed provider.
    """
    for kind, message, validator in _validators:
        if not validator.is_valid(descriptor):
            return Failure(kind=kind, message=message)

    if not address_validator(descriptor["provider"]).result:
        return Failure(kind=ErrorKind.INVALID_ADDRESS, message="invalid provider QRL address")

    return None


def normalize(descriptor: dict) -> dict:
    """Lowercase both hashes and the provider, keeping its leading 'Q'. Mutates in place."""
    descriptor["filehash"] = descriptor["filehash"].lower()
    descriptor["metahash"] = descriptor["metahash"].lower()
    provider = descriptor["provider"].lower()
    descriptor["provider"] = f"Q{provider[1:PROVIDER_MAX_LENGTH]}"
    return descriptor
