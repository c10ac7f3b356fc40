"""
Deterministic JSON encoding for NFT descriptors.

Object keys are sorted at every level and numbers are written the way a
JavaScript producer writes them, so two semantically equal documents always
encode to the same bytes regardless of the order their keys arrived in.
"""

import hashlib
import json
import re
from typing import Any, Optional

# JavaScript switches to exponent notation at this magnitude.
_JS_EXPONENT_THRESHOLD = 1e21

# Unpaired UTF-16 surrogates cannot be encoded as UTF-8; JSON.stringify escapes them.
_LONE_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")


def _normalize_numbers(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        if value.is_integer() and abs(value) < _JS_EXPONENT_THRESHOLD:
            return int(value)
        return value
    if isinstance(value, dict):
        return {key: _normalize_numbers(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_numbers(item) for item in value]
    return value


def dumps(value: Any, indent: Optional[int] = None) -> str:
    """Return the canonical JSON text of ``value``.

    Without ``indent`` the output is compact (the form that gets hashed).
    With ``indent`` it is the human-readable form; key order is identical.
    """
    separators = (",", ":") if indent is None else (",", ": ")
    text = json.dumps(
        _normalize_numbers(value),
        sort_keys=True,
        indent=indent,
        separators=separators,
        ensure_ascii=False,
        allow_nan=False,
    )
    return _LONE_SURROGATE_RE.sub(lambda m: "\\u%04x" % ord(m.group()), text)


def encode(value: Any) -> bytes:
    return dumps(value).encode("utf-8")


def digest(value: Any) -> str:
    """Lowercase hex SHA-512 of the compact canonical encoding (128 chars)."""
    return hashlib.sha512(encode(value)).hexdigest()
