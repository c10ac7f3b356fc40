"""
Format check for hex-form QRL addresses.

An address is ``Q`` followed by 39 hex-encoded bytes:
  - 3-byte descriptor (signature scheme, hash function, address format, tree height)
  - 32-byte hash of the extended public key
  - 4-byte checksum: the last 4 bytes of SHA-256 over the first 35 bytes
"""

import hashlib
import re
from typing import NamedTuple, Optional

HEX_ADDRESS_RE = re.compile(r"^Q[0-9a-fA-F]{78}$")

SIGNATURE_SCHEMES = {0: "XMSS"}
HASH_FUNCTIONS = {0: "SHA2_256", 1: "SHAKE_128", 2: "SHAKE_256"}
ADDRESS_FORMATS = {0: "SHA256_2X"}


class AddressCheck(NamedTuple):
    result: bool
    signature: Optional[str] = None
    hash_function: Optional[str] = None
    height: Optional[int] = None


def validate_hex_address(text) -> AddressCheck:
    if not isinstance(text, str) or not HEX_ADDRESS_RE.match(text):
        return AddressCheck(False)

    raw = bytes.fromhex(text[1:])
    descriptor, checksum = raw[:3], raw[35:]

    signature = SIGNATURE_SCHEMES.get(descriptor[0] >> 4)
    hash_function = HASH_FUNCTIONS.get(descriptor[0] & 0x0F)
    address_format = ADDRESS_FORMATS.get(descriptor[1] >> 4)
    height = (descriptor[1] & 0x0F) * 2

    if signature is None or hash_function is None or address_format is None:
        return AddressCheck(False, signature, hash_function, height)

    if hashlib.sha256(raw[:35]).digest()[-4:] != checksum:
        return AddressCheck(False, signature, hash_function, height)

    return AddressCheck(True, signature, hash_function, height)
