import hashlib

import pytest

from .address import validate_hex_address
from .pipeline import PipelineDeps
from .rules import DEFAULT_RULES_PATH, RuleEngine


def build_address(descriptor: bytes = b"\x01\x05\x00", seed: bytes = b"nft-provider") -> str:
    body = descriptor + hashlib.sha256(seed).digest()
    checksum = hashlib.sha256(body).digest()[-4:]
    return "Q" + (body + checksum).hex()


@pytest.fixture
def make_address():
    return build_address


@pytest.fixture
def sample_descriptor():
    return {
        "provider": build_address(),
        "metadata": {"a": 1, "b": 2},
        "filehash": "f" * 128,
        "standard": 1,
        "metahash": hashlib.sha512(b'{"a":1,"b":2}').hexdigest(),
    }


@pytest.fixture
def deps(tmp_path):
    return PipelineDeps(
        address_validator=validate_hex_address,
        engine=RuleEngine.from_file(DEFAULT_RULES_PATH),
        scratch_dir=str(tmp_path / "scratch"),
    )
