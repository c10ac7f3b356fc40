import hashlib
import math

import pytest

from . import canonical


def test_keys_sorted_regardless_of_insertion_order():
    first = {"b": 2, "a": 1, "nested": {"z": [1, {"y": 1, "x": 2}], "m": None}}
    second = {"nested": {"m": None, "z": [1, {"x": 2, "y": 1}]}, "a": 1, "b": 2}

    assert canonical.encode(first) == canonical.encode(second)
    assert canonical.dumps(first) == '{"a":1,"b":2,"nested":{"m":null,"z":[1,{"x":2,"y":1}]}}'


def test_array_order_is_preserved():
    assert canonical.dumps([3, 1, 2]) == "[3,1,2]"


def test_indented_form_keeps_sorted_order():
    assert canonical.dumps({"b": 2, "a": 1}, indent=2) == '{\n  "a": 1,\n  "b": 2\n}'


def test_integral_floats_written_like_integers():
    assert canonical.dumps({"x": 1.0, "y": 1.5, "z": True}) == '{"x":1,"y":1.5,"z":true}'


def test_non_ascii_kept_as_utf8():
    assert canonical.encode({"name": "café"}) == '{"name":"café"}'.encode("utf-8")


def test_digest_is_sha512_of_compact_form():
    expected = hashlib.sha512(b'{"a":1,"b":2}').hexdigest()
    assert canonical.digest({"b": 2, "a": 1}) == expected
    assert len(expected) == 128


def test_nan_rejected():
    with pytest.raises(ValueError):
        canonical.encode({"x": math.nan})


def test_lone_surrogate_escaped():
    assert canonical.encode({"name": "\ud800x"}) == b'{"name":"\\ud800x"}'
    assert canonical.dumps(["\udfff"], indent=2) == '[\n  "\\udfff"\n]'
