import pytest

from pagecache.core.cache.keys import (
    canonical_json,
    hash_bytes,
    hash_text,
    serialize_key,
    short_hash,
)
from pagecache.errors import KeySerializationError


def test_canonical_json_is_stable() -> None:
    a = {"b": 2, "a": 1}
    b = {"a": 1, "b": 2}
    assert canonical_json(a) == canonical_json(b)


def test_hash_helpers_are_consistent() -> None:
    assert hash_text("hello") == hash_bytes(b"hello")
    assert short_hash("hello") == hash_text("hello")[:12]


def test_string_descriptor_is_its_own_key() -> None:
    assert serialize_key("/items?page=1") == ("/items?page=1", None)


def test_sequence_descriptor_becomes_positional_args() -> None:
    key, args = serialize_key(("/users", 2, {"limit": 10}))
    assert args == ("/users", 2, {"limit": 10})
    assert key is not None and key.startswith("arg@")


def test_equal_sequences_share_a_key() -> None:
    assert serialize_key(["/users", 1])[0] == serialize_key(("/users", 1))[0]
    assert serialize_key(["/users", 1])[0] != serialize_key(["/users", 2])[0]


def test_mapping_descriptor_is_order_insensitive() -> None:
    key_a, args_a = serialize_key({"page": 1, "q": "x"})
    key_b, _ = serialize_key({"q": "x", "page": 1})
    assert key_a == key_b
    assert key_a.startswith("obj@")
    assert args_a == ({"page": 1, "q": "x"},)


@pytest.mark.parametrize("descriptor", [None, False, "", 0, (), []])
def test_falsy_descriptor_means_no_page(descriptor) -> None:
    assert serialize_key(descriptor) == (None, None)


def test_callable_descriptor_is_resolved() -> None:
    assert serialize_key(lambda: "/items") == ("/items", None)


def test_callable_descriptor_that_raises_is_not_ready() -> None:
    def not_ready() -> str:
        raise LookupError("parent page not loaded")

    assert serialize_key(not_ready) == (None, None)


def test_unserializable_args_raise() -> None:
    with pytest.raises(KeySerializationError) as excinfo:
        serialize_key(("/items", object()))
    assert excinfo.value.code == "key_serialization_failed"
