from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any, TypeAlias

from pagecache.errors import KeySerializationError

SerializedKey: TypeAlias = tuple[str | None, tuple[Any, ...] | None]

_NO_KEY: SerializedKey = (None, None)


def canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def hash_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def hash_text(text: str) -> str:
    return hash_bytes(text.encode("utf-8"))


def short_hash(text: str) -> str:
    """Log-safe label for a key; never log the key itself."""
    return hash_text(text)[:12]


def serialize_key(descriptor: Any) -> SerializedKey:
    """Turn a page key descriptor into ``(key, args)``.

    ``key`` is ``None`` when the descriptor means "no page here". ``args`` is
    the positional argument tuple for the fetcher, or ``None`` when the
    fetcher should receive the key itself.
    """
    if callable(descriptor):
        try:
            descriptor = descriptor()
        except Exception:
            # Dependent key is not ready yet.
            return _NO_KEY

    if not descriptor:
        return _NO_KEY

    if isinstance(descriptor, str):
        return descriptor, None

    if isinstance(descriptor, (list, tuple)):
        args = tuple(descriptor)
        return "arg@" + _encode(list(args)), args

    if isinstance(descriptor, Mapping):
        return "obj@" + _encode(dict(descriptor)), (descriptor,)

    return str(descriptor), None


def _encode(value: Any) -> str:
    try:
        return canonical_json(value)
    except (TypeError, ValueError) as exc:
        raise KeySerializationError(
            f"cannot serialize page key of type {type(value).__name__}: {exc}"
        ) from exc
