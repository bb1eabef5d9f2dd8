import pytest

from pagecache.config import Settings, settings
from pagecache.core.cache.memory_backend import MemoryCacheBackend
from pagecache.core.cache.noop_backend import NoOpCacheBackend
from pagecache.core.cache.provider import create_cache
from pagecache.core.swr.types import InfiniteConfig
from pagecache.errors import KeySerializationError


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAGECACHE_INFINITE_INITIAL_SIZE", "4")
    monkeypatch.setenv("PAGECACHE_CACHE_DEFAULT_TTL_SECONDS", "30")

    loaded = Settings()

    assert loaded.infinite_initial_size == 4
    assert loaded.cache_default_ttl_seconds == 30


def test_infinite_config_defaults_come_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "infinite_initial_size", 3)
    monkeypatch.setattr(settings, "infinite_persist_size", True)

    config = InfiniteConfig()

    assert config.initial_size == 3
    assert config.persist_size is True
    assert config.revalidate_all is False


def test_infinite_config_rejects_negative_initial_size() -> None:
    with pytest.raises(ValueError):
        InfiniteConfig(initial_size=-1)


def test_disabled_cache_uses_noop_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "cache_enabled", False)
    assert isinstance(create_cache("off").backend, NoOpCacheBackend)

    monkeypatch.setattr(settings, "cache_enabled", True)
    assert isinstance(create_cache("on").backend, MemoryCacheBackend)


def test_error_payload_carries_code() -> None:
    error = KeySerializationError("bad key")
    assert error.to_payload() == {"detail": "bad key", "code": "key_serialization_failed"}
