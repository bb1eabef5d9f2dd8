from pagecache.core.cache.types import MISSING
from pagecache.core.swr.policy import should_revalidate_page
from pagecache.core.swr.types import RevalidationContext


def test_plain_refresh_only_refetches_first_page() -> None:
    assert should_revalidate_page(0, "A", None) is True
    assert should_revalidate_page(1, "B", None) is False
    assert should_revalidate_page(2, "C", None) is False


def test_uncached_page_is_always_fetched() -> None:
    assert should_revalidate_page(3, MISSING, None) is True
    assert should_revalidate_page(3, MISSING, RevalidationContext.diff_against(["A"])) is True


def test_none_is_a_cached_value() -> None:
    assert should_revalidate_page(1, None, None) is False


def test_forced_context_refetches_everything() -> None:
    context = RevalidationContext.forced()
    assert all(should_revalidate_page(i, "x", context) for i in range(4))


def test_revalidate_all_overrides_everything() -> None:
    context = RevalidationContext.diff_against(["A", "B"])
    assert should_revalidate_page(1, "B", context, revalidate_all=True) is True


def test_snapshot_context_refetches_only_changed_pages() -> None:
    context = RevalidationContext.diff_against(["A", "B-edited", "C"])

    assert should_revalidate_page(0, "A", context) is False
    assert should_revalidate_page(1, "B", context) is True
    assert should_revalidate_page(2, "C", context) is False


def test_page_beyond_snapshot_is_refetched() -> None:
    context = RevalidationContext.diff_against(["A"])
    assert should_revalidate_page(1, "B", context) is True


def test_custom_comparator_is_used() -> None:
    context = RevalidationContext.diff_against([{"id": 1, "etag": "x"}])

    def same_id(a, b) -> bool:
        return a["id"] == b["id"]

    cached = {"id": 1, "etag": "y"}
    assert should_revalidate_page(0, cached, context) is True
    assert should_revalidate_page(0, cached, context, compare=same_id) is False


def test_context_without_snapshot_reuses_cached_pages() -> None:
    context = RevalidationContext.diff_against(None)
    assert should_revalidate_page(0, "A", context) is False
    assert should_revalidate_page(1, MISSING, context) is True


def test_comparator_never_sees_missing_pages() -> None:
    context = RevalidationContext.diff_against([{"id": 1}, {"id": 2}])
    compared: list[tuple] = []

    def by_id(a, b) -> bool:
        compared.append((a, b))
        return a["id"] == b["id"]

    assert should_revalidate_page(1, MISSING, context, compare=by_id) is True
    assert should_revalidate_page(2, {"id": 3}, context, compare=by_id) is True
    assert compared == []
