"""Per-page revalidation decision."""

from __future__ import annotations

import operator
from typing import Any

from pagecache.core.cache.types import MISSING

from .types import Comparator, RevalidationContext


def should_revalidate_page(
    index: int,
    cached: Any,
    context: RevalidationContext | None,
    *,
    revalidate_all: bool = False,
    compare: Comparator = operator.eq,
) -> bool:
    """Decide whether page ``index`` must be refetched.

    A page is refetched when any of these hold, checked in order:

    - every page is configured to revalidate;
    - the pending context forces a full refresh;
    - there is no pending context and this is the first page (a plain
      refresh always re-reads page 0, e.g. on regained focus);
    - the context carries a data snapshot and the cached page no longer
      compares equal to the snapshot's page at this index;
    - nothing is cached for the page.

    Reads only; never writes cache or context state. ``compare`` is only
    called with two real page values, never with ``MISSING``.
    """
    if revalidate_all:
        return True
    if context is None:
        return index == 0 or cached is MISSING
    if context.force or cached is MISSING:
        return True
    original = context.original_data
    if original is None:
        return False
    if index >= len(original):
        # Page was not part of the snapshot.
        return True
    return not compare(original[index], cached)
