from .client import SWRClient, get_client, reset_client
from .infinite import InfiniteSequence, use_infinite
from .policy import should_revalidate_page
from .types import UNSET, Fetcher, InfiniteConfig, KeyLoader, RevalidationContext

__all__ = [
    "UNSET",
    "Fetcher",
    "InfiniteConfig",
    "InfiniteSequence",
    "KeyLoader",
    "RevalidationContext",
    "SWRClient",
    "get_client",
    "reset_client",
    "should_revalidate_page",
    "use_infinite",
]
