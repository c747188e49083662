"""Caches for upstream feeds."""

from tcdd_routes.adapters.cache.feed_cache import FeedCache

__all__ = ["FeedCache"]
