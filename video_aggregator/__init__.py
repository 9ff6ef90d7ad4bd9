"""Video Search Aggregator - concurrent multi-site video search scraping."""

__version__ = "0.1.0"

from .adapters import SiteAdapter, SiteConfig
from .aggregator import AggregateResult, Aggregator, aggregate
from .dedup import canonicalize_title, canonicalize_url, dedup, title_similarity
from .models import AdapterFailure, AdapterSuccess, VideoRecord
from .relevance import is_relevant

__all__ = [
    "SiteAdapter",
    "SiteConfig",
    "AggregateResult",
    "Aggregator",
    "aggregate",
    "canonicalize_title",
    "canonicalize_url",
    "dedup",
    "title_similarity",
    "AdapterFailure",
    "AdapterSuccess",
    "VideoRecord",
    "is_relevant",
]
