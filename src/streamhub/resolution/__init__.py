"""Provider registry, fan-out aggregation and fallback streams."""

from .aggregator import AggregationResult, FanOutAggregator, ProviderResult
from .fallback import DEMO_STREAMS, GENERIC_FALLBACK, fallback_streams, is_demo_key
from .provider import ProviderClient
from .registry import ProviderRegistry, normalize_manifest_url

__all__ = [
    # Aggregation
    "AggregationResult",
    "FanOutAggregator",
    "ProviderClient",
    "ProviderResult",
    # Registry
    "ProviderRegistry",
    "normalize_manifest_url",
    # Fallback
    "DEMO_STREAMS",
    "GENERIC_FALLBACK",
    "fallback_streams",
    "is_demo_key",
]
