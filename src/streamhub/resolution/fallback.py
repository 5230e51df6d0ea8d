"""Static fallback streams served when no provider has anything."""

from __future__ import annotations

from streamhub.core.identifiers import ContentKey
from streamhub.core.models import StreamDescriptor

SAMPLE_MP4_URL = "https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/BigBuckBunny.mp4"
SAMPLE_HLS_URL = "https://test-streams.mux.dev/x36xhzz/x36xhzz.m3u8"

# Keyed by content id regardless of type
DEMO_STREAMS: dict[str, tuple[StreamDescriptor, ...]] = {
    "streamhub:sample-movie": (
        StreamDescriptor(title="Streamhub Sample (MP4)", url=SAMPLE_MP4_URL),
    ),
    "streamhub:sample-hls": (
        StreamDescriptor(title="Streamhub Sample (HLS)", url=SAMPLE_HLS_URL),
    ),
}

GENERIC_FALLBACK: tuple[StreamDescriptor, ...] = (
    StreamDescriptor(title="Streamhub Sample (HLS)", url=SAMPLE_HLS_URL),
)


def is_demo_key(key: ContentKey) -> bool:
    return key.id in DEMO_STREAMS


def fallback_streams(key: ContentKey, generic_enabled: bool = True) -> list[StreamDescriptor]:
    """Demo set for a known demo id, else the generic fallback (or nothing)."""
    if key.id in DEMO_STREAMS:
        return list(DEMO_STREAMS[key.id])
    if generic_enabled:
        return list(GENERIC_FALLBACK)
    return []
