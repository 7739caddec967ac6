"""v1 contract schemas and payload normalizers."""

__version__ = "1.0.0"

from .adapters import (
    SUMMARY_VIEWS,
    UNKNOWN,
    adapt_music_summary,
    aggregation_meta,
    artwork_url,
    extract_view_items,
    normalize_recent_tracks,
    normalize_top_albums,
    normalize_top_artists,
    normalize_top_songs,
    normalize_view,
    parse_resource,
    snapshot_to_contract,
)
from .schemas import (
    AlbumRecord,
    ArtistRecord,
    ErrorContract,
    FetchMetaContract,
    MusicSummaryResponsePayload,
    OperationResult,
    RecentTracksResponse,
    ReplayDataResponse,
    ReplaySummary,
    ResourcePayload,
    SessionSnapshotContract,
    SongRecord,
    TrackRecord,
)

__all__ = [
    "__version__",
    "SUMMARY_VIEWS",
    "UNKNOWN",
    "AlbumRecord",
    "ArtistRecord",
    "ErrorContract",
    "FetchMetaContract",
    "MusicSummaryResponsePayload",
    "OperationResult",
    "RecentTracksResponse",
    "ReplayDataResponse",
    "ReplaySummary",
    "ResourcePayload",
    "SessionSnapshotContract",
    "SongRecord",
    "TrackRecord",
    "adapt_music_summary",
    "aggregation_meta",
    "artwork_url",
    "extract_view_items",
    "normalize_recent_tracks",
    "normalize_top_albums",
    "normalize_top_artists",
    "normalize_top_songs",
    "normalize_view",
    "parse_resource",
    "snapshot_to_contract",
]
