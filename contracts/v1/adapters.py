"""Normalization of raw Apple Music payloads into v1 record contracts.

Every function here is pure. Each input item yields exactly one record;
missing or malformed fields degrade to sentinels instead of dropping the item.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Callable, Iterable

from pydantic import BaseModel, ValidationError

from core.domain import AggregatedResult, SessionSnapshot

from .schemas import (
    AlbumRecord,
    ArtistRecord,
    ArtworkPayload,
    FetchMetaContract,
    MusicSummaryAttributesPayload,
    MusicSummaryPayload,
    MusicSummaryResponsePayload,
    ReplaySummary,
    ResourceAttributesPayload,
    ResourceCollectionPayload,
    ResourcePayload,
    SessionSnapshotContract,
    SongRecord,
    TrackRecord,
)

UNKNOWN = "Unknown"
DEFAULT_ARTWORK_SIZE = 300

VIEW_TOP_ARTISTS = "top-artists"
VIEW_TOP_ALBUMS = "top-albums"
VIEW_TOP_SONGS = "top-songs"
SUMMARY_VIEWS = (VIEW_TOP_ARTISTS, VIEW_TOP_ALBUMS, VIEW_TOP_SONGS)


def _text(value: str | None) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return UNKNOWN


def _count(value: int | None) -> int:
    return value if isinstance(value, int) and value >= 0 else 0


def artwork_url(artwork: ArtworkPayload | None, size: int = DEFAULT_ARTWORK_SIZE) -> str:
    """Expand an artwork URL template (``.../{w}x{h}bb.jpg``) to a square size."""
    if artwork is None or not artwork.url:
        return ""
    return artwork.url.replace("{w}", str(size)).replace("{h}", str(size))


def _drop_invalid_fields(raw: dict[str, Any], error: ValidationError) -> dict[str, Any]:
    """Remove the innermost mapping key each validation error points at."""
    cleaned = deepcopy(raw)
    for err in error.errors():
        loc = err.get("loc", ())
        container = cleaned
        for depth, key in enumerate(loc):
            if not isinstance(container, dict) or key not in container:
                break
            # Lists are dropped whole; their items are not addressed one by one.
            if depth == len(loc) - 1 or not isinstance(container[key], dict):
                container.pop(key)
                break
            container = container[key]
    return cleaned


def _lenient_validate(model: type[BaseModel], raw: Any) -> Any:
    if isinstance(raw, model):
        return raw
    if not isinstance(raw, dict):
        return model()
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        try:
            return model.model_validate(_drop_invalid_fields(raw, e))
        except ValidationError:
            return model()


def parse_resource(raw: Any) -> ResourcePayload:
    """Parse one raw resource, keeping every field that is well formed."""
    return _lenient_validate(ResourcePayload, raw)


def _attributes(resource: ResourcePayload) -> ResourceAttributesPayload:
    return resource.attributes or ResourceAttributesPayload()


def _artist(rank: int, resource: ResourcePayload, artwork_size: int) -> ArtistRecord:
    attrs = _attributes(resource)
    return ArtistRecord(
        rank=rank,
        id=resource.id or "",
        name=_text(attrs.name),
        genres=list(attrs.genre_names or []),
        artwork_url=artwork_url(attrs.artwork, artwork_size),
        url=attrs.url or "",
    )


def _album(rank: int, resource: ResourcePayload, artwork_size: int) -> AlbumRecord:
    attrs = _attributes(resource)
    return AlbumRecord(
        rank=rank,
        id=resource.id or "",
        title=_text(attrs.name),
        artist_name=_text(attrs.artist_name),
        play_count=_count(attrs.play_count),
        artwork_url=artwork_url(attrs.artwork, artwork_size),
        url=attrs.url or "",
    )


def _song(rank: int, resource: ResourcePayload, artwork_size: int) -> SongRecord:
    attrs = _attributes(resource)
    return SongRecord(
        rank=rank,
        id=resource.id or "",
        title=_text(attrs.name),
        artist_name=_text(attrs.artist_name),
        album_name=_text(attrs.album_name),
        play_count=_count(attrs.play_count),
        duration_ms=_count(attrs.duration_in_millis),
        artwork_url=artwork_url(attrs.artwork, artwork_size),
        url=attrs.url or "",
    )


def _track(rank: int, resource: ResourcePayload, artwork_size: int) -> TrackRecord:
    attrs = _attributes(resource)
    return TrackRecord(
        rank=rank,
        id=resource.id or "",
        title=_text(attrs.name),
        artist_name=_text(attrs.artist_name),
        album_name=_text(attrs.album_name),
        duration_ms=_count(attrs.duration_in_millis),
        artwork_url=artwork_url(attrs.artwork, artwork_size),
        url=attrs.url or "",
    )


def _rank_all(items: Iterable[Any], build: Callable[[int, ResourcePayload, int], Any], artwork_size: int) -> list:
    return [build(i, parse_resource(raw), artwork_size) for i, raw in enumerate(items, 1)]


def normalize_top_artists(items: Iterable[Any], *, artwork_size: int = DEFAULT_ARTWORK_SIZE) -> list[ArtistRecord]:
    return _rank_all(items, _artist, artwork_size)


def normalize_top_albums(items: Iterable[Any], *, artwork_size: int = DEFAULT_ARTWORK_SIZE) -> list[AlbumRecord]:
    return _rank_all(items, _album, artwork_size)


def normalize_top_songs(items: Iterable[Any], *, artwork_size: int = DEFAULT_ARTWORK_SIZE) -> list[SongRecord]:
    return _rank_all(items, _song, artwork_size)


def normalize_recent_tracks(items: Iterable[Any], *, artwork_size: int = DEFAULT_ARTWORK_SIZE) -> list[TrackRecord]:
    """Normalize recently played tracks, keeping the API's order (newest first)."""
    return _rank_all(items, _track, artwork_size)


_VIEW_NORMALIZERS = {
    VIEW_TOP_ARTISTS: normalize_top_artists,
    VIEW_TOP_ALBUMS: normalize_top_albums,
    VIEW_TOP_SONGS: normalize_top_songs,
}


def _parse_summary_entry(raw: Any) -> MusicSummaryPayload:
    if isinstance(raw, MusicSummaryPayload):
        return raw
    if not isinstance(raw, dict):
        return MusicSummaryPayload()

    # Attributes and each view are validated on their own so that one bad
    # piece falls back to its default without touching its siblings.
    envelope = {k: v for k, v in raw.items() if k not in ("attributes", "views")}
    attributes = raw.get("attributes")
    views = raw.get("views")
    if not isinstance(views, dict):
        views = {}
    return _lenient_validate(MusicSummaryPayload, envelope).model_copy(
        update={
            "attributes": (
                None if attributes is None
                else _lenient_validate(MusicSummaryAttributesPayload, attributes)
            ),
            "views": {
                name: _lenient_validate(ResourceCollectionPayload, collection)
                for name, collection in views.items()
            },
        }
    )


def _parse_summary(raw: Any) -> MusicSummaryResponsePayload:
    if isinstance(raw, MusicSummaryResponsePayload):
        return raw
    entries = raw.get("data") if isinstance(raw, dict) else None
    if not isinstance(entries, list):
        return MusicSummaryResponsePayload()
    return MusicSummaryResponsePayload(data=[_parse_summary_entry(entry) for entry in entries])


def extract_view_items(raw_summary: Any, view: str) -> list[Any]:
    """Return the raw items of ``view`` from the first summary in the response."""
    summary = _parse_summary(raw_summary)
    if not summary.data:
        return []
    collection = summary.data[0].views.get(view)
    return list(collection.data) if collection else []


def normalize_view(raw_summary: Any, view: str, *, artwork_size: int = DEFAULT_ARTWORK_SIZE) -> list:
    """Extract and normalize one named view (e.g. ``"top-artists"``)."""
    try:
        normalizer = _VIEW_NORMALIZERS[view]
    except KeyError:
        valid = ", ".join(SUMMARY_VIEWS)
        raise ValueError(f"Unknown summary view '{view}'. Supported views: {valid}") from None
    return normalizer(extract_view_items(raw_summary, view), artwork_size=artwork_size)


def adapt_music_summary(raw_summary: Any, *, artwork_size: int = DEFAULT_ARTWORK_SIZE) -> ReplaySummary:
    """Adapt a ``/v1/me/music-summaries`` response to ``ReplaySummary``."""
    summary = _parse_summary(raw_summary)
    year = 0
    if summary.data and summary.data[0].attributes is not None:
        year = _count(summary.data[0].attributes.year)
    return ReplaySummary(
        year=year,
        top_artists=normalize_view(summary, VIEW_TOP_ARTISTS, artwork_size=artwork_size),
        top_albums=normalize_view(summary, VIEW_TOP_ALBUMS, artwork_size=artwork_size),
        top_songs=normalize_view(summary, VIEW_TOP_SONGS, artwork_size=artwork_size),
    )


def aggregation_meta(
    result: AggregatedResult,
    *,
    timings: dict[str, float] | None = None,
) -> FetchMetaContract:
    return FetchMetaContract(
        requests_made=result.requests_made,
        truncated=result.truncated,
        cancelled=result.cancelled,
        timings=timings,
    )


def snapshot_to_contract(snapshot: SessionSnapshot, *, phase: str | None = None) -> SessionSnapshotContract:
    """Convert a session snapshot to its public, credential-free contract."""
    return SessionSnapshotContract(phase=phase, **snapshot.to_dict())
