"""Pydantic contracts for Apple Music payloads and the replay surface."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class _PayloadModel(BaseModel):
    """Base model for upstream payloads: every field optional, extras ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# --- Upstream Apple Music payloads ---

class ArtworkPayload(_PayloadModel):
    url: str | None = None
    width: int | None = None
    height: int | None = None


class ResourceAttributesPayload(_PayloadModel):
    name: str | None = None
    artist_name: str | None = Field(default=None, alias="artistName")
    album_name: str | None = Field(default=None, alias="albumName")
    duration_in_millis: int | None = Field(default=None, alias="durationInMillis")
    play_count: int | None = Field(default=None, alias="playCount")
    genre_names: list[str] | None = Field(default=None, alias="genreNames")
    release_date: str | None = Field(default=None, alias="releaseDate")
    url: str | None = None
    artwork: ArtworkPayload | None = None


class ResourcePayload(_PayloadModel):
    id: str | None = None
    type: str | None = None
    href: str | None = None
    attributes: ResourceAttributesPayload | None = None


class ResourceCollectionPayload(_PayloadModel):
    data: list[Any] = Field(default_factory=list)
    next: str | None = None


class MusicSummaryAttributesPayload(_PayloadModel):
    year: int | None = None


class MusicSummaryPayload(_PayloadModel):
    id: str | None = None
    type: str | None = None
    attributes: MusicSummaryAttributesPayload | None = None
    views: dict[str, ResourceCollectionPayload] = Field(default_factory=dict)


class MusicSummaryResponsePayload(_PayloadModel):
    data: list[MusicSummaryPayload] = Field(default_factory=list)


# --- Normalized records ---

class _RecordBase(_StrictModel):
    rank: int = Field(ge=1)
    id: str = ""
    artwork_url: str = ""
    url: str = ""


class ArtistRecord(_RecordBase):
    name: str
    genres: list[str] = Field(default_factory=list)


class AlbumRecord(_RecordBase):
    title: str
    artist_name: str
    play_count: int = 0


class SongRecord(_RecordBase):
    title: str
    artist_name: str
    album_name: str
    play_count: int = 0
    duration_ms: int = 0


class TrackRecord(_RecordBase):
    title: str
    artist_name: str
    album_name: str
    duration_ms: int = 0


class ReplaySummary(_StrictModel):
    year: int = 0
    top_artists: list[ArtistRecord] = Field(default_factory=list)
    top_albums: list[AlbumRecord] = Field(default_factory=list)
    top_songs: list[SongRecord] = Field(default_factory=list)


class FetchMetaContract(_StrictModel):
    requests_made: int = 0
    truncated: bool = False
    cancelled: bool = False
    timings: dict[str, float] | None = None


class RecentTracksResponse(_StrictModel):
    tracks: list[TrackRecord]
    meta: FetchMetaContract


class ReplayDataResponse(_StrictModel):
    summary: ReplaySummary
    recent_tracks: list[TrackRecord]
    meta: FetchMetaContract


# --- Surface ---

class SessionSnapshotContract(_StrictModel):
    sdk_ready: bool
    configured: bool
    authorized: bool
    has_developer_token: bool
    has_music_user_token: bool
    phase: str | None = None


class ErrorContract(_StrictModel):
    message: str
    category: str


class OperationResult(_StrictModel):
    ok: bool
    session: SessionSnapshotContract
    resolution: Literal["direct", "recovered_via_side_channel", "failed"] | None = None
    error: ErrorContract | None = None
