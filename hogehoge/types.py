"""Shared data types exchanged between the host and its plugins.

Values travel as MessagePack: structs as arrays in field order, single-field
wrappers as their inner value, UUIDs as 16 raw bytes and enums as a
one-entry map from variant name to payload.
"""

from __future__ import annotations

import enum
import uuid as _uuid
from dataclasses import dataclass, field, fields
from typing import Any, TypeVar

import msgpack

T = TypeVar("T")


def _uuid_from_wire(raw: Any) -> _uuid.UUID:
    if isinstance(raw, (bytes, bytearray)):
        return _uuid.UUID(bytes=bytes(raw))
    if isinstance(raw, str):
        return _uuid.UUID(raw)
    raise ValueError(f"invalid uuid value: {raw!r}")


@dataclass(frozen=True)
class PluginId:
    value: int

    def _to_wire(self) -> int:
        return self.value

    @classmethod
    def _from_wire(cls, raw: Any) -> PluginId:
        return cls(int(raw))


@dataclass(frozen=True)
class PluginTrackIdentifier:
    value: str

    def _to_wire(self) -> str:
        return self.value

    @classmethod
    def _from_wire(cls, raw: Any) -> PluginTrackIdentifier:
        return cls(str(raw))


@dataclass
class FsMount:
    internal_path: str
    description: str

    def _to_wire(self) -> list:
        return [self.internal_path, self.description]

    @classmethod
    def _from_wire(cls, raw: Any) -> FsMount:
        internal_path, description = raw
        return cls(internal_path, description)


@dataclass
class PluginMetadata:
    name: str
    uuid: _uuid.UUID
    description: str | None = None
    author: str | None = None
    fs_mounts: list[FsMount] = field(default_factory=list)
    allow_concurrency: bool = False

    def _to_wire(self) -> list:
        return [
            self.name,
            self.uuid.bytes,
            self.description,
            self.author,
            [mount._to_wire() for mount in self.fs_mounts],
            self.allow_concurrency,
        ]

    @classmethod
    def _from_wire(cls, raw: Any) -> PluginMetadata:
        name, uid, description, author, mounts, allow = raw
        return cls(
            name=name,
            uuid=_uuid_from_wire(uid),
            description=description,
            author=author,
            fs_mounts=[FsMount._from_wire(m) for m in mounts],
            allow_concurrency=bool(allow),
        )


@dataclass
class PreparedScan:
    tracks: list[PluginTrackIdentifier] = field(default_factory=list)

    def _to_wire(self) -> list:
        return [[track._to_wire() for track in self.tracks]]

    @classmethod
    def _from_wire(cls, raw: Any) -> PreparedScan:
        (tracks,) = raw
        return cls([PluginTrackIdentifier._from_wire(t) for t in tracks])


class ScanKind(enum.Enum):
    PATH = "Path"
    FILE = "File"


@dataclass
class ScanResult:
    kind: ScanKind
    value: str | bytes

    def _to_wire(self) -> dict:
        return {self.kind.value: self.value}

    @classmethod
    def _from_wire(cls, raw: Any) -> ScanResult:
        if not isinstance(raw, dict) or len(raw) != 1:
            raise ValueError(f"invalid scan result: {raw!r}")
        (name, value), = raw.items()
        kind = ScanKind(name)
        if kind is ScanKind.PATH:
            return cls(kind, str(value))
        return cls(kind, bytes(value))


@dataclass(frozen=True)
class ArtistId:
    value: int

    def _to_wire(self) -> int:
        return self.value

    @classmethod
    def _from_wire(cls, raw: Any) -> ArtistId:
        return cls(int(raw))


@dataclass
class Artist:
    id: ArtistId
    mbid: str | None
    name: str

    def _to_wire(self) -> list:
        return [self.id.value, self.mbid, self.name]

    @classmethod
    def _from_wire(cls, raw: Any) -> Artist:
        artist_id, mbid, name = raw
        return cls(ArtistId(artist_id), mbid, name)


@dataclass(frozen=True)
class AlbumId:
    value: int

    def _to_wire(self) -> int:
        return self.value

    @classmethod
    def _from_wire(cls, raw: Any) -> AlbumId:
        return cls(int(raw))


@dataclass
class Album:
    id: AlbumId
    mbid: str | None
    title: str
    artist_id: ArtistId | None = None

    def _to_wire(self) -> list:
        artist = None if self.artist_id is None else self.artist_id.value
        return [self.id.value, self.mbid, self.title, artist]

    @classmethod
    def _from_wire(cls, raw: Any) -> Album:
        album_id, mbid, title, artist = raw
        return cls(
            AlbumId(album_id),
            mbid,
            title,
            None if artist is None else ArtistId(artist),
        )


@dataclass(frozen=True)
class TrackId:
    value: int

    def _to_wire(self) -> int:
        return self.value

    @classmethod
    def _from_wire(cls, raw: Any) -> TrackId:
        return cls(int(raw))


@dataclass(frozen=True)
class TrackGroupId:
    value: int

    def _to_wire(self) -> int:
        return self.value

    @classmethod
    def _from_wire(cls, raw: Any) -> TrackGroupId:
        return cls(int(raw))


@dataclass
class Track:
    id: TrackId
    track_group_id: TrackGroupId
    plugin_id: PluginId
    plugin_data: PluginTrackIdentifier

    artist_id: int | None = None
    album_id: int | None = None

    # general
    title: str | None = None
    mb_work_id: str | None = None
    mb_track_id: str | None = None
    mb_recording_id: str | None = None
    subtitle: str | None = None
    title_sort_order: str | None = None
    comment: str | None = None
    description: str | None = None
    language: str | None = None
    script: str | None = None
    lyrics: str | None = None

    # album
    album_title: str | None = None
    set_subtitle: str | None = None
    mb_release_id: str | None = None
    original_album_title: str | None = None
    album_title_sort_order: str | None = None
    album_artist: str | None = None
    mb_release_artist_id: str | None = None
    album_artist_sort_order: str | None = None
    content_group: str | None = None
    mb_release_group_id: str | None = None

    # artist
    artist: str | None = None
    artists: str | None = None
    mb_artist_id: str | None = None
    original_artist: str | None = None
    artist_sort_order: str | None = None

    # show
    show_name: str | None = None
    show_name_sort_order: str | None = None

    # style
    genre: str | None = None
    initial_key: str | None = None
    color: str | None = None
    mood: str | None = None
    bpm: float | None = None

    # urls
    audio_file_url: str | None = None
    audio_source_url: str | None = None
    commercial_information_url: str | None = None
    copyright_url: str | None = None
    track_artist_url: str | None = None
    radio_station_url: str | None = None
    payment_url: str | None = None
    publisher_url: str | None = None

    # numbering
    disc_number: str | None = None
    disc_total: str | None = None
    track_number: str | None = None
    track_total: str | None = None
    movement: str | None = None
    movement_number: str | None = None
    movement_total: str | None = None

    # dates
    year: str | None = None
    recording_date: str | None = None
    release_date: str | None = None
    original_release_date: str | None = None

    # file
    file_type: str | None = None
    file_owner: str | None = None
    tagging_time: str | None = None
    length: str | None = None
    original_file_name: str | None = None
    original_media_type: str | None = None

    # encoding
    encoded_by: str | None = None
    encoder_software: str | None = None
    encoding_settings: str | None = None
    encoding_time: str | None = None

    # replaygain
    replaygain_album_gain: str | None = None
    replaygain_album_peak: str | None = None
    replaygain_track_gain: str | None = None
    replaygain_track_peak: str | None = None

    # identification
    irsc: str | None = None
    barcode: str | None = None
    catalog_number: str | None = None

    # flags
    flag_compilation: str | None = None
    flag_podcast: str | None = None

    # legal
    copyright_message: str | None = None
    license: str | None = None

    # misc
    popularimeter: str | None = None
    parental_advisory: str | None = None

    # people
    arranger: str | None = None
    writer: str | None = None
    composer: str | None = None
    composer_sort_order: str | None = None
    conductor: str | None = None
    director: str | None = None
    engineer: str | None = None
    lyricist: str | None = None
    original_lyricist: str | None = None
    mix_dj: str | None = None
    mix_engineer: str | None = None
    musician_credits: str | None = None
    performer: str | None = None
    producer: str | None = None
    publisher: str | None = None
    label: str | None = None
    internet_radio_station_name: str | None = None
    internet_radio_station_owner: str | None = None
    remixer: str | None = None

    _WRAPPED = {
        "id": TrackId,
        "track_group_id": TrackGroupId,
        "plugin_id": PluginId,
        "plugin_data": PluginTrackIdentifier,
    }

    def _to_wire(self) -> list:
        out = []
        for f in fields(self):
            value = getattr(self, f.name)
            out.append(value._to_wire() if f.name in self._WRAPPED else value)
        return out

    @classmethod
    def _from_wire(cls, raw: Any) -> Track:
        names = [f.name for f in fields(cls)]
        if len(raw) != len(names):
            raise ValueError(f"expected {len(names)} track fields, got {len(raw)}")
        kwargs = dict(zip(names, raw))
        for name, wrapper in cls._WRAPPED.items():
            kwargs[name] = wrapper._from_wire(kwargs[name])
        return cls(**kwargs)


def to_msgpack(value: Any) -> bytes:
    """Encode one of this module's types as MessagePack bytes."""
    try:
        wire = value._to_wire()
    except AttributeError:
        raise TypeError(f"cannot encode {type(value).__name__}") from None
    return msgpack.packb(wire, use_bin_type=True)


def from_msgpack(kind: type[T], data: bytes) -> T:
    """Decode MessagePack bytes into an instance of ``kind``."""
    try:
        raw = msgpack.unpackb(data, raw=False)
    except (msgpack.ExtraData, msgpack.FormatError, msgpack.StackError, ValueError) as exc:
        raise ValueError(f"invalid msgpack data: {exc}") from exc
    try:
        return kind._from_wire(raw)  # type: ignore[attr-defined]
    except (TypeError, KeyError) as exc:
        raise ValueError(f"cannot decode {kind.__name__}: {exc}") from exc