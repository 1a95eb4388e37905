"""Track records built from audio file tags and stored in SQLite."""

from __future__ import annotations

import enum
import logging
import os
import sqlite3
from dataclasses import dataclass, fields
from typing import Iterable, Union

log = logging.getLogger(__name__)

TABLE = "tracks"


class ItemKey(enum.Enum):
    """Known tag item keys."""

    TRACK_TITLE = "TrackTitle"
    MUSIC_BRAINZ_WORK_ID = "MusicBrainzWorkId"
    MUSIC_BRAINZ_TRACK_ID = "MusicBrainzTrackId"
    MUSIC_BRAINZ_RECORDING_ID = "MusicBrainzRecordingId"
    TRACK_SUBTITLE = "TrackSubtitle"
    TRACK_TITLE_SORT_ORDER = "TrackTitleSortOrder"
    COMMENT = "Comment"
    DESCRIPTION = "Description"
    LANGUAGE = "Language"
    SCRIPT = "Script"
    LYRICS = "Lyrics"
    ALBUM_TITLE = "AlbumTitle"
    SET_SUBTITLE = "SetSubtitle"
    MUSIC_BRAINZ_RELEASE_ID = "MusicBrainzReleaseId"
    ORIGINAL_ALBUM_TITLE = "OriginalAlbumTitle"
    ALBUM_TITLE_SORT_ORDER = "AlbumTitleSortOrder"
    ALBUM_ARTIST = "AlbumArtist"
    MUSIC_BRAINZ_RELEASE_ARTIST_ID = "MusicBrainzReleaseArtistId"
    ALBUM_ARTIST_SORT_ORDER = "AlbumArtistSortOrder"
    CONTENT_GROUP = "ContentGroup"
    MUSIC_BRAINZ_RELEASE_GROUP_ID = "MusicBrainzReleaseGroupId"
    TRACK_ARTIST = "TrackArtist"
    TRACK_ARTISTS = "TrackArtists"
    MUSIC_BRAINZ_ARTIST_ID = "MusicBrainzArtistId"
    ORIGINAL_ARTIST = "OriginalArtist"
    TRACK_ARTIST_SORT_ORDER = "TrackArtistSortOrder"
    SHOW_NAME = "ShowName"
    SHOW_NAME_SORT_ORDER = "ShowNameSortOrder"
    GENRE = "Genre"
    INITIAL_KEY = "InitialKey"
    COLOR = "Color"
    MOOD = "Mood"
    BPM = "Bpm"
    INTEGER_BPM = "IntegerBpm"
    AUDIO_FILE_URL = "AudioFileUrl"
    AUDIO_SOURCE_URL = "AudioSourceUrl"
    COMMERCIAL_INFORMATION_URL = "CommercialInformationUrl"
    COPYRIGHT_URL = "CopyrightUrl"
    TRACK_ARTIST_URL = "TrackArtistUrl"
    RADIO_STATION_URL = "RadioStationUrl"
    PAYMENT_URL = "PaymentUrl"
    PUBLISHER_URL = "PublisherUrl"
    DISC_NUMBER = "DiscNumber"
    DISC_TOTAL = "DiscTotal"
    TRACK_NUMBER = "TrackNumber"
    TRACK_TOTAL = "TrackTotal"
    MOVEMENT = "Movement"
    MOVEMENT_NUMBER = "MovementNumber"
    MOVEMENT_TOTAL = "MovementTotal"
    YEAR = "Year"
    RECORDING_DATE = "RecordingDate"
    RELEASE_DATE = "ReleaseDate"
    ORIGINAL_RELEASE_DATE = "OriginalReleaseDate"
    FILE_TYPE = "FileType"
    FILE_OWNER = "FileOwner"
    TAGGING_TIME = "TaggingTime"
    LENGTH = "Length"
    ORIGINAL_FILE_NAME = "OriginalFileName"
    ORIGINAL_MEDIA_TYPE = "OriginalMediaType"
    ENCODED_BY = "EncodedBy"
    ENCODER_SOFTWARE = "EncoderSoftware"
    ENCODER_SETTINGS = "EncoderSettings"
    ENCODING_TIME = "EncodingTime"
    REPLAY_GAIN_ALBUM_GAIN = "ReplayGainAlbumGain"
    REPLAY_GAIN_ALBUM_PEAK = "ReplayGainAlbumPeak"
    REPLAY_GAIN_TRACK_GAIN = "ReplayGainTrackGain"
    REPLAY_GAIN_TRACK_PEAK = "ReplayGainTrackPeak"
    ISRC = "Isrc"
    BARCODE = "Barcode"
    CATALOG_NUMBER = "CatalogNumber"
    FLAG_COMPILATION = "FlagCompilation"
    FLAG_PODCAST = "FlagPodcast"
    COPYRIGHT_MESSAGE = "CopyrightMessage"
    LICENSE = "License"
    POPULARIMETER = "Popularimeter"
    PARENTAL_ADVISORY = "ParentalAdvisory"
    ARRANGER = "Arranger"
    WRITER = "Writer"
    COMPOSER = "Composer"
    COMPOSER_SORT_ORDER = "ComposerSortOrder"
    CONDUCTOR = "Conductor"
    DIRECTOR = "Director"
    ENGINEER = "Engineer"
    LYRICIST = "Lyricist"
    ORIGINAL_LYRICIST = "OriginalLyricist"
    MIX_DJ = "MixDj"
    MIX_ENGINEER = "MixEngineer"
    MUSICIAN_CREDITS = "MusicianCredits"
    PERFORMER = "Performer"
    PRODUCER = "Producer"
    PUBLISHER = "Publisher"
    LABEL = "Label"
    INTERNET_RADIO_STATION_NAME = "InternetRadioStationName"
    INTERNET_RADIO_STATION_OWNER = "InternetRadioStationOwner"
    REMIXER = "Remixer"
    # Keys that have no column of their own.
    WORK = "Work"
    APPLE_XID = "AppleXid"
    APPLE_ID3V2_CONTENT_GROUP = "AppleId3v2ContentGroup"
    PODCAST_DESCRIPTION = "PodcastDescription"
    PODCAST_SERIES_CATEGORY = "PodcastSeriesCategory"
    PODCAST_URL = "PodcastUrl"
    PODCAST_GLOBAL_UNIQUE_ID = "PodcastGlobalUniqueId"
    PODCAST_KEYWORDS = "PodcastKeywords"


class ItemValueKind(enum.Enum):
    TEXT = "Text"
    LOCATOR = "Locator"
    BINARY = "Binary"


@dataclass(frozen=True)
class TagItem:
    """One tag entry; a ``str`` key stands for a key with no known meaning."""

    key: Union[ItemKey, str]
    value: Union[str, bytes]
    kind: ItemValueKind = ItemValueKind.TEXT


_K = ItemKey
_FIELD_FOR_KEY: dict[ItemKey, str] = {
    _K.TRACK_TITLE: "title",
    _K.MUSIC_BRAINZ_WORK_ID: "mb_work_id",
    _K.MUSIC_BRAINZ_TRACK_ID: "mb_track_id",
    _K.MUSIC_BRAINZ_RECORDING_ID: "mb_recording_id",
    _K.TRACK_SUBTITLE: "subtitle",
    _K.TRACK_TITLE_SORT_ORDER: "title_sort_order",
    _K.COMMENT: "comment",
    _K.DESCRIPTION: "description",
    _K.LANGUAGE: "language",
    _K.SCRIPT: "script",
    _K.LYRICS: "lyrics",
    _K.ALBUM_TITLE: "album_title",
    _K.SET_SUBTITLE: "set_subtitle",
    _K.MUSIC_BRAINZ_RELEASE_ID: "mb_release_id",
    _K.ORIGINAL_ALBUM_TITLE: "original_album_title",
    _K.ALBUM_TITLE_SORT_ORDER: "album_title_sort_order",
    _K.ALBUM_ARTIST: "album_artist",
    _K.MUSIC_BRAINZ_RELEASE_ARTIST_ID: "mb_release_artist_id",
    _K.ALBUM_ARTIST_SORT_ORDER: "album_artist_sort_order",
    _K.CONTENT_GROUP: "content_group",
    _K.MUSIC_BRAINZ_RELEASE_GROUP_ID: "mb_release_group_id",
    _K.TRACK_ARTIST: "artist",
    _K.TRACK_ARTISTS: "artists",
    _K.MUSIC_BRAINZ_ARTIST_ID: "mb_artist_id",
    _K.ORIGINAL_ARTIST: "original_artist",
    _K.TRACK_ARTIST_SORT_ORDER: "artist_sort_order",
    _K.SHOW_NAME: "show_name",
    _K.SHOW_NAME_SORT_ORDER: "show_name_sort_order",
    _K.GENRE: "genre",
    _K.INITIAL_KEY: "initial_key",
    _K.COLOR: "color",
    _K.MOOD: "mood",
    _K.BPM: "bpm",
    _K.INTEGER_BPM: "bpm",
    _K.AUDIO_FILE_URL: "audio_file_url",
    _K.AUDIO_SOURCE_URL: "audio_source_url",
    _K.COMMERCIAL_INFORMATION_URL: "commercial_information_url",
    _K.COPYRIGHT_URL: "copyright_url",
    _K.TRACK_ARTIST_URL: "track_artist_url",
    _K.RADIO_STATION_URL: "radio_station_url",
    _K.PAYMENT_URL: "payment_url",
    _K.PUBLISHER_URL: "publisher_url",
    _K.DISC_NUMBER: "disc_number",
    _K.DISC_TOTAL: "disc_total",
    _K.TRACK_NUMBER: "track_number",
    _K.TRACK_TOTAL: "track_total",
    _K.MOVEMENT: "movement",
    _K.MOVEMENT_NUMBER: "movement_number",
    _K.MOVEMENT_TOTAL: "movement_total",
    _K.YEAR: "year",
    _K.RECORDING_DATE: "recording_date",
    _K.RELEASE_DATE: "release_date",
    _K.ORIGINAL_RELEASE_DATE: "original_release_date",
    _K.FILE_TYPE: "file_type",
    _K.FILE_OWNER: "file_owner",
    _K.TAGGING_TIME: "tagging_time",
    _K.LENGTH: "length",
    _K.ORIGINAL_FILE_NAME: "original_file_name",
    _K.ORIGINAL_MEDIA_TYPE: "original_media_type",
    _K.ENCODED_BY: "encoded_by",
    _K.ENCODER_SOFTWARE: "encoder_software",
    _K.ENCODER_SETTINGS: "encoding_settings",
    _K.ENCODING_TIME: "encoding_time",
    _K.REPLAY_GAIN_ALBUM_GAIN: "replaygain_album_gain",
    _K.REPLAY_GAIN_ALBUM_PEAK: "replaygain_album_peak",
    _K.REPLAY_GAIN_TRACK_GAIN: "replaygain_track_gain",
    _K.REPLAY_GAIN_TRACK_PEAK: "replaygain_track_peak",
    _K.ISRC: "irsc",
    _K.BARCODE: "barcode",
    _K.CATALOG_NUMBER: "catalog_number",
    _K.FLAG_COMPILATION: "flag_compilation",
    _K.FLAG_PODCAST: "flag_podcast",
    _K.COPYRIGHT_MESSAGE: "copyright_message",
    _K.LICENSE: "license",
    _K.POPULARIMETER: "popularimeter",
    _K.PARENTAL_ADVISORY: "parental_advisory",
    _K.ARRANGER: "arranger",
    _K.WRITER: "writer",
    _K.COMPOSER: "composer",
    _K.COMPOSER_SORT_ORDER: "composer_sort_order",
    _K.CONDUCTOR: "conductor",
    _K.DIRECTOR: "director",
    _K.ENGINEER: "engineer",
    _K.LYRICIST: "lyricist",
    _K.ORIGINAL_LYRICIST: "original_lyricist",
    _K.MIX_DJ: "mix_dj",
    _K.MIX_ENGINEER: "mix_engineer",
    _K.MUSICIAN_CREDITS: "musician_credits",
    _K.PERFORMER: "performer",
    _K.PRODUCER: "producer",
    _K.PUBLISHER: "publisher",
    _K.LABEL: "label",
    _K.INTERNET_RADIO_STATION_NAME: "internet_radio_station_name",
    _K.INTERNET_RADIO_STATION_OWNER: "internet_radio_station_owner",
    _K.REMIXER: "remixer",
}
_FLOAT_FIELDS = frozenset({"bpm"})


def _parse_float(text: str) -> float:
    if text != text.strip() or "_" in text:
        raise ValueError(text)
    return float(text)


def dollar_values(count: int) -> str:
    """Positional placeholders ``$1,$2,...,$count``."""
    return ",".join(f"${n}" for n in range(1, count + 1))


def insert_statement(table: str, columns: Iterable[str]) -> str:
    """An INSERT statement for ``columns`` with positional placeholders."""
    columns = list(columns)
    return (
        f"INSERT INTO {table} ( {','.join(columns)} ) "
        f"VALUES ( {dollar_values(len(columns))} )"
    )


@dataclass
class TaggedTrack:
    """A track row as read from a file's tags."""

    path: str

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

    @classmethod
    def from_tags(cls, path: str | os.PathLike, items: Iterable[TagItem]) -> TaggedTrack:
        """Build a track for ``path`` from its tag items."""
        track = cls(path=os.fsdecode(path))
        for item in items:
            track.set_tag_field(item)
        return track

    def set_tag_field(self, item: TagItem) -> None:
        """Store one tag item in the field it belongs to."""
        if not isinstance(item.key, ItemKey):
            return
        name = _FIELD_FOR_KEY.get(item.key)
        if name is None:
            log.warning("unhandled tag: %s", item.key.value)
            return

        is_float = name in _FLOAT_FIELDS
        if item.kind is ItemValueKind.BINARY:
            raise ValueError(
                f"binary tag value {item.value!r} on field {item.key.value} is unsupported"
            )
        if item.kind is ItemValueKind.TEXT and is_float:
            try:
                setattr(self, name, _parse_float(str(item.value)))
            except ValueError:
                log.warning(
                    "tag %s in file %r contains invalid float: %s",
                    item.key.value, self.path, item.value,
                )
        elif not is_float:
            setattr(self, name, str(item.value))
        else:
            log.warning(
                "tag type does not match field type: %s with value %r",
                item.key.value, item.value,
            )

    def insert(self, connection: sqlite3.Connection) -> sqlite3.Cursor:
        """Insert this track into the ``tracks`` table and commit."""
        params = {str(n): getattr(self, col) for n, col in enumerate(COLUMNS, start=1)}
        cursor = connection.execute(INSERT_SQL, params)
        connection.commit()
        return cursor


COLUMNS: tuple[str, ...] = tuple(f.name for f in fields(TaggedTrack))
INSERT_SQL = insert_statement(TABLE, COLUMNS)