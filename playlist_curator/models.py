"""
Domain models shared by the index, the generators and the persistence layer.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .errors import IngestionError, TemplateError
from .string_utils import file_stem, folder_of

logger = logging.getLogger(__name__)

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"

# Collaborator records use camelCase keys; map them onto field names
_RECORD_KEY_ALIASES = {
    "albumArtist": "album_artist",
    "albumartist": "album_artist",
    "trackNumber": "track_number",
    "discNumber": "disc_number",
    "modifiedTime": "modified_time",
    "createdTime": "created_time",
    "file_path": "path",
    "genre": "genres",
}

_YEAR_PATTERN = re.compile(r"(\d{4})")


def _coerce_year(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        year = int(value)
        return year or None
    match = _YEAR_PATTERN.search(str(value))
    if match:
        return int(match.group(1)) or None
    return None


def _coerce_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _coerce_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _coerce_timestamp(value: Any) -> float:
    if isinstance(value, datetime):
        return value.timestamp()
    return _coerce_float(value)


def _coerce_genres(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = [value]
    genres: List[str] = []
    for genre in value:
        if genre is None:
            continue
        text = str(genre).strip()
        if text and text not in genres:
            genres.append(text)
    return tuple(genres)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class Track:
    """
    Immutable track record. Identity (equality and hashing) is the file path.
    """
    path: str
    title: str = field(default="", compare=False)
    artist: str = field(default=UNKNOWN_ARTIST, compare=False)
    album: str = field(default=UNKNOWN_ALBUM, compare=False)
    album_artist: str = field(default="", compare=False)
    genres: Tuple[str, ...] = field(default=(), compare=False)
    year: Optional[int] = field(default=None, compare=False)
    bpm: Optional[float] = field(default=None, compare=False)
    folder: str = field(default="", compare=False)
    track_number: Optional[int] = field(default=None, compare=False)
    disc_number: Optional[int] = field(default=None, compare=False)
    duration: float = field(default=0.0, compare=False)
    rating: float = field(default=0.0, compare=False)
    modified_time: float = field(default=0.0, compare=False)
    created_time: float = field(default=0.0, compare=False)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Track":
        """
        Build a Track from a collaborator record, degrading missing metadata.

        Raises:
            IngestionError: If the record has no usable path
        """
        if isinstance(record, Track):
            return record
        if not isinstance(record, Mapping):
            raise IngestionError(f"Track record must be a mapping, got {type(record).__name__}")

        data: Dict[str, Any] = {}
        for key, value in record.items():
            data[_RECORD_KEY_ALIASES.get(key, key)] = value

        path = _text(data.get("path"))
        if not path:
            raise IngestionError("Track record has no path")

        artist = _text(data.get("artist")) or UNKNOWN_ARTIST
        return cls(
            path=path,
            title=_text(data.get("title")) or file_stem(path),
            artist=artist,
            album=_text(data.get("album")) or UNKNOWN_ALBUM,
            album_artist=_text(data.get("album_artist")) or artist,
            genres=_coerce_genres(data.get("genres")),
            year=_coerce_year(data.get("year")),
            bpm=_coerce_float(data.get("bpm"), default=None) or None,
            folder=_text(data.get("folder")) or folder_of(path),
            track_number=_coerce_int(data.get("track_number")),
            disc_number=_coerce_int(data.get("disc_number")),
            duration=_coerce_float(data.get("duration")),
            rating=_coerce_float(data.get("rating")),
            modified_time=_coerce_timestamp(data.get("modified_time")),
            created_time=_coerce_timestamp(data.get("created_time")),
        )

    def with_changes(self, **changes: Any) -> "Track":
        return replace(self, **changes)


def _append_unique(items: list, value: Any) -> None:
    if value not in items:
        items.append(value)


@dataclass
class ArtistProfile:
    """Aggregated view of one artist's tracks, genres, years and folders.

    The collections keep first-seen order and never hold duplicates, so
    anything derived from them iterates deterministically.
    """
    name: str
    tracks: List[Track] = field(default_factory=list)
    genres: List[str] = field(default_factory=list)
    years: List[int] = field(default_factory=list)
    folders: List[str] = field(default_factory=list)

    def add_track(self, track: Track) -> None:
        self.tracks.append(track)
        for genre in track.genres:
            _append_unique(self.genres, genre)
        if track.year:
            _append_unique(self.years, track.year)
        _append_unique(self.folders, track.folder)

    def add_genre(self, genre: str) -> None:
        _append_unique(self.genres, genre)


def _dedupe_tracks(tracks: Iterable[Track]) -> List[Track]:
    seen: Set[str] = set()
    unique: List[Track] = []
    for track in tracks:
        if track.path in seen:
            logger.debug(f"Dropping duplicate track in playlist: {track.path}")
            continue
        seen.add(track.path)
        unique.append(track)
    return unique


@dataclass
class Playlist:
    """
    A named, ordered list of tracks produced by one generator invocation.

    ``artists`` is derived from ``tracks`` on every access, and duplicate
    paths are dropped whenever the track list is assigned (constructor,
    ``set_tracks`` or ``playlist.tracks = ...``).
    """
    name: str
    description: str = ""
    tracks: List[Track] = field(default_factory=list)
    generated_by: str = ""

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "tracks":
            value = _dedupe_tracks(value)
        super().__setattr__(name, value)

    @property
    def artists(self) -> Set[str]:
        return {track.artist for track in self.tracks}

    @property
    def paths(self) -> Set[str]:
        return {track.path for track in self.tracks}

    def rename(self, name: str) -> None:
        self.name = name

    def describe(self, description: str) -> None:
        self.description = description

    def set_tracks(self, tracks: Iterable[Track]) -> None:
        self.tracks = tracks

    def __len__(self) -> int:
        return len(self.tracks)


@dataclass(frozen=True)
class Rule:
    """One declarative template filter."""
    type: str
    value: Any
    operator: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rule":
        if isinstance(data, Rule):
            return data
        if not isinstance(data, Mapping):
            raise TemplateError(f"Rule must be a mapping, got {type(data).__name__}")
        value = data.get("value")
        if isinstance(value, list):
            value = tuple(value)
        return cls(type=data.get("type"), value=value, operator=data.get("operator"))

    def to_dict(self) -> Dict[str, Any]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        data: Dict[str, Any] = {"type": self.type, "value": value}
        if self.operator is not None:
            data["operator"] = self.operator
        return data


@dataclass
class Template:
    """User-authored rule set that produces one playlist."""
    name: str
    description: str = ""
    rules: List[Rule] = field(default_factory=list)
    advanced: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Template":
        if isinstance(data, Template):
            return data
        if not isinstance(data, Mapping):
            raise TemplateError(f"Template must be a mapping, got {type(data).__name__}")
        name = data.get("name")
        rules = data.get("rules")
        if not name or rules is None:
            raise TemplateError("Template must have a name and rules property")
        if not isinstance(rules, (list, tuple)):
            raise TemplateError(f"Template '{name}' rules must be a list")
        advanced = data.get("advanced")
        if advanced and not isinstance(advanced, Mapping):
            raise TemplateError(f"Template '{name}' advanced settings must be a mapping")
        return cls(
            name=str(name),
            description=data.get("description") or "",
            rules=[Rule.from_dict(rule) for rule in rules],
            advanced=dict(advanced) if advanced else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "rules": [rule.to_dict() for rule in self.rules],
        }
        if self.advanced:
            data["advanced"] = dict(self.advanced)
        return data
