from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from ..models import Template

# camelCase option names accepted from config files and the UI layer
_OPTION_ALIASES = {
    "minTracksPerPlaylist": "min_tracks_per_playlist",
    "maxTracksPerPlaylist": "max_tracks_per_playlist",
    "maxTracksPerArtistInPlaylist": "max_tracks_per_artist_in_playlist",
    "numberOfPlaylists": "number_of_playlists",
    "includeYearBasedPlaylists": "include_year_based_playlists",
    "includeRecentlyAdded": "include_recently_added",
    "similarityFactors": "similarity_weights",
    "similarityWeights": "similarity_weights",
    "playlistTemplates": "playlist_templates",
    "templates": "playlist_templates",
}

_WEIGHT_ALIASES = {
    "artistName": "artist_name",
    "artist": "artist_name",
}


def canonical_option_name(key: str) -> str:
    """Map a camelCase option name onto its GenerationOptions field name"""
    return _OPTION_ALIASES.get(key, key)


@dataclass(frozen=True)
class SimilarityWeights:
    """Per-factor weights of the artist similarity score (not normalised)."""
    genre: float = 0.5
    folder: float = 0.3
    artist_name: float = 0.2

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "SimilarityWeights":
        return cls().updated(data or {})

    def updated(self, changes: Mapping[str, Any]) -> "SimilarityWeights":
        known = {f.name for f in fields(self)}
        values: Dict[str, float] = {}
        for key, value in changes.items():
            name = _WEIGHT_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown similarity factor: {key}")
            weight = float(value)
            if weight < 0:
                raise ValueError(f"Similarity factor {key} must be >= 0, got {value}")
            values[name] = weight
        return replace(self, **values)

    def as_key(self) -> Tuple[float, float, float]:
        return (self.genre, self.folder, self.artist_name)

    def to_dict(self) -> Dict[str, float]:
        return {"genre": self.genre, "folder": self.folder, "artistName": self.artist_name}


@dataclass(frozen=True)
class GenerationOptions:
    """Size, diversity and content options for one generation run."""
    min_tracks_per_playlist: int = 30
    max_tracks_per_playlist: int = 50
    max_tracks_per_artist_in_playlist: int = 5
    number_of_playlists: int = 8
    include_year_based_playlists: bool = True
    include_recently_added: bool = True
    similarity_weights: SimilarityWeights = field(default_factory=SimilarityWeights)
    # Template objects or raw template mappings
    playlist_templates: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        if self.min_tracks_per_playlist < 1:
            raise ValueError(f"min_tracks_per_playlist must be >= 1, got {self.min_tracks_per_playlist}")
        if self.max_tracks_per_playlist < self.min_tracks_per_playlist:
            raise ValueError(
                f"max_tracks_per_playlist ({self.max_tracks_per_playlist}) must be >= "
                f"min_tracks_per_playlist ({self.min_tracks_per_playlist})"
            )
        if self.max_tracks_per_artist_in_playlist < 1:
            raise ValueError(
                f"max_tracks_per_artist_in_playlist must be >= 1, got {self.max_tracks_per_artist_in_playlist}"
            )
        if self.number_of_playlists < 0:
            raise ValueError(f"number_of_playlists must be >= 0, got {self.number_of_playlists}")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None) -> "GenerationOptions":
        """Build options from a config/UI mapping (camelCase or snake_case keys)."""
        return cls().updated(data or {})

    def updated(self, changes: Mapping[str, Any]) -> "GenerationOptions":
        """Return a copy with ``changes`` applied; unknown keys raise ValueError."""
        known = {f.name for f in fields(self)}
        values: Dict[str, Any] = {}
        for key, value in changes.items():
            name = canonical_option_name(key)
            if name not in known:
                raise ValueError(f"Unknown generation option: {key}")
            if name == "similarity_weights":
                if not isinstance(value, SimilarityWeights):
                    value = self.similarity_weights.updated(value or {})
            elif name == "playlist_templates":
                # Parsed leniently; malformed templates are rejected when they run
                value = tuple(value or ())
            elif name.startswith("include_"):
                value = bool(value)
            else:
                value = int(value)
            values[name] = value
        return replace(self, **values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minTracksPerPlaylist": self.min_tracks_per_playlist,
            "maxTracksPerPlaylist": self.max_tracks_per_playlist,
            "maxTracksPerArtistInPlaylist": self.max_tracks_per_artist_in_playlist,
            "numberOfPlaylists": self.number_of_playlists,
            "includeYearBasedPlaylists": self.include_year_based_playlists,
            "includeRecentlyAdded": self.include_recently_added,
            "similarityFactors": self.similarity_weights.to_dict(),
            "playlistTemplates": [
                t.to_dict() if isinstance(t, Template) else t for t in self.playlist_templates
            ],
        }
