"""
Library Index - in-memory view of the scanned collection.

Owns the tracks, the per-artist profiles, the genre -> artists index, the
folder -> artists cache and the recently-added ordering. Built once per scan
(ingest every track, then finalize) and queried by every generator.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .errors import IngestionError
from .models import ArtistProfile, Track
from .string_utils import folder_basename

logger = logging.getLogger(__name__)

PSEUDO_GENRE_PREFIX = "folder:"


def pseudo_genre(folder: str) -> str:
    """Synthetic genre for artists without genre tags ("/music/Jazz" -> "folder:Jazz")."""
    return f"{PSEUDO_GENRE_PREFIX}{folder_basename(folder)}"


def is_pseudo_genre(genre: str) -> bool:
    return genre.startswith(PSEUDO_GENRE_PREFIX)


class LibraryIndex:
    """In-memory index of tracks, artists, genres and folders"""

    def __init__(self):
        self.tracks: List[Track] = []
        self.artists: Dict[str, ArtistProfile] = {}
        self.genres: Dict[str, List[str]] = {}
        self.folder_cache: Dict[str, List[str]] = {}
        self.recently_added: List[Track] = []
        self._tracks_by_path: Dict[str, Track] = {}
        self._tracks_by_folder: Dict[str, List[Track]] = {}
        self._artist_positions: Dict[str, int] = {}
        self._finalized = False

    def reset(self) -> None:
        """Drop all tracks and derived state"""
        self.__init__()

    @classmethod
    def build(cls, records: Iterable[Union[Track, Mapping[str, Any]]]) -> "LibraryIndex":
        """Ingest every record, skipping bad ones, then finalize"""
        index = cls()
        for record in records:
            try:
                index.ingest(record)
            except IngestionError as e:
                logger.warning(f"Skipping track record: {e}")
        index.finalize()
        return index

    def ingest(self, record: Union[Track, Mapping[str, Any]]) -> Track:
        """
        Add one track to the index.

        Args:
            record: Track or collaborator record

        Returns:
            The ingested Track (or the existing one for a duplicate path)

        Raises:
            IngestionError: If the record has no usable path
        """
        track = Track.from_record(record)

        existing = self._tracks_by_path.get(track.path)
        if existing is not None:
            logger.warning(f"Duplicate track path ignored: {track.path}")
            return existing

        if self._finalized:
            # Derived state is rebuilt, never patched
            logger.debug("Track ingested after finalize(); derived indexes are stale until finalize() runs again")
            self._finalized = False

        self.tracks.append(track)
        self._tracks_by_path[track.path] = track
        self._tracks_by_folder.setdefault(track.folder, []).append(track)

        profile = self.artists.get(track.artist)
        if profile is None:
            profile = ArtistProfile(name=track.artist)
            self.artists[track.artist] = profile
            self._artist_positions[track.artist] = len(self._artist_positions)
        profile.add_track(track)

        self.recently_added.append(track)
        return track

    def finalize(self) -> "LibraryIndex":
        """Build the genre index, pseudo-genres, folder cache and recency order"""
        self.genres = {}
        for name, profile in self.artists.items():
            for genre in profile.genres:
                self._register_genre(genre, name)

        pseudo_count = 0
        for name, profile in self.artists.items():
            if profile.genres or not profile.tracks:
                continue
            for folder in profile.folders:
                genre = pseudo_genre(folder)
                profile.add_genre(genre)
                self._register_genre(genre, name)
                pseudo_count += 1

        self.folder_cache = {}
        for track in self.tracks:
            artists = self.folder_cache.setdefault(track.folder, [])
            if track.artist not in artists:
                artists.append(track.artist)

        # sorted() is stable, so equal timestamps keep ingestion order
        self.recently_added = sorted(self.recently_added, key=lambda t: t.modified_time, reverse=True)

        self._finalized = True
        logger.info(
            f"Library index ready: {len(self.tracks)} tracks, {len(self.artists)} artists, "
            f"{len(self.genres)} genres ({pseudo_count} folder pseudo-genres), {len(self.folder_cache)} folders"
        )
        return self

    def _register_genre(self, genre: str, artist: str) -> None:
        artists = self.genres.setdefault(genre, [])
        if artist not in artists:
            artists.append(artist)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def artist_names(self) -> List[str]:
        """Artist names in ingestion order"""
        return list(self.artists)

    def genre_names(self) -> List[str]:
        return list(self.genres)

    def artist_position(self, artist: str) -> int:
        """Stable insertion position of an artist (unknown artists sort last)"""
        return self._artist_positions.get(artist, len(self._artist_positions))

    def artists_for_genre(self, genre: str) -> List[str]:
        return list(self.genres.get(genre, []))

    def tracks_for_artist(self, artist: str) -> List[Track]:
        profile = self.artists.get(artist)
        return list(profile.tracks) if profile else []

    def tracks_in_folder(self, folder: str) -> List[Track]:
        return list(self._tracks_by_folder.get(folder, []))

    def get_track(self, path: str) -> Optional[Track]:
        return self._tracks_by_path.get(path)

    def stats(self) -> Dict[str, int]:
        return {
            "tracks": len(self.tracks),
            "artists": len(self.artists),
            "genres": len(self.genres),
            "folders": len(self.folder_cache),
        }

    def __len__(self) -> int:
        return len(self.tracks)
