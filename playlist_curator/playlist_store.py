"""
Playlist Store - save/load the full playlist list as JSON for later editing.

The document is an array of
``{name, description, generatedBy, tracks: [{path, title, artist, album, year, genres, duration}]}``.
Only playlist contents round-trip; artist sets are re-derived on load.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from .errors import IngestionError, PersistenceError
from .models import Playlist, Track

logger = logging.getLogger(__name__)

IMPORTED_GENERATOR = "imported"


def track_to_dict(track: Track) -> Dict[str, Any]:
    return {
        "path": track.path,
        "title": track.title,
        "artist": track.artist,
        "album": track.album,
        "year": track.year,
        "genres": list(track.genres),
        "duration": track.duration,
    }


def playlists_to_document(playlists: List[Playlist]) -> List[Dict[str, Any]]:
    return [
        {
            "name": playlist.name,
            "description": playlist.description,
            "generatedBy": playlist.generated_by,
            "tracks": [track_to_dict(track) for track in playlist.tracks],
        }
        for playlist in playlists
    ]


def _track_from_dict(data: Dict[str, Any]) -> Track:
    track = Track.from_record({
        "path": data.get("path"),
        "title": data.get("title"),
        "artist": data.get("artist"),
        "year": data.get("year"),
        "genres": data.get("genres") if isinstance(data.get("genres"), list) else [],
        "duration": data.get("duration") or 0,
    })
    # Saved documents keep an empty album rather than the "Unknown Album" placeholder
    return track.with_changes(album=data.get("album") or "")


def playlists_from_document(document: Any) -> List[Playlist]:
    """
    Rebuild playlists from a saved document.

    Raises:
        PersistenceError: If the document structure is invalid
    """
    if not isinstance(document, list):
        raise PersistenceError("Playlist document must be a JSON array")

    playlists = []
    for position, entry in enumerate(document):
        if not isinstance(entry, dict) or not entry.get("name"):
            raise PersistenceError(f"Playlist entry {position} has no name")
        tracks_data = entry.get("tracks") or []
        if not isinstance(tracks_data, list):
            raise PersistenceError(f"Playlist '{entry['name']}' tracks must be an array")
        for track_position, track_data in enumerate(tracks_data):
            if not isinstance(track_data, dict):
                raise PersistenceError(
                    f"Playlist '{entry['name']}' track {track_position} is not an object"
                )
        try:
            tracks = [_track_from_dict(t) for t in tracks_data]
        except IngestionError as e:
            raise PersistenceError(f"Playlist '{entry['name']}' has an invalid track: {e}") from e

        playlists.append(Playlist(
            name=str(entry["name"]),
            description=entry.get("description") or "",
            tracks=tracks,
            generated_by=entry.get("generatedBy") or IMPORTED_GENERATOR,
        ))
    return playlists


def save_playlists(file_path: Union[str, Path], playlists: List[Playlist]) -> str:
    """
    Write playlists to a JSON document.

    Raises:
        PersistenceError: On I/O failure
    """
    path = Path(file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(playlists_to_document(playlists), f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise PersistenceError(f"Failed to save playlists to {path}: {e}", path) from e

    logger.info(f"Saved {len(playlists)} playlists to {path}")
    return str(path)


def load_playlists(file_path: Union[str, Path]) -> List[Playlist]:
    """
    Read playlists from a JSON document written by save_playlists().

    Raises:
        PersistenceError: On I/O failure, invalid JSON or invalid structure
    """
    path = Path(file_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading playlists from {path}: {e}")
        raise PersistenceError(f"Failed to load playlists from {path}: {e}", path) from e

    playlists = playlists_from_document(document)
    logger.info(f"Loaded {len(playlists)} playlists from {path}")
    return playlists
