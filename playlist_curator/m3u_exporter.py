"""
M3U Playlist Exporter - writes one extended M3U file per playlist plus a JSON summary
"""
import json
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .errors import PersistenceError
from .models import Playlist
from .string_utils import sanitize_filename

logger = logging.getLogger(__name__)

SUMMARY_FILENAME = "playlist_config.json"
M3U_EXTENSION = ".m3u"


def _round_duration(duration: float) -> int:
    # Half-up rounding, so 180.5 -> 181
    return int(math.floor(duration + 0.5))


def format_m3u(playlist: Playlist) -> str:
    """
    Render a playlist as extended M3U text.

    Args:
        playlist: Playlist to render

    Returns:
        M3U content ending with a newline
    """
    lines = ["#EXTM3U", f"#PLAYLIST:{playlist.name}"]
    if playlist.description:
        lines.append(f"#EXTGENRE:{playlist.description}")

    for track in playlist.tracks:
        duration = _round_duration(track.duration) if track.duration else -1
        lines.append(f"#EXTINF:{duration},{track.artist} - {track.title}")
        if track.album:
            lines.append(f"#EXTALB:{track.album}")
        if track.year:
            lines.append(f"#EXTDATE:{track.year}")
        if track.genres:
            lines.append(f"#EXTGENRE:{', '.join(track.genres)}")
        lines.append(track.path)

    return "\n".join(lines) + "\n"


def playlist_filename(name: str) -> str:
    """Sanitized M3U filename for a playlist name"""
    return f"{sanitize_filename(name)}{M3U_EXTENSION}"


def build_summary(playlists: Iterable[Playlist], generated: Optional[datetime] = None) -> Dict[str, Any]:
    """Summary document: generation timestamp and per-playlist counts"""
    generated = generated or datetime.now(timezone.utc)
    return {
        "generated": generated.isoformat(),
        "playlists": [
            {
                "name": playlist.name,
                "description": playlist.description,
                "trackCount": len(playlist.tracks),
                "artistCount": len(playlist.artists),
                "generatedBy": playlist.generated_by,
            }
            for playlist in playlists
        ],
    }


@dataclass
class ExportResult:
    """Outcome of an export batch; failures are per file."""
    summary_path: Optional[str] = None
    written: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed and self.summary_path is not None


class M3UExporter:
    """Exports playlists to M3U format"""

    def __init__(self, export_path: str):
        """
        Initialize M3U exporter

        Args:
            export_path: Directory to save M3U files

        Raises:
            PersistenceError: If the directory cannot be created
        """
        self.export_path = Path(export_path)
        self._ensure_export_directory()
        logger.info(f"Initialized M3U exporter: {self.export_path}")

    def _ensure_export_directory(self):
        """Create export directory if it doesn't exist"""
        try:
            self.export_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create export directory: {e}")
            raise PersistenceError(f"Cannot create export directory {self.export_path}: {e}", self.export_path) from e

    def export_playlist(self, playlist: Playlist) -> str:
        """
        Write one playlist file.

        Returns:
            Path to the created M3U file

        Raises:
            PersistenceError: If the file cannot be written
        """
        m3u_path = self.export_path / playlist_filename(playlist.name)
        if m3u_path.exists():
            logger.debug(f"Overwriting existing playlist file: {m3u_path.name}")
        try:
            m3u_path.write_text(format_m3u(playlist), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to write M3U file {m3u_path}: {e}", m3u_path) from e

        logger.info(f"Exported playlist: {m3u_path.name} with {len(playlist.tracks)} tracks")
        return str(m3u_path)

    def write_summary(self, playlists: List[Playlist]) -> str:
        """
        Write the JSON summary document.

        Raises:
            PersistenceError: If the file cannot be written
        """
        summary_path = self.export_path / SUMMARY_FILENAME
        try:
            with open(summary_path, "w", encoding="utf-8") as f:
                json.dump(build_summary(playlists), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise PersistenceError(f"Failed to write playlist summary {summary_path}: {e}", summary_path) from e
        return str(summary_path)

    def export_all(self, playlists: List[Playlist]) -> ExportResult:
        """
        Write the summary and every playlist. A failed file is logged and
        recorded; the remaining files are still written.
        """
        logger.info(f"Exporting {len(playlists)} playlists to {self.export_path}")
        result = ExportResult()

        try:
            result.summary_path = self.write_summary(playlists)
        except PersistenceError as e:
            logger.error(str(e))
            result.failed[SUMMARY_FILENAME] = str(e)

        for playlist in playlists:
            try:
                result.written.append(self.export_playlist(playlist))
            except PersistenceError as e:
                logger.error(str(e))
                result.failed[playlist.name] = str(e)

        return result
