"""
Music Library Scanner
=====================
Walks a music directory and turns tagged audio files into Track records.

Features:
- Scans for audio files (MP3, FLAC, M4A, WAV, OGG, AAC, OPUS)
- Reads tags with Mutagen (artist, album artist, title, album, date, genres, duration)
- Falls back to "Artist - Title" file names when tags are missing
- Records file modification and creation times for the recently-added view

A file that cannot be read is logged and skipped; a scan never aborts on a
single file.
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import mutagen

from .errors import IngestionError
from .logging_utils import ProgressLogger
from .models import Track

logger = logging.getLogger(__name__)

# Audio file extensions to scan
AUDIO_EXTENSIONS = {'.mp3', '.flac', '.m4a', '.wav', '.ogg', '.aac', '.opus'}


def _get_tag(audio, tag_names: List[str]) -> Optional[str]:
    """Get first available tag value"""
    for tag in tag_names:
        if tag in audio:
            value = audio[tag]
            if isinstance(value, list) and value:
                return str(value[0])
            elif value:
                return str(value)
    return None


def _get_tags_list(audio, tag_names: List[str]) -> List[str]:
    """Get tag values as list"""
    for tag in tag_names:
        if tag in audio:
            value = audio[tag]
            if isinstance(value, list):
                return [str(v) for v in value]
            elif value:
                return [str(value)]
    return []


def parse_filename(file_path: Path) -> Dict[str, str]:
    """Parse artist and title from filename"""
    filename = file_path.stem

    # Try common patterns: "Artist - Title" or "Artist-Title"
    if ' - ' in filename:
        parts = filename.split(' - ', 1)
        return {'artist': parts[0].strip(), 'title': parts[1].strip()}
    elif '-' in filename:
        parts = filename.split('-', 1)
        return {'artist': parts[0].strip(), 'title': parts[1].strip()}

    return {'artist': '', 'title': filename}


class LibraryScanner:
    """Reads audio file tags under a music directory"""

    def __init__(self, music_dir: Union[str, Path]):
        self.music_dir = Path(music_dir)
        self.extensions = AUDIO_EXTENSIONS

    def scan_files(self) -> List[Path]:
        """
        Find audio files under the music directory.

        Returns:
            Sorted list of audio file paths

        Raises:
            FileNotFoundError: If the music directory does not exist
        """
        if not self.music_dir.is_dir():
            raise FileNotFoundError(f"Music directory not found: {self.music_dir}")

        logger.info(f"Scanning directory: {self.music_dir}")
        files = [
            path for path in self.music_dir.rglob("*")
            if path.is_file() and path.suffix.lower() in self.extensions
        ]
        files.sort()
        logger.info(f"Found {len(files)} audio files")
        return files

    def extract_metadata(self, file_path: Path) -> Dict[str, Any]:
        """
        Extract a track record from one audio file.

        Raises:
            IngestionError: If the file cannot be read
        """
        try:
            stat = file_path.stat()
        except OSError as e:
            raise IngestionError(f"Cannot stat {file_path}: {e}") from e

        try:
            audio = mutagen.File(file_path, easy=True)
        except Exception as e:
            # Corrupt tags surface as ValueError, struct.error, IndexError and friends
            raise IngestionError(f"Error reading tags from {file_path}: {e}") from e
        if audio is None:
            raise IngestionError(f"Could not read file format: {file_path}")

        try:
            return self._build_record(file_path, stat, audio)
        except Exception as e:
            raise IngestionError(f"Error extracting metadata from {file_path}: {e}") from e

    def _build_record(self, file_path: Path, stat: os.stat_result, audio) -> Dict[str, Any]:
        info = getattr(audio, 'info', None)
        record = {
            'path': str(file_path),
            'artist': _get_tag(audio, ['artist', 'albumartist']),
            'album_artist': _get_tag(audio, ['albumartist']),
            'title': _get_tag(audio, ['title']),
            'album': _get_tag(audio, ['album']),
            'year': _get_tag(audio, ['date', 'year', 'originaldate']),
            'genres': _get_tags_list(audio, ['genre']),
            'bpm': _get_tag(audio, ['bpm']),
            'track_number': self._leading_number(_get_tag(audio, ['tracknumber'])),
            'disc_number': self._leading_number(_get_tag(audio, ['discnumber'])),
            'duration': getattr(info, 'length', None) or 0,
            'folder': str(file_path.parent),
            'modified_time': stat.st_mtime,
            'created_time': self._created_time(stat),
        }

        if not record['duration']:
            logger.debug(f"Could not extract duration from {file_path} - audio info missing")

        # If no artist or title, try to parse from filename
        if not record['artist'] or not record['title']:
            fallback = parse_filename(file_path)
            record['artist'] = record['artist'] or fallback['artist'] or None
            record['title'] = record['title'] or fallback['title']

        return record

    @staticmethod
    def _leading_number(value: Optional[str]) -> Optional[int]:
        # "3/12" -> 3
        if not value:
            return None
        head = value.split('/', 1)[0].strip()
        return int(head) if head.isdigit() else None

    @staticmethod
    def _created_time(stat: os.stat_result) -> float:
        return float(getattr(stat, 'st_birthtime', stat.st_ctime))

    def iter_records(self) -> Iterator[Dict[str, Any]]:
        """Yield one record per readable audio file"""
        files = self.scan_files()
        progress = ProgressLogger(logger, total=len(files), label="Reading tags", unit="files")
        for file_path in files:
            try:
                record = self.extract_metadata(file_path)
            except IngestionError as e:
                logger.warning(f"Skipping {file_path}: {e}")
                progress.update(skipped=True)
                continue
            progress.update()
            yield record
        progress.finish()

    def iter_tracks(self) -> Iterator[Track]:
        for record in self.iter_records():
            yield Track.from_record(record)

    def scan(self) -> List[Track]:
        return list(self.iter_tracks())
