"""
Shared string helpers used by the index, the similarity model and the exporters.
"""
import re
import unicodedata
from typing import List

# Characters replaced in exported playlist filenames
_INVALID_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')

# Both separators are accepted so Windows paths resolve on POSIX hosts too
_PATH_SEPARATORS = re.compile(r"[\\/]")


def normalize_text(text: str, lowercase: bool = True, strip: bool = True) -> str:
    """
    Normalize text for consistent comparisons.

    Handles Unicode normalization (NFC), optional case folding, and whitespace.

    Args:
        text: Text to normalize
        lowercase: Apply case folding (uses casefold() for better Unicode support)
        strip: Remove leading/trailing whitespace

    Returns:
        Normalized text string
    """
    if text is None:
        return ""

    text = unicodedata.normalize('NFC', str(text))

    if lowercase:
        text = text.casefold()

    if strip:
        text = text.strip()

    return text


def contains_text(haystack: str, needle: str) -> bool:
    """Case-insensitive substring test."""
    return normalize_text(needle, strip=False) in normalize_text(haystack, strip=False)


def name_tokens(name: str) -> List[str]:
    """Lowercased whitespace-delimited tokens of an artist name."""
    if not name:
        return []
    return name.lower().split()


def folder_of(path: str) -> str:
    """Parent directory of a file path, keeping the original separator style."""
    if not path:
        return ""
    last_sep = max(path.rfind("/"), path.rfind("\\"))
    if last_sep < 0:
        return ""
    # Root-level files keep the separator ("/a.mp3" -> "/")
    return path[:last_sep] if last_sep > 0 else path[:1]


def folder_basename(folder: str) -> str:
    """Last component of a folder path ("/music/Jazz/" -> "Jazz")."""
    if not folder:
        return ""
    trimmed = folder.rstrip("/\\")
    if not trimmed:
        return folder
    return _PATH_SEPARATORS.split(trimmed)[-1]


def file_stem(path: str) -> str:
    """File name without directory and extension."""
    name = _PATH_SEPARATORS.split(path)[-1] if path else ""
    if "." in name.lstrip("."):
        return name.rsplit(".", 1)[0]
    return name


def sanitize_filename(filename: str) -> str:
    """
    Replace characters that are invalid in playlist filenames with '_'.

    Distinct names can collapse to the same result ("A/B" and "A:B");
    callers do not deduplicate.
    """
    return _INVALID_FILENAME_CHARS.sub("_", filename)
