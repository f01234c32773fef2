"""
Exception hierarchy for the playlist curator.

Errors local to one unit of work (one file, one template, one exported
playlist) are caught and logged by the batch that owns them. Everything else
propagates to the caller.
"""


class PlaylistCuratorError(Exception):
    """Base class for all curator errors."""


class IngestionError(PlaylistCuratorError):
    """A track record or audio file could not be ingested."""


# Short alias used by the library index API
IngestError = IngestionError


class TemplateError(PlaylistCuratorError):
    """A template or one of its rules is malformed."""


class NotFoundError(PlaylistCuratorError, IndexError):
    """A playlist index (or other lookup) is out of range."""


class PersistenceError(PlaylistCuratorError):
    """Reading or writing a playlist document or M3U file failed."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = str(path) if path is not None else None
