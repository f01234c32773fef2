"""
Base Strategy for Playlist Generation
=====================================

Defines the abstract base class for generation strategies and the context
object handed to every strategy invocation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, Optional

from ...models import Playlist, Track
from ..config import GenerationOptions
from ..sampler import TrackSampler

if TYPE_CHECKING:
    from ...library_index import LibraryIndex
    from ...similarity_calculator import ArtistSimilarity

logger = logging.getLogger(__name__)

MIN_DISTINCT_ARTISTS = 3


@dataclass
class GenerationContext:
    """Everything a strategy may read while it runs.

    ``playlists`` holds the playlists accepted so far in this run. Strategies
    do not append to it; they return their own playlists and the pipeline
    appends them.
    """

    index: "LibraryIndex"
    """Finalized library index."""

    options: GenerationOptions
    """Size, diversity and content options."""

    sampler: TrackSampler
    """Selection sampler (owns the random source)."""

    similarity: "ArtistSimilarity"
    """Artist similarity model."""

    playlists: List[Playlist] = field(default_factory=list)
    """Playlists accepted so far in this run."""

    @property
    def target(self) -> int:
        return self.options.number_of_playlists

    def target_reached(self, pending: int = 0) -> bool:
        """True once accepted plus ``pending`` playlists reach the target count"""
        return len(self.playlists) + pending >= self.target


class PlaylistGenerationStrategy(ABC):
    """Abstract base class for playlist generation strategies.

    A strategy is a named, priority-ordered unit of generation logic. The
    pipeline runs enabled strategies by ascending priority.

    Subclasses must implement:
    - generate(): return the playlists this strategy produces
    """

    name: str = ""
    default_priority: int = 100

    def __init__(self, priority: Optional[int] = None, enabled: bool = True):
        self.priority = self.default_priority if priority is None else priority
        self.enabled = enabled

    @abstractmethod
    def generate(self, context: GenerationContext) -> List[Playlist]:
        """Produce playlists for the current library.

        Args:
            context: Shared generation context

        Returns:
            Playlists to append, in order
        """

    def select_tracks(
        self,
        context: GenerationContext,
        artists: Iterable[str],
        pool: Optional[Iterable[Track]] = None,
    ) -> List[Track]:
        """Sampler call with the configured per-artist and per-playlist caps"""
        options = context.options
        return context.sampler.select_from_artists(
            artists,
            options.max_tracks_per_artist_in_playlist,
            options.max_tracks_per_playlist,
            pool,
        )

    def meets_minimum(self, context: GenerationContext, tracks: List[Track]) -> bool:
        return len(tracks) >= context.options.min_tracks_per_playlist

    def make_playlist(self, name: str, description: str, tracks: List[Track]) -> Playlist:
        return Playlist(name=name, description=description, tracks=list(tracks), generated_by=self.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, priority={self.priority}, enabled={self.enabled})"
