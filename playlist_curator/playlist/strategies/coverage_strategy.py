"""
Coverage: "Discover Mix" playlists for artists absent from every playlist so far.
"""
from __future__ import annotations

import logging
from typing import List, Set

from ...models import Playlist, Track
from .base_strategy import GenerationContext, PlaylistGenerationStrategy

logger = logging.getLogger(__name__)


class CoverageStrategy(PlaylistGenerationStrategy):
    """
    Greedy bin fill over uncovered artists.

    A playlist is flushed when the next artist's tracks would push it past the
    maximum size; flushed playlists below the minimum are dropped, so full
    coverage is best effort.
    """

    name = "coverage"
    default_priority = 100

    def generate(self, context: GenerationContext) -> List[Playlist]:
        options = context.options
        covered: Set[str] = set()
        for playlist in context.playlists:
            covered.update(playlist.artists)

        uncovered = [name for name in context.index.artists if name not in covered]
        if not uncovered:
            return []
        logger.info(f"Found {len(uncovered)} artists not yet in any playlist")

        per_artist = min(options.max_tracks_per_artist_in_playlist, options.max_tracks_per_playlist)
        produced: List[Playlist] = []
        current: List[Track] = []

        def flush() -> None:
            if len(current) >= options.min_tracks_per_playlist:
                produced.append(self.make_playlist(
                    f"Discover Mix {len(produced) + 1}",
                    "A mix of artists you might not listen to often",
                    current,
                ))
            else:
                logger.debug(f"Dropping discover mix with {len(current)} tracks (below minimum)")

        for artist in uncovered:
            artist_tracks = context.index.tracks_for_artist(artist)
            if not artist_tracks:
                continue

            selected = context.sampler.select_random(artist_tracks, per_artist)
            if len(current) + len(selected) > options.max_tracks_per_playlist:
                flush()
                current = list(selected)
            else:
                current.extend(selected)

        flush()
        return produced
