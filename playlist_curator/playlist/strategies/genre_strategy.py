"""
Genre playlists: one mix per genre bucket with enough distinct artists.
"""
from __future__ import annotations

import logging
from typing import List

from ...library_index import PSEUDO_GENRE_PREFIX, is_pseudo_genre
from ...models import Playlist
from .base_strategy import MIN_DISTINCT_ARTISTS, GenerationContext, PlaylistGenerationStrategy

logger = logging.getLogger(__name__)


def genre_display_name(genre: str) -> str:
    """"folder:Jazz" -> "Jazz"; real genres are returned unchanged."""
    return genre[len(PSEUDO_GENRE_PREFIX):] if is_pseudo_genre(genre) else genre


class GenrePlaylistStrategy(PlaylistGenerationStrategy):
    """Largest genres first; playlists below the minimum size are skipped."""

    name = "genres"
    default_priority = 10

    def generate(self, context: GenerationContext) -> List[Playlist]:
        genres = [
            (genre, artists) for genre, artists in context.index.genres.items()
            if len(artists) >= MIN_DISTINCT_ARTISTS
        ]
        # Stable sort: equal-sized genres keep index order
        genres.sort(key=lambda item: len(item[1]), reverse=True)

        produced: List[Playlist] = []
        for genre, artists in genres:
            if context.target_reached(len(produced)):
                break

            tracks = self.select_tracks(context, artists)
            if not self.meets_minimum(context, tracks):
                logger.debug(f"Genre '{genre}': only {len(tracks)} tracks selected, skipping")
                continue

            produced.append(self.make_playlist(
                f"Mix {genre_display_name(genre)}",
                f"A mix of {genre} tracks from various artists",
                tracks,
            ))
        return produced
