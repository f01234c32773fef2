"""
Decade playlists: tracks bucketed by floor(year / 10) * 10.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from ...models import Playlist, Track
from .base_strategy import MIN_DISTINCT_ARTISTS, GenerationContext, PlaylistGenerationStrategy

logger = logging.getLogger(__name__)


def decade_of(year: int) -> int:
    return (year // 10) * 10


def bucket_by_decade(tracks: Iterable[Track]) -> Dict[int, List[Track]]:
    """Decade -> tracks, ascending by decade. Tracks without a year are left out."""
    buckets: Dict[int, List[Track]] = {}
    for track in tracks:
        if not track.year:
            continue
        buckets.setdefault(decade_of(track.year), []).append(track)
    return dict(sorted(buckets.items()))


class DecadePlaylistStrategy(PlaylistGenerationStrategy):
    name = "decades"
    default_priority = 40

    def generate(self, context: GenerationContext) -> List[Playlist]:
        produced: List[Playlist] = []

        for decade, tracks in bucket_by_decade(context.index.tracks).items():
            if context.target_reached(len(produced)):
                break
            if len(tracks) < context.options.min_tracks_per_playlist:
                continue

            artists = list(dict.fromkeys(t.artist for t in tracks))
            if len(artists) < MIN_DISTINCT_ARTISTS:
                continue

            selected = self.select_tracks(context, artists, pool=tracks)
            if not self.meets_minimum(context, selected):
                continue

            produced.append(self.make_playlist(f"{decade}s Mix", f"Music from the {decade}s", selected))
        return produced
