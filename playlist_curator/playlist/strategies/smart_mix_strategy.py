"""
Smart mixes: a random seed artist plus the artists most similar to it.
"""
from __future__ import annotations

import logging
import math
from typing import List

from ...models import Playlist
from .base_strategy import MIN_DISTINCT_ARTISTS, GenerationContext, PlaylistGenerationStrategy

logger = logging.getLogger(__name__)

MAX_SMART_MIXES = 5
MIN_SEED_TRACKS = 5
SIMILAR_ARTIST_LIMIT = 10


class SmartMixStrategy(PlaylistGenerationStrategy):
    name = "smartMix"
    default_priority = 50

    def generate(self, context: GenerationContext) -> List[Playlist]:
        mix_count = min(MAX_SMART_MIXES, math.ceil(context.target / 4))
        if mix_count <= 0:
            return []

        eligible = [
            name for name, profile in context.index.artists.items()
            if len(profile.tracks) >= MIN_SEED_TRACKS
        ]
        if not eligible:
            return []

        # Twice as many candidates as mixes: some seeds have too few neighbours
        seeds = context.sampler.shuffle(eligible)[:mix_count * 2]

        produced: List[Playlist] = []
        for seed in seeds:
            if len(produced) >= mix_count or context.target_reached(len(produced)):
                break

            similar = context.similarity.similar_artists(seed, SIMILAR_ARTIST_LIMIT)
            if len(similar) < MIN_DISTINCT_ARTISTS:
                logger.debug(f"Smart mix seed '{seed}': only {len(similar)} similar artists")
                continue

            tracks = self.select_tracks(context, [seed] + similar)
            if not self.meets_minimum(context, tracks):
                continue

            seed_genres = context.index.artists[seed].genres
            main_genre = seed_genres[0] if seed_genres else "Mix"
            produced.append(self.make_playlist(
                f"{seed} & Similar Artists",
                f"A mix of {seed} and similar artists in the {main_genre} genre",
                tracks,
            ))
        return produced
