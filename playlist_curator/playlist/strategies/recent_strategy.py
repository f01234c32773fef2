"""
Recently added: the newest tracks by file modification time.
"""
from __future__ import annotations

from typing import List

from ...models import Playlist
from .base_strategy import GenerationContext, PlaylistGenerationStrategy


class RecentlyAddedStrategy(PlaylistGenerationStrategy):
    name = "recentlyAdded"
    default_priority = 30

    def generate(self, context: GenerationContext) -> List[Playlist]:
        recent = context.index.recently_added[:context.options.max_tracks_per_playlist]
        if not self.meets_minimum(context, recent):
            return []
        return [self.make_playlist(
            "Recently Added",
            "Tracks that were recently added to your library",
            recent,
        )]
