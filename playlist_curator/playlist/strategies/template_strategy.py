"""
Template playlists: one playlist per user template.

Runs after the registry pipeline and ignores the target count.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ...errors import TemplateError
from ...models import Playlist
from ..templates import TemplateLike, apply_rules, parse_template
from .base_strategy import GenerationContext, PlaylistGenerationStrategy

logger = logging.getLogger(__name__)


class TemplatePlaylistStrategy(PlaylistGenerationStrategy):
    name = "template"
    default_priority = 1000

    def generate(self, context: GenerationContext) -> List[Playlist]:
        produced: List[Playlist] = []
        for template in context.options.playlist_templates:
            try:
                playlist = self.generate_one(context, template)
            except TemplateError as e:
                label = template.get("name") if isinstance(template, dict) else getattr(template, "name", template)
                logger.warning(f"Error generating playlist from template {label!r}: {e}")
                continue
            if playlist is not None:
                produced.append(playlist)
        return produced

    def generate_one(self, context: GenerationContext, template: TemplateLike) -> Optional[Playlist]:
        """
        Build the playlist for one template.

        Returns:
            The playlist, or None when too few tracks match

        Raises:
            TemplateError: If the template is malformed
        """
        parsed = parse_template(template)
        filtered = apply_rules(context.index.tracks, parsed.rules)

        if len(filtered) < context.options.min_tracks_per_playlist:
            logger.info(f"Not enough tracks ({len(filtered)}) for template \"{parsed.name}\"")
            return None

        artists = list(dict.fromkeys(t.artist for t in filtered))
        selected = self.select_tracks(context, artists, pool=filtered)
        if not self.meets_minimum(context, selected):
            logger.info(
                f"Template \"{parsed.name}\": {len(selected)} tracks after per-artist caps, below minimum"
            )
            return None

        return self.make_playlist(
            parsed.name,
            parsed.description or f"Custom playlist: {parsed.name}",
            selected,
        )
