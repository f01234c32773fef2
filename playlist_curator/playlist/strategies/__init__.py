"""
Playlist Generation Strategies
==============================

Strategy implementations for the generator pipeline.

Default registry (ascending priority):
- GenrePlaylistStrategy ("genres", 10)
- FolderPlaylistStrategy ("folders", 20)
- RecentlyAddedStrategy ("recentlyAdded", 30)
- DecadePlaylistStrategy ("decades", 40)
- SmartMixStrategy ("smartMix", 50)
- CoverageStrategy ("coverage", 100)

TemplatePlaylistStrategy runs after the registry, outside it.
"""

from typing import List

from .base_strategy import (
    GenerationContext,
    PlaylistGenerationStrategy,
)
from .coverage_strategy import CoverageStrategy
from .decade_strategy import DecadePlaylistStrategy
from .folder_strategy import FolderPlaylistStrategy
from .genre_strategy import GenrePlaylistStrategy
from .recent_strategy import RecentlyAddedStrategy
from .smart_mix_strategy import SmartMixStrategy
from .template_strategy import TemplatePlaylistStrategy


def default_strategies() -> List[PlaylistGenerationStrategy]:
    """Fresh instances of the default registry strategies"""
    return [
        GenrePlaylistStrategy(),
        FolderPlaylistStrategy(),
        RecentlyAddedStrategy(),
        DecadePlaylistStrategy(),
        SmartMixStrategy(),
        CoverageStrategy(),
    ]


__all__ = [
    "GenerationContext",
    "PlaylistGenerationStrategy",
    "GenrePlaylistStrategy",
    "FolderPlaylistStrategy",
    "RecentlyAddedStrategy",
    "DecadePlaylistStrategy",
    "SmartMixStrategy",
    "CoverageStrategy",
    "TemplatePlaylistStrategy",
    "default_strategies",
]
