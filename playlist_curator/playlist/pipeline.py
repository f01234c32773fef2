"""
Generator pipeline.

An explicit, instance-owned registry of strategies. ``run`` executes the
enabled strategies by ascending priority, appending what each returns to the
context's playlist list, and stops once the target count is reached.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from ..logging_utils import format_count, truncate_list
from ..models import Playlist
from .strategies.base_strategy import GenerationContext, PlaylistGenerationStrategy

logger = logging.getLogger(__name__)


class GeneratorPipeline:
    """Ordered, filterable set of named generation strategies.

    Usage:
        pipeline = GeneratorPipeline(default_strategies())
        pipeline.disable("decades")
        playlists = pipeline.run(context)
    """

    def __init__(self, strategies: Optional[Iterable[PlaylistGenerationStrategy]] = None):
        self._strategies: Dict[str, PlaylistGenerationStrategy] = {}
        for strategy in strategies or ():
            self.register(strategy)

    def register(self, strategy: PlaylistGenerationStrategy) -> "GeneratorPipeline":
        """Add a strategy, replacing any registered under the same name"""
        if not strategy.name:
            raise ValueError(f"Strategy {strategy.__class__.__name__} has no name")
        if strategy.name in self._strategies:
            logger.debug(f"Replacing strategy: {strategy.name}")
            # Re-registration moves the strategy to the end of the tie-break order
            del self._strategies[strategy.name]
        self._strategies[strategy.name] = strategy
        logger.debug(f"Registered strategy: {strategy!r}")
        return self

    def unregister(self, name: str) -> Optional[PlaylistGenerationStrategy]:
        return self._strategies.pop(name, None)

    def get(self, name: str) -> Optional[PlaylistGenerationStrategy]:
        return self._strategies.get(name)

    def names(self) -> List[str]:
        return list(self._strategies)

    def enable(self, name: str) -> bool:
        """Enable a strategy by name; False when no such strategy exists"""
        return self._set_enabled(name, True)

    def disable(self, name: str) -> bool:
        """Disable a strategy by name; False when no such strategy exists"""
        return self._set_enabled(name, False)

    def _set_enabled(self, name: str, enabled: bool) -> bool:
        strategy = self._strategies.get(name)
        if strategy is None:
            logger.warning(f"Unknown playlist generator: {name}")
            return False
        strategy.enabled = enabled
        return True

    def describe(self) -> List[Dict[str, object]]:
        """Name, priority and enabled flag of every strategy, in run order"""
        return [
            {"name": s.name, "priority": s.priority, "enabled": s.enabled}
            for s in self.ordered(include_disabled=True)
        ]

    def ordered(self, include_disabled: bool = False) -> List[PlaylistGenerationStrategy]:
        """Strategies by ascending priority; ties keep registration order"""
        strategies = [s for s in self._strategies.values() if include_disabled or s.enabled]
        return sorted(strategies, key=lambda s: s.priority)

    def run(self, context: GenerationContext) -> List[Playlist]:
        """
        Run enabled strategies in priority order.

        Strategies after the one that reaches the target count are skipped
        (they stay enabled).

        Returns:
            The context's playlist list
        """
        ordered = self.ordered()
        logger.debug(f"Enabled generators: {truncate_list(ordered, max_items=10, format_fn=lambda s: s.name)}")
        for strategy in ordered:
            logger.info(f"Running playlist generator: {strategy.name}")
            produced = strategy.generate(context)
            context.playlists.extend(produced)
            logger.info(f"Generator {strategy.name} produced {format_count(len(produced), 'playlist')}")

            if context.target_reached():
                logger.info(f"Reached maximum number of playlists ({context.target})")
                break

        return context.playlists

    def __contains__(self, name: str) -> bool:
        return name in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)
