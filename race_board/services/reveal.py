"""
Progressive reveal state for one award leaderboard.

Ranks are disclosed from last place to first. The revealed set only grows,
except for the two full resets: a reveal request on a fully revealed board,
and the show/hide-all toggle. Nothing else touches the set.
"""

import asyncio
import logging
from typing import FrozenSet, Iterable, List, Optional, Set

from race_board.config import Config

logger = logging.getLogger(__name__)


class RevealState:
    """Which ranks of a leaderboard are currently disclosed."""

    def __init__(self, name: str = "", delay: Optional[float] = None, batch_size: Optional[int] = None):
        """
        Initialize an empty reveal state.

        Args:
            name: Label used in log messages (usually the award key)
            delay: Seconds to wait before a reveal commits (animation time)
            batch_size: Ranks disclosed by one batch reveal
        """
        self.name = name
        self.delay = Config.REVEAL_DELAY_SECONDS if delay is None else delay
        self.batch_size = Config.REVEAL_BATCH_SIZE if batch_size is None else batch_size
        self._revealed: Set[int] = set()
        self.is_revealing = False

    @property
    def revealed_ranks(self) -> FrozenSet[int]:
        return frozenset(self._revealed)

    # Mutations: add-one / add-batch share _add, resets go through _clear

    def _add(self, ranks: Iterable[int]):
        self._revealed.update(ranks)

    def _clear(self):
        self._revealed.clear()

    # Queries

    def revealed_in(self, present_ranks: Iterable[int]) -> FrozenSet[int]:
        """Revealed ranks that exist in the given ranking."""
        return frozenset(self._revealed.intersection(present_ranks))

    def is_rank_revealed(self, rank: int) -> bool:
        return rank in self._revealed

    def is_fully_revealed(self, present_ranks: Iterable[int]) -> bool:
        """True when at least one rank is shown and every present rank is."""
        present = set(present_ranks)
        revealed = self.revealed_in(present)
        return len(revealed) > 0 and len(revealed) == len(present)

    def unrevealed(self, present_ranks: Iterable[int]) -> List[int]:
        """Hidden ranks, worst first."""
        return sorted(set(present_ranks) - self._revealed, reverse=True)

    # Transitions

    async def reveal_next(self, present_ranks: Iterable[int]):
        """Disclose the worst hidden rank, or reset when everything is shown."""
        await self._reveal(present_ranks, 1)

    async def reveal_batch(self, present_ranks: Iterable[int], count: Optional[int] = None):
        """Disclose up to ``count`` of the worst hidden ranks at once."""
        await self._reveal(present_ranks, count or self.batch_size)

    async def _reveal(self, present_ranks: Iterable[int], count: int):
        present = set(present_ranks)

        if self.is_revealing:
            logger.debug(f"[{self.name}] reveal ignored: a reveal is already in progress")
            return

        if self.is_fully_revealed(present):
            self._clear()
            logger.info(f"[{self.name}] all ranks were shown; reveal state reset")
            return

        targets = self.unrevealed(present)[:count]
        if not targets:
            logger.debug(f"[{self.name}] nothing left to reveal")
            return

        self.is_revealing = True
        try:
            await asyncio.sleep(self.delay)
            self._add(targets)
            logger.info(f"[{self.name}] revealed rank(s) {', '.join(str(rank) for rank in targets)}")
        finally:
            self.is_revealing = False

    def reveal_all(self, present_ranks: Iterable[int]):
        """Show every present rank, or hide everything if all are shown."""
        present = set(present_ranks)
        if self.is_fully_revealed(present):
            self._clear()
            logger.info(f"[{self.name}] all ranks hidden")
            return

        self._clear()
        self._add(present)
        logger.info(f"[{self.name}] all {len(present)} rank(s) revealed")
