"""
Shared ranking utilities for the award leaderboards.

One dense-rank assigner serves all three awards; the award only supplies the
comparable value and its direction through an AwardStrategy.
"""

import logging
import unicodedata
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from race_board.data_models.team import RankedTeam, Team
from race_board.utils.metrics import TeamMetrics
from race_board.utils.scoring_strategies import AwardStrategy, CollectionAwardStrategy

logger = logging.getLogger(__name__)


def name_collation_key(name: str) -> str:
    """Case- and width-insensitive key for ordering team names."""
    return unicodedata.normalize("NFKC", name or "").casefold()


def _amount(team: Team) -> float:
    return team.final_amount if team.final_amount is not None else 0


def team_order_key(team: Team) -> Tuple[float, str]:
    """Fallback total order: amount descending, then name ascending."""
    return (-_amount(team), name_collation_key(team.name))


class RankingUtility:
    """Dense ranking with tie detection, shared by every award."""

    @staticmethod
    def assign_dense_ranks(
        scored: Sequence[Tuple[Team, float, float]],
        value_key: Callable[[float], float],
    ) -> List[RankedTeam]:
        """
        Sort scored teams and assign dense ranks.

        Equal values share a rank and every member of the tie run is flagged;
        the next distinct value takes the previous rank + 1.

        Args:
            scored: (team, hp_total, value) for every applicable team
            value_key: Maps a value to a key that sorts better values first
                (an AwardStrategy's sort_key)

        Returns:
            Ranked teams, best first
        """
        def sort_key(item):
            team, _, value = item
            return (value_key(value),) + team_order_key(team)

        ordered = sorted(scored, key=sort_key)

        ranks: List[int] = []
        for index, (_, _, value) in enumerate(ordered):
            if index == 0:
                ranks.append(1)
            elif value == ordered[index - 1][2]:
                ranks.append(ranks[-1])
            else:
                ranks.append(ranks[-1] + 1)

        results = []
        for index, (team, hp_total, value) in enumerate(ordered):
            is_tie = (
                (index > 0 and ranks[index - 1] == ranks[index])
                or (index + 1 < len(ranks) and ranks[index + 1] == ranks[index])
            )
            results.append(RankedTeam(
                team=team,
                hp_total=hp_total,
                score=value,
                rank=ranks[index],
                is_tie=is_tie,
                qualified=True,
            ))
        return results

    @staticmethod
    def compute_ranking(roster: Sequence[Team], strategy: AwardStrategy) -> List[RankedTeam]:
        """
        Build the full leaderboard for one award.

        Qualified teams come first with dense ranks. Teams the award does not
        apply to follow in roster order, each taking the next rank in turn.
        """
        applicable: List[Tuple[Team, float, float]] = []
        not_applicable: List[Tuple[Team, float]] = []

        for team in roster:
            hp_total = TeamMetrics.get_hp_total(team.members)
            value = strategy.score(team, hp_total)
            if value is None:
                not_applicable.append((team, hp_total))
            else:
                applicable.append((team, hp_total, value))

        ranking = RankingUtility.assign_dense_ranks(applicable, strategy.sort_key)

        next_rank = ranking[-1].rank + 1 if ranking else 1
        for team, hp_total in not_applicable:
            ranking.append(RankedTeam(
                team=team,
                hp_total=hp_total,
                score=None,
                rank=next_rank,
                is_tie=False,
                qualified=False,
            ))
            next_rank += 1

        logger.debug(
            f"{strategy.key} ranking: {len(applicable)} qualified, "
            f"{len(not_applicable)} not applicable"
        )
        return ranking

    @staticmethod
    def qualifying_order(roster: Sequence[Team]) -> List[RankedTeam]:
        """
        Plain qualifying order over every team.

        Amount descending, name ascending as the tie-break; teams with the
        same amount share a dense rank.
        """
        strategy = CollectionAwardStrategy()
        scored = []
        for team in roster:
            hp_total = TeamMetrics.get_hp_total(team.members)
            scored.append((team, hp_total, strategy.score(team, hp_total)))
        return RankingUtility.assign_dense_ranks(scored, strategy.sort_key)

    @staticmethod
    def rank_map(ranking: Sequence[RankedTeam], qualified_only: bool = True) -> Dict[str, Optional[int]]:
        """Team id -> rank, with None for teams outside the qualified block."""
        return {
            entry.team_id: (entry.rank if entry.qualified or not qualified_only else None)
            for entry in ranking
        }

    @staticmethod
    def distinct_ranks(ranking: Sequence[RankedTeam]) -> List[int]:
        """Distinct rank values, worst first (the reveal order)."""
        return sorted({entry.rank for entry in ranking}, reverse=True)
