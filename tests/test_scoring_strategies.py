"""Tests for the three award scoring strategies."""

import pytest

from race_board.constants import AwardConstants, UIConstants
from race_board.data_models.team import RankedTeam
from race_board.utils.scoring_strategies import (
    AwardStrategyFactory, CollectionAwardStrategy, MasterAwardStrategy, TimeAttackStrategy
)


class TestMasterAward:
    def setup_method(self):
        self.strategy = MasterAwardStrategy()

    def test_formula(self, make_team):
        team = make_team("A", 250000, 35, 5)
        assert self.strategy.score(team, 360) == pytest.approx(250000 / 35 * 360 * 5)

    def test_level_does_not_gate_applicability(self, make_team):
        team = make_team("C", 180000, 32, 3)
        assert self.strategy.score(team, 285) == pytest.approx(4_809_375)

    @pytest.mark.parametrize("amount, minutes, hp_total", [
        (0, 35, 360),
        (250000, 0, 360),
        (250000, 35, 0),
        (None, 35, 360),
        (250000, None, 360),
    ])
    def test_not_applicable_when_any_input_is_zero_or_absent(self, make_team, amount, minutes, hp_total):
        team = make_team("X", amount, minutes, 5)
        assert self.strategy.score(team, hp_total) is None

    def test_higher_is_better(self):
        assert self.strategy.higher_is_better
        assert self.strategy.sort_key(10) < self.strategy.sort_key(5)


class TestCollectionAward:
    def test_amount_is_the_score(self, make_team):
        assert CollectionAwardStrategy().score(make_team("A", 123456), 0) == 123456

    def test_absent_amount_is_ranked_as_zero(self, make_team):
        assert CollectionAwardStrategy().score(make_team("A"), 320) == 0

    def test_display_uses_currency(self, make_team):
        ranked = RankedTeam(team=make_team("A", 250000), hp_total=0, score=250000, rank=1, is_tie=False)
        assert CollectionAwardStrategy().display_value(ranked) == "$250,000"


class TestTimeAttack:
    def setup_method(self):
        self.strategy = TimeAttackStrategy()

    def test_level_five_with_minutes_qualifies(self, make_team):
        assert self.strategy.score(make_team("A", minutes=35, level=5), 0) == 35

    def test_level_four_never_qualifies(self, make_team):
        assert self.strategy.score(make_team("A", minutes=1, level=4), 0) is None

    def test_level_five_with_zero_minutes_is_excluded(self, make_team):
        assert self.strategy.score(make_team("A", minutes=0, level=5), 0) is None

    def test_level_five_with_unknown_minutes_is_excluded(self, make_team):
        assert self.strategy.score(make_team("A", level=5), 0) is None

    def test_lower_is_better(self):
        assert not self.strategy.higher_is_better
        assert self.strategy.sort_key(30) < self.strategy.sort_key(40)

    def test_display_for_excluded_team(self, make_team):
        ranked = RankedTeam(team=make_team("A", level=4), hp_total=0, score=None, rank=2, is_tie=False, qualified=False)
        assert self.strategy.display_value(ranked) == UIConstants.NOT_REACHED


class TestAwardStrategyFactory:
    def test_creates_every_award(self):
        for award in AwardStrategyFactory.get_available_awards():
            assert AwardStrategyFactory.create_strategy(award).key == award

    def test_key_is_case_insensitive(self):
        assert isinstance(AwardStrategyFactory.create_strategy("MASTER"), MasterAwardStrategy)

    def test_unknown_award(self):
        with pytest.raises(ValueError):
            AwardStrategyFactory.create_strategy("speedrun")

    def test_titles(self):
        strategy = AwardStrategyFactory.create_strategy(AwardConstants.TIME_ATTACK)
        assert strategy.title == AwardConstants.TITLES[AwardConstants.TIME_ATTACK]
