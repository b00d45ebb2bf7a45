"""
Unit tests for progression rules.

Covers XP requirements, tier bands and unlock propagation.
"""

import pytest

from src.quest.models import default_state
from src.quest.progression import (
    ProgressionRules,
    answers_needed,
    apply_correct_answer,
    default_tier_boundaries,
    difficulty_for_node,
    progress_fraction,
    required_xp,
)
from src.quest.question_bank import Tier


class TestRequiredXp:
    def test_first_node_needs_base_xp(self, rules):
        assert required_xp(0, rules) == 100

    def test_linear_growth(self, rules):
        assert required_xp(1, rules) == 125
        assert required_xp(29, rules) == 100 + 29 * 25

    def test_strictly_increasing(self, rules):
        values = [required_xp(i, rules) for i in range(rules.node_count)]
        assert all(a < b for a, b in zip(values, values[1:]))

    def test_answers_needed(self, rules):
        """Node 0 takes 4 answers; node 29 takes 4 + 29."""
        assert answers_needed(0, rules) == 4
        assert answers_needed(29, rules) == 33

    def test_answers_needed_rounds_up(self):
        rules = ProgressionRules(base_xp=100, xp_increment_per_node=10, xp_per_correct=30)
        assert answers_needed(0, rules) == 4


class TestDifficultyForNode:
    def test_thirty_node_bands(self, rules):
        """Quartering over 30 nodes gives 0-7 / 8-15 / 16-23 / 24-29."""
        tiers = [difficulty_for_node(i, rules) for i in range(30)]
        assert tiers[:8] == [Tier.EASY] * 8
        assert tiers[8:16] == [Tier.MEDIUM] * 8
        assert tiers[16:24] == [Tier.HARD] * 8
        assert tiers[24:] == [Tier.EXPERT] * 6

    def test_default_boundaries_for_thirty(self):
        assert default_tier_boundaries(30) == (8, 16, 24)

    def test_default_boundaries_for_even_split(self):
        assert default_tier_boundaries(40) == (10, 20, 30)
        assert default_tier_boundaries(4) == (1, 2, 3)

    def test_default_boundaries_clamped_to_node_count(self):
        assert default_tier_boundaries(5) == (2, 4, 5)

    def test_rules_quarter_small_map_by_default(self):
        rules = ProgressionRules(node_count=12)
        tiers = [difficulty_for_node(i, rules) for i in range(12)]

        assert rules.tier_boundaries == (3, 6, 9)
        assert tiers == [Tier.EASY] * 3 + [Tier.MEDIUM] * 3 + [Tier.HARD] * 3 + [Tier.EXPERT] * 3

    def test_rules_reject_boundaries_outside_map(self):
        with pytest.raises(ValueError):
            ProgressionRules(node_count=10, tier_boundaries=(3, 6, 12))

    def test_rules_reject_descending_boundaries(self):
        with pytest.raises(ValueError):
            ProgressionRules(tier_boundaries=(16, 8, 24))

    def test_custom_boundaries(self):
        rules = ProgressionRules(node_count=10, tier_boundaries=(2, 4, 6))
        assert difficulty_for_node(1, rules) is Tier.EASY
        assert difficulty_for_node(2, rules) is Tier.MEDIUM
        assert difficulty_for_node(5, rules) is Tier.HARD
        assert difficulty_for_node(9, rules) is Tier.EXPERT

    def test_bands_are_contiguous(self, rules):
        order = [Tier.EASY, Tier.MEDIUM, Tier.HARD, Tier.EXPERT]
        ranks = [order.index(difficulty_for_node(i, rules)) for i in range(rules.node_count)]
        assert ranks == sorted(ranks)


class TestApplyCorrectAnswer:
    def test_adds_fixed_reward(self, rules):
        state = default_state(rules.node_count)
        outcome = apply_correct_answer(state, 0, rules)

        assert state.nodes[0].xp == 25
        assert outcome.xp_gained == 25
        assert outcome.completed_now is False
        assert outcome.unlocked_index is None
        assert state.nodes[1].unlocked is False

    def test_four_answers_complete_first_node(self, rules):
        state = default_state(rules.node_count)
        outcomes = [apply_correct_answer(state, 0, rules) for _ in range(4)]

        assert state.nodes[0].xp == 100
        assert state.nodes[0].completed is True
        assert state.nodes[1].unlocked is True
        assert outcomes[-1].completed_now is True
        assert outcomes[-1].unlocked_index == 1
        assert not any(o.completed_now for o in outcomes[:-1])

    def test_xp_clamped_to_requirement(self):
        rules = ProgressionRules(base_xp=90, xp_per_correct=25)
        state = default_state(rules.node_count)
        for _ in range(4):
            apply_correct_answer(state, 0, rules)

        assert state.nodes[0].xp == 90
        assert state.nodes[0].completed is True

    def test_completed_node_gains_nothing(self, rules):
        state = default_state(rules.node_count)
        for _ in range(4):
            apply_correct_answer(state, 0, rules)

        outcome = apply_correct_answer(state, 0, rules)

        assert state.nodes[0].xp == 100
        assert outcome.xp_gained == 0
        assert outcome.completed_now is False

    def test_last_node_completion_unlocks_nothing(self):
        rules = ProgressionRules(node_count=2, tier_boundaries=(1, 1, 2))
        state = default_state(2)
        state.nodes[1].unlocked = True
        outcome = None
        for _ in range(answers_needed(1, rules)):
            outcome = apply_correct_answer(state, 1, rules)

        assert outcome.completed_now is True
        assert outcome.unlocked_index is None

    def test_only_next_node_unlocks(self, rules):
        state = default_state(rules.node_count)
        for _ in range(4):
            apply_correct_answer(state, 0, rules)

        assert [n.unlocked for n in state.nodes[:3]] == [True, True, False]

    def test_progress_fraction(self, rules):
        state = default_state(rules.node_count)
        apply_correct_answer(state, 0, rules)
        assert progress_fraction(state.nodes[0], rules) == pytest.approx(0.25)
