"""
Unit tests for the static question bank.
"""

import dataclasses

import pytest

from src.quest.question_bank import POOLS, Question, Tier, get_pool


class TestPools:
    def test_four_tiers(self):
        assert set(POOLS) == {Tier.EASY, Tier.MEDIUM, Tier.HARD, Tier.EXPERT}

    @pytest.mark.parametrize("tier", list(Tier))
    def test_each_tier_has_five_questions(self, tier):
        assert len(get_pool(tier)) >= 5

    @pytest.mark.parametrize("tier", list(Tier))
    def test_questions_are_well_formed(self, tier):
        for question in get_pool(tier):
            assert question.prompt
            assert 2 <= len(question.options) <= 4
            assert 0 <= question.correct_option_index < len(question.options)

    def test_lookup_by_name(self):
        assert get_pool("easy") is get_pool(Tier.EASY)
        assert get_pool("EXPERT") is get_pool(Tier.EXPERT)

    def test_unknown_tier_name(self):
        with pytest.raises(ValueError):
            get_pool("legendary")

    def test_pools_are_read_only(self):
        pool = get_pool(Tier.EASY)
        assert isinstance(pool, tuple)
        with pytest.raises(dataclasses.FrozenInstanceError):
            pool[0].prompt = "changed"


class TestQuestion:
    def test_is_correct(self):
        question = get_pool(Tier.EASY)[3]
        assert question.correct_option == "<a>"
        assert question.is_correct(1) is True
        assert question.is_correct(0) is False

    def test_rejects_too_few_options(self):
        with pytest.raises(ValueError):
            Question(prompt="?", options=("only",), correct_option_index=0)

    def test_rejects_bad_answer_index(self):
        with pytest.raises(ValueError):
            Question(prompt="?", options=("a", "b"), correct_option_index=2)
