"""
Progression rules: XP requirements, difficulty tiers and unlocking.

Rules:
- Node i needs base_xp + i * xp_increment_per_node XP.
- Every correct answer awards a fixed xp_per_correct, clamped to the requirement.
- Filling a node's bar completes it and unlocks the next node. This is the
  only way a node other than node 0 gets unlocked.
- Nodes are split into four contiguous tiers (easy/medium/hard/expert) at
  configurable boundary indices.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from loguru import logger

from .models import Node, QuestState
from .question_bank import Tier

TIER_ORDER = (Tier.EASY, Tier.MEDIUM, Tier.HARD, Tier.EXPERT)


def default_tier_boundaries(node_count: int) -> tuple[int, int, int]:
    """
    Split node_count into quarters of ceil(node_count / 4) nodes.

    The expert tier takes whatever remains, so 30 nodes give (8, 16, 24).
    Small maps may leave the last tiers empty.
    """
    band = math.ceil(node_count / 4)
    return (min(band, node_count), min(2 * band, node_count), min(3 * band, node_count))


@dataclass(frozen=True)
class ProgressionRules:
    """
    Configuration for XP requirements and tiering.

    Without explicit tier_boundaries the nodes are quartered with
    default_tier_boundaries(node_count).
    """

    node_count: int = 30
    base_xp: int = 100
    xp_increment_per_node: int = 25
    xp_per_correct: int = 25
    tier_boundaries: tuple[int, int, int] | None = None

    def __post_init__(self) -> None:
        if self.node_count < 1:
            raise ValueError(f"node_count must be positive, got {self.node_count}")
        if self.tier_boundaries is None:
            object.__setattr__(self, "tier_boundaries", default_tier_boundaries(self.node_count))
            return
        a, b, c = self.tier_boundaries
        if not 0 <= a <= b <= c <= self.node_count:
            raise ValueError(
                f"tier_boundaries {self.tier_boundaries} must be ascending within 0..{self.node_count}"
            )


@dataclass(frozen=True)
class AnswerOutcome:
    """What a correct answer changed."""

    node_index: int
    xp_gained: int
    xp: int
    required_xp: int
    completed_now: bool = False
    unlocked_index: int | None = None


def required_xp(index: int, rules: ProgressionRules) -> int:
    """XP needed to complete node `index`. Strictly increasing in index."""
    return rules.base_xp + index * rules.xp_increment_per_node


def answers_needed(index: int, rules: ProgressionRules) -> int:
    """Correct answers needed to fill an empty node."""
    return math.ceil(required_xp(index, rules) / rules.xp_per_correct)


def progress_fraction(node: Node, rules: ProgressionRules) -> float:
    """Fill level of a node's XP bar, 0.0-1.0."""
    return node.xp / required_xp(node.index, rules)


def difficulty_for_node(index: int, rules: ProgressionRules) -> Tier:
    """Tier a node draws its questions from."""
    for boundary, tier in zip(rules.tier_boundaries, TIER_ORDER):
        if index < boundary:
            return tier
    return Tier.EXPERT


def apply_correct_answer(state: QuestState, index: int, rules: ProgressionRules) -> AnswerOutcome:
    """
    Award XP for one correct answer on node `index`.

    Mutates `state` in place: the node's XP grows by the fixed reward (clamped
    to its requirement). When the requirement is reached the node is marked
    completed and the following node, if any, is unlocked.

    Returns:
        AnswerOutcome describing the change
    """
    node = state.nodes[index]
    needed = required_xp(index, rules)
    before = node.xp
    node.xp = max(0, min(needed, node.xp + rules.xp_per_correct))

    completed_now = False
    unlocked_index = None
    if node.xp == needed and not node.completed:
        node.completed = True
        completed_now = True
        logger.info(f"Node {index} completed ({needed} XP)")
        nxt = index + 1
        if nxt < len(state.nodes) and not state.nodes[nxt].unlocked:
            state.nodes[nxt].unlocked = True
            unlocked_index = nxt
            logger.info(f"Node {nxt} unlocked")

    return AnswerOutcome(
        node_index=index,
        xp_gained=node.xp - before,
        xp=node.xp,
        required_xp=needed,
        completed_now=completed_now,
        unlocked_index=unlocked_index,
    )
