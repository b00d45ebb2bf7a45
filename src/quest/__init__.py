"""
Quest: progression core for the HTML Quest map game.

Components:
- question_bank: Immutable difficulty-tiered question pools
- progression: XP requirements, tiering and unlock propagation
- state_store: Validated snapshot persistence
- session: Quiz session state machine with scheduled transitions
- layout: Node positions on the vertical map
"""

from .layout import Biome, MapLayout, NodePosition, NodeView, build_node_views, compute_position, scroll_extent
from .models import Node, QuestState, default_state
from .progression import (
    AnswerOutcome,
    ProgressionRules,
    apply_correct_answer,
    difficulty_for_node,
    required_xp,
)
from .question_bank import POOLS, Question, Tier, get_pool
from .session import AnswerFeedback, Pacing, QuizController, QuizPhase
from .state_store import (
    InvalidSnapshot,
    JsonFileBackend,
    MemoryBackend,
    MissingSnapshot,
    StateStore,
    deserialize,
    serialize,
)

__all__ = [
    # Models
    "Node",
    "QuestState",
    "default_state",
    # Questions
    "POOLS",
    "Question",
    "Tier",
    "get_pool",
    # Progression
    "AnswerOutcome",
    "ProgressionRules",
    "apply_correct_answer",
    "difficulty_for_node",
    "required_xp",
    # Persistence
    "StateStore",
    "JsonFileBackend",
    "MemoryBackend",
    "MissingSnapshot",
    "InvalidSnapshot",
    "deserialize",
    "serialize",
    # Sessions
    "QuizController",
    "QuizPhase",
    "AnswerFeedback",
    "Pacing",
    # Layout
    "Biome",
    "MapLayout",
    "NodePosition",
    "NodeView",
    "build_node_views",
    "compute_position",
    "scroll_extent",
]
