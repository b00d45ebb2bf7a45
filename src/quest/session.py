"""
Quiz session controller: the per-node question loop.

State machine:

    IDLE --open--> PRESENTING --answer--> CORRECT   --(delay)--> PRESENTING
                                    \\--> INCORRECT --(delay)--> PRESENTING
                                    \\--> COMPLETED --(delay)--> IDLE (closed)

Questions come from a shuffled copy of the node's tier pool. When the copy
runs out a fresh shuffle of the full pool is queued, so questions repeat for
as long as it takes to fill the XP bar.

Feedback pauses are explicit PendingTransition records rather than timers.
The presentation layer calls tick() (or advance()) to fire them; close()
drops the session together with its pending transition, so nothing from a
closed session can touch progress afterwards.
"""

from __future__ import annotations

import random
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from .models import QuestState
from .progression import AnswerOutcome, ProgressionRules, apply_correct_answer, difficulty_for_node
from .question_bank import Question, Tier, get_pool
from .state_store import StateStore


class QuizPhase(str, Enum):
    """Where the controller is in the question loop."""

    IDLE = "idle"
    PRESENTING = "presenting"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    COMPLETED = "completed"


class TransitionKind(str, Enum):
    ADVANCE = "advance"  # show the next question
    CLOSE = "close"  # end the completed session


@dataclass(frozen=True)
class Pacing:
    """Feedback pauses in seconds."""

    correct: float = 0.65
    incorrect: float = 0.70
    completion: float = 0.90


@dataclass(frozen=True)
class PendingTransition:
    """A transition scheduled to fire at `due_at` (clock seconds)."""

    kind: TransitionKind
    due_at: float


@dataclass(frozen=True)
class AnswerFeedback:
    """Result of answering the presented question."""

    correct: bool
    selected_index: int
    correct_index: int
    message: str
    outcome: AnswerOutcome | None = None

    @property
    def completed(self) -> bool:
        return self.outcome is not None and self.outcome.completed_now


@dataclass
class ActiveQuiz:
    """Transient state of one open node. Never persisted."""

    node_index: int
    tier: Tier
    remaining: deque[Question]
    phase: QuizPhase = QuizPhase.PRESENTING
    current: Question | None = None
    pending: PendingTransition | None = None
    answered: int = 0
    correct: int = 0
    refills: int = 0


class QuizController:
    """
    Runs quiz sessions against a learner snapshot.

    At most one session is active at a time. Invalid calls (opening a
    locked node, answering out of turn, out-of-range options) are ignored
    and leave progress untouched.
    """

    CORRECT_MESSAGE = "Correct!"
    INCORRECT_MESSAGE = "Try another one!"

    def __init__(
        self,
        state: QuestState,
        store: StateStore,
        rules: ProgressionRules | None = None,
        pacing: Pacing | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_celebrate: Callable[[], None] | None = None,
    ):
        """
        Initialize the controller.

        Args:
            state: Snapshot to mutate (owned by the caller's StateStore)
            store: Store used to persist after every state change
            rules: Progression rules (defaults to the store's rules)
            pacing: Feedback delays
            rng: Random source for shuffling
            clock: Monotonic time source used for scheduled transitions
            on_celebrate: Fire-and-forget hook called when a node completes
        """
        self.state = state
        self.store = store
        self.rules = rules or store.rules
        self.pacing = pacing or Pacing()
        self.rng = rng or random.Random()
        self.clock = clock
        self.on_celebrate = on_celebrate
        self.quiz: ActiveQuiz | None = None

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def phase(self) -> QuizPhase:
        return self.quiz.phase if self.quiz else QuizPhase.IDLE

    @property
    def current_question(self) -> Question | None:
        return self.quiz.current if self.quiz else None

    @property
    def pending(self) -> PendingTransition | None:
        return self.quiz.pending if self.quiz else None

    def seconds_until_due(self) -> float | None:
        """Time left before the pending transition fires, or None."""
        if self.pending is None:
            return None
        return max(0.0, self.pending.due_at - self.clock())

    # =========================================================================
    # Transitions
    # =========================================================================

    def _shuffled_pool(self, tier: Tier) -> deque[Question]:
        questions = list(get_pool(tier))
        self.rng.shuffle(questions)
        return deque(questions)

    def open(self, node_index: int) -> bool:
        """
        Start a session on a node.

        Returns:
            True if a session started, False if the request was ignored
        """
        if self.quiz is not None:
            logger.debug(f"Ignoring open({node_index}): node {self.quiz.node_index} is already open")
            return False
        if not 0 <= node_index < len(self.state.nodes):
            logger.debug(f"Ignoring open({node_index}): no such node")
            return False
        node = self.state.nodes[node_index]
        if not node.unlocked:
            logger.debug(f"Ignoring open({node_index}): node is locked")
            return False

        self.state.current_node = node_index
        self.store.save(self.state)

        tier = difficulty_for_node(node_index, self.rules)
        self.quiz = ActiveQuiz(node_index=node_index, tier=tier, remaining=self._shuffled_pool(tier))
        logger.info(f"Opened node {node_index} ({tier.value})")
        self.present_next()
        return True

    def present_next(self) -> Question | None:
        """
        Pop and present the next question, refilling the queue when empty.

        Returns:
            The presented question, or None if no session can present one
        """
        quiz = self.quiz
        if quiz is None or quiz.phase == QuizPhase.COMPLETED:
            return None

        if not quiz.remaining:
            quiz.remaining = self._shuffled_pool(quiz.tier)
            quiz.refills += 1
            logger.debug(f"Question pool for node {quiz.node_index} reshuffled ({quiz.refills})")

        quiz.current = quiz.remaining.popleft()
        quiz.phase = QuizPhase.PRESENTING
        quiz.pending = None
        return quiz.current

    def answer(self, selected_index: int) -> AnswerFeedback | None:
        """
        Answer the presented question.

        Returns:
            AnswerFeedback, or None if the answer was ignored
        """
        quiz = self.quiz
        if quiz is None or quiz.phase != QuizPhase.PRESENTING or quiz.current is None:
            logger.debug(f"Ignoring answer({selected_index}): no question awaiting input")
            return None
        question = quiz.current
        if not 0 <= selected_index < len(question.options):
            logger.debug(f"Ignoring answer({selected_index}): option out of range")
            return None

        quiz.answered += 1
        now = self.clock()

        if not question.is_correct(selected_index):
            quiz.phase = QuizPhase.INCORRECT
            quiz.pending = PendingTransition(TransitionKind.ADVANCE, now + self.pacing.incorrect)
            return AnswerFeedback(
                correct=False,
                selected_index=selected_index,
                correct_index=question.correct_option_index,
                message=self.INCORRECT_MESSAGE,
            )

        quiz.correct += 1
        outcome = apply_correct_answer(self.state, quiz.node_index, self.rules)
        self.store.save(self.state)

        if outcome.completed_now:
            quiz.phase = QuizPhase.COMPLETED
            quiz.pending = PendingTransition(TransitionKind.CLOSE, now + self.pacing.completion)
            if self.on_celebrate is not None:
                self.on_celebrate()
        else:
            quiz.phase = QuizPhase.CORRECT
            quiz.pending = PendingTransition(TransitionKind.ADVANCE, now + self.pacing.correct)

        return AnswerFeedback(
            correct=True,
            selected_index=selected_index,
            correct_index=question.correct_option_index,
            message=self.CORRECT_MESSAGE,
            outcome=outcome,
        )

    def _fire(self, transition: PendingTransition) -> None:
        if transition.kind is TransitionKind.CLOSE:
            self.close()
        else:
            self.present_next()

    def tick(self, now: float | None = None) -> QuizPhase:
        """Fire the pending transition if it is due. Returns the resulting phase."""
        pending = self.pending
        if pending is not None:
            now = self.clock() if now is None else now
            if now >= pending.due_at:
                self._fire(pending)
        return self.phase

    def advance(self) -> QuizPhase:
        """Fire the pending transition immediately, skipping the pause."""
        pending = self.pending
        if pending is not None:
            self._fire(pending)
        return self.phase

    def close(self) -> None:
        """Discard the active session and anything scheduled for it."""
        if self.quiz is None:
            return
        logger.info(
            f"Closed node {self.quiz.node_index} after {self.quiz.answered} answers "
            f"({self.quiz.correct} correct)"
        )
        self.quiz = None
