"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.quest.progression import ProgressionRules  # noqa: E402
from src.quest.session import Pacing, QuizController  # noqa: E402
from src.quest.state_store import MemoryBackend, StateStore  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rules():
    """Default 30-node progression rules."""
    return ProgressionRules()


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend, rules):
    return StateStore(backend, rules)


@pytest.fixture
def state(store):
    return store.load()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def celebrations():
    """List that records every celebrate signal."""
    return []


@pytest.fixture
def controller(state, store, clock, celebrations):
    """Quiz controller over fresh progress with a seeded shuffle."""
    return QuizController(
        state,
        store,
        pacing=Pacing(),
        rng=random.Random(1234),
        clock=clock,
        on_celebrate=lambda: celebrations.append(True),
    )


def _answer_correctly(controller: QuizController):
    return controller.answer(controller.current_question.correct_option_index)


def _answer_wrongly(controller: QuizController):
    question = controller.current_question
    wrong = next(i for i in range(len(question.options)) if i != question.correct_option_index)
    return controller.answer(wrong)


@pytest.fixture
def answer_correctly():
    """Answer the presented question with its correct option."""
    return _answer_correctly


@pytest.fixture
def answer_wrongly():
    """Answer the presented question with a wrong option."""
    return _answer_wrongly
