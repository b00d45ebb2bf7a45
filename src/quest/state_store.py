"""
Snapshot persistence for quest progress.

Progress is stored as one JSON document:

    {"nodes": [{"index": 0, "xp": 25, "completed": false, "unlocked": true}, ...],
     "currentNode": 0}

Every save replaces the whole document. Loading validates the document
against both its shape and the progression invariants; anything that fails
is treated exactly like a missing file and replaced by default progress.

Default file location: ~/.html_quest/state.json
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import Node, QuestState, default_state
from .progression import ProgressionRules, required_xp

# =============================================================================
# Persistence Backends
# =============================================================================


class PersistenceBackend(Protocol):
    """Where serialized snapshots live."""

    def read(self) -> str | None:
        """Return the stored snapshot text, or None when there is none."""
        ...

    def write(self, data: str) -> None:
        """Replace the stored snapshot text."""
        ...


class JsonFileBackend:
    """Snapshot stored in a single JSON file."""

    DEFAULT_PATH = Path.home() / ".html_quest" / "state.json"

    def __init__(self, path: Path | None = None):
        self.path = path or self.DEFAULT_PATH

    def read(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {self.path}: {e}")
            return None

    def write(self, data: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(data, encoding="utf-8")
        tmp.replace(self.path)


class MemoryBackend:
    """In-process backend for tests and throwaway sessions."""

    def __init__(self, data: str | None = None):
        self.data = data
        self.writes = 0

    def read(self) -> str | None:
        return self.data

    def write(self, data: str) -> None:
        self.data = data
        self.writes += 1


# =============================================================================
# Deserialization
# =============================================================================


class _NodeRecord(BaseModel):
    model_config = ConfigDict(strict=True)

    index: int = Field(ge=0)
    xp: int = Field(ge=0)
    completed: bool
    unlocked: bool


class _SnapshotRecord(BaseModel):
    model_config = ConfigDict(strict=True)

    nodes: list[_NodeRecord]
    currentNode: int = Field(ge=0)


@dataclass(frozen=True)
class MissingSnapshot:
    """Nothing has been persisted yet."""


@dataclass(frozen=True)
class InvalidSnapshot:
    """Persisted data exists but cannot be trusted."""

    reason: str


LoadResult = QuestState | MissingSnapshot | InvalidSnapshot


def serialize(state: QuestState) -> str:
    """Render a snapshot as JSON text."""
    return json.dumps(state.to_dict())


def _check_invariants(record: _SnapshotRecord, rules: ProgressionRules) -> str | None:
    """Return why the record breaks the progression rules, or None if it holds."""
    if len(record.nodes) != rules.node_count:
        return f"expected {rules.node_count} nodes, found {len(record.nodes)}"
    if record.currentNode >= rules.node_count:
        return f"currentNode {record.currentNode} out of range"

    for position, node in enumerate(record.nodes):
        if node.index != position:
            return f"node at position {position} has index {node.index}"
        needed = required_xp(position, rules)
        if node.xp > needed:
            return f"node {position} has {node.xp} XP, more than {needed}"
        if node.completed != (node.xp == needed):
            return f"node {position} completion flag disagrees with its XP"
        if node.xp > 0 and not node.unlocked:
            return f"node {position} has XP while locked"
        if position == 0:
            if not node.unlocked:
                return "node 0 is locked"
        elif node.unlocked != record.nodes[position - 1].completed:
            return f"node {position} lock state disagrees with node {position - 1} completion"
    return None


def deserialize(raw: str | None, rules: ProgressionRules) -> LoadResult:
    """
    Parse persisted snapshot text.

    Returns either a fully valid QuestState, MissingSnapshot when `raw` is
    None or empty, or InvalidSnapshot with the first problem found. Never a
    partially valid state.
    """
    if raw is None or not raw.strip():
        return MissingSnapshot()

    try:
        record = _SnapshotRecord.model_validate_json(raw)
    except ValidationError as e:
        return InvalidSnapshot(reason=f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}")

    problem = _check_invariants(record, rules)
    if problem is not None:
        return InvalidSnapshot(reason=problem)

    nodes = [
        Node(index=n.index, xp=n.xp, completed=n.completed, unlocked=n.unlocked)
        for n in record.nodes
    ]
    return QuestState(nodes=nodes, current_node=record.currentNode)


# =============================================================================
# State Store
# =============================================================================


class StateStore:
    """
    Owner of the learner's progress snapshot.

    Handles:
    - Loading (with fallback to default progress)
    - Whole-snapshot saves
    - Reset and export
    """

    def __init__(self, backend: PersistenceBackend, rules: ProgressionRules | None = None):
        """
        Initialize the state store.

        Args:
            backend: Persistence collaborator holding the JSON text
            rules: Progression rules (defaults to the 30-node configuration)
        """
        self.backend = backend
        self.rules = rules or ProgressionRules()

    def default(self) -> QuestState:
        return default_state(self.rules.node_count)

    def load(self) -> QuestState:
        """
        Load persisted progress.

        Returns:
            The stored snapshot if present and valid, otherwise default progress
        """
        result = deserialize(self.backend.read(), self.rules)
        if isinstance(result, QuestState):
            logger.debug(f"Loaded progress: {result.completed_count()} nodes completed")
            return result
        if isinstance(result, InvalidSnapshot):
            logger.warning(f"Ignoring stored progress ({result.reason}); starting fresh")
        return self.default()

    def save(self, state: QuestState) -> None:
        """Persist the whole snapshot."""
        self.backend.write(serialize(state))
        logger.debug(f"Saved progress ({state.total_xp()} XP total)")

    def reset(self) -> QuestState:
        """Replace stored progress with the default snapshot and return it."""
        state = self.default()
        self.save(state)
        logger.info("Progress reset")
        return state

    def export(self) -> str:
        """Serialized form of the current progress (after validation)."""
        return serialize(self.load())

    @staticmethod
    def total_xp(state: QuestState) -> int:
        """Total XP across all nodes."""
        return state.total_xp()
