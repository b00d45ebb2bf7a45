"""
Core data models for quest progress.

A QuestState is the whole learner snapshot: every node's XP and flags plus
the node the learner last opened. It is owned by the StateStore, mutated by
the progression functions and persisted as one JSON document.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Node:
    """Progress on one step of the map."""

    index: int
    xp: int = 0
    completed: bool = False
    unlocked: bool = False

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "xp": self.xp,
            "completed": self.completed,
            "unlocked": self.unlocked,
        }


@dataclass
class QuestState:
    """Snapshot of all node progress."""

    nodes: list[Node] = field(default_factory=list)
    current_node: int = 0

    def to_dict(self) -> dict:
        """Convert to the persisted JSON shape."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "currentNode": self.current_node,
        }

    def total_xp(self) -> int:
        """Sum of XP across all nodes (display only, never stored)."""
        return sum(node.xp for node in self.nodes)

    def completed_count(self) -> int:
        return sum(1 for node in self.nodes if node.completed)


def default_state(node_count: int) -> QuestState:
    """Fresh progress: every node at 0 XP, only the first unlocked."""
    nodes = [Node(index=i, unlocked=(i == 0)) for i in range(node_count)]
    return QuestState(nodes=nodes, current_node=0)
