"""
Map layout: where each node sits on the vertical quest path.

Nodes zig-zag across three lanes (left, right, center) and step down the
page by a fixed gap, so visit order always reads top to bottom without
overlap. Everything here is a pure function of integers; renderers decide
what a percent or a pixel means for them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .models import Node
from .progression import ProgressionRules, difficulty_for_node, required_xp
from .question_bank import Tier

# x position (percent of path width) for index % 3
LANES = (30, 70, 50)


class Biome(str, Enum):
    """Scenery band drawn behind a row of the map."""

    DAY = "day"
    NIGHT = "night"


@dataclass(frozen=True)
class MapLayout:
    """Layout constants (pixels)."""

    base_offset: int = 120
    vertical_gap: int = 120
    trailing_margin: int = 300
    day_rows: int = 15


@dataclass(frozen=True)
class NodePosition:
    x_percent: int
    y_px: int


@dataclass(frozen=True)
class NodeView:
    """Everything the presentation layer needs to draw one node."""

    index: int
    xp: int
    required_xp: int
    unlocked: bool
    completed: bool
    position: NodePosition
    tier: Tier
    biome: Biome

    @property
    def number(self) -> int:
        """1-based label shown to the learner."""
        return self.index + 1

    @property
    def status(self) -> str:
        if self.completed:
            return "completed"
        return "unlocked" if self.unlocked else "locked"

    @property
    def title(self) -> str:
        if self.completed:
            return "Completed"
        if self.unlocked:
            return f"Node {self.number}: click to practice"
        return "Locked"

    @property
    def xp_badge(self) -> str:
        return f"{self.xp}/{self.required_xp} XP"


def compute_position(index: int, total_nodes: int, layout: MapLayout | None = None) -> NodePosition:
    """
    Position of node `index` on a map of `total_nodes`.

    x cycles through the three lanes; y grows by vertical_gap per node.
    """
    layout = layout or MapLayout()
    return NodePosition(
        x_percent=LANES[index % len(LANES)],
        y_px=layout.base_offset + index * layout.vertical_gap,
    )


def scroll_extent(total_nodes: int, layout: MapLayout | None = None) -> int:
    """Total scrollable height needed to show every node (px)."""
    layout = layout or MapLayout()
    return layout.base_offset + (total_nodes - 1) * layout.vertical_gap + layout.trailing_margin


def biome_for_node(index: int, layout: MapLayout | None = None) -> Biome:
    layout = layout or MapLayout()
    return Biome.DAY if index < layout.day_rows else Biome.NIGHT


def build_node_views(
    nodes: list[Node],
    rules: ProgressionRules,
    layout: MapLayout | None = None,
) -> list[NodeView]:
    """Project node progress into drawable views, in map order."""
    layout = layout or MapLayout()
    total = len(nodes)
    return [
        NodeView(
            index=node.index,
            xp=node.xp,
            required_xp=required_xp(node.index, rules),
            unlocked=node.unlocked,
            completed=node.completed,
            position=compute_position(node.index, total, layout),
            tier=difficulty_for_node(node.index, rules),
            biome=biome_for_node(node.index, layout),
        )
        for node in nodes
    ]
