"""
Quest Visual Components.

Rich renderables for the terminal version of the quest map:
- the scrolling node path with day/night scenery
- header stats (current node, total XP)
- the quiz panel (question, options, XP bar, feedback)
"""

from __future__ import annotations

import random

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from src.quest.layout import Biome, MapLayout, NodeView, scroll_extent
from src.quest.question_bank import Question, Tier
from src.quest.session import AnswerFeedback

# =============================================================================
# THEME
# =============================================================================

QUEST_THEME = {
    "primary": "#34d399",  # Emerald - headers
    "secondary": "#60a5fa",  # Sky blue
    "accent": "#f6e05e",  # Sun yellow - XP
    "success": "#8bd26f",  # Leaf green - correct / completed
    "error": "#f472b6",  # Pink - wrong answers
    "locked": "#6b7280",  # Slate gray
    "night": "#1688eb",  # Star blue
    "dim": "#9ca3af",
}

STYLES = {
    "quest_primary": Style(color=QUEST_THEME["primary"], bold=True),
    "quest_accent": Style(color=QUEST_THEME["accent"], bold=True),
    "quest_success": Style(color=QUEST_THEME["success"], bold=True),
    "quest_error": Style(color=QUEST_THEME["error"], bold=True),
    "quest_locked": Style(color=QUEST_THEME["locked"]),
    "quest_night": Style(color=QUEST_THEME["night"]),
    "quest_dim": Style(color=QUEST_THEME["dim"]),
}

TIER_STYLES = {
    Tier.EASY: "green",
    Tier.MEDIUM: "yellow",
    Tier.HARD: "dark_orange",
    Tier.EXPERT: "red",
}

# Pixels of layout height represented by one terminal line
PX_PER_LINE = 60

DAY_SCENERY = ("♣", "♠", "❦")
NIGHT_SCENERY = ("·", "*", "☁")


# =============================================================================
# MAP
# =============================================================================


def _node_glyph(view: NodeView) -> tuple[str, Style]:
    if view.completed:
        return f"({view.number:>2}✓)", STYLES["quest_success"]
    if view.unlocked:
        return f"[{view.number:>2} ]", STYLES["quest_accent"]
    return f" {view.number:>2}🔒", STYLES["quest_locked"]


def _scenery_line(width: int, biome: Biome, seed: int) -> Text:
    """Decorative row of trees (day) or stars and clouds (night)."""
    rng = random.Random(seed)
    chars = [" "] * width
    glyphs = DAY_SCENERY if biome is Biome.DAY else NIGHT_SCENERY
    count = 3 if biome is Biome.DAY else 4
    for _ in range(count):
        col = int((0.1 + rng.random() * 0.8) * (width - 1))
        chars[col] = rng.choice(glyphs)
    style = STYLES["quest_success"] if biome is Biome.DAY else STYLES["quest_night"]
    return Text("".join(chars), style=style)


def render_map(
    views: list[NodeView],
    layout: MapLayout | None = None,
    width: int = 60,
    current_node: int | None = None,
) -> Text:
    """
    Render the vertical quest path.

    Each node is placed at its layout position scaled to `width` columns
    and PX_PER_LINE pixels per line, or fewer when the vertical gap is
    smaller so that every node keeps a line of its own. Lines without a node
    get scenery.
    """
    layout = layout or MapLayout()
    px_per_line = min(PX_PER_LINE, layout.vertical_gap)
    total_lines = max(1, scroll_extent(len(views), layout) // px_per_line)
    by_line = {view.position.y_px // px_per_line: view for view in views}

    text = Text()
    last_biome = Biome.DAY
    for line in range(total_lines):
        view = by_line.get(line)
        if view is None:
            text.append_text(_scenery_line(width, last_biome, seed=line))
            text.append("\n")
            continue

        last_biome = view.biome
        glyph, style = _node_glyph(view)
        col = int(view.position.x_percent / 100 * width) - len(glyph) // 2
        col = max(0, min(col, width - len(glyph)))

        text.append(" " * col)
        text.append(glyph, style=style)
        text.append(f" {view.xp_badge}", style=STYLES["quest_dim"])
        if view.index == current_node:
            text.append("  ◀ you are here", style=STYLES["quest_primary"])
        text.append("\n")
    return text


def render_header_stats(current_node: int, total_xp: int, completed: int, total_nodes: int) -> Panel:
    """Header with the current node and global XP."""
    stats = Text()
    stats.append("Node ", style=STYLES["quest_dim"])
    stats.append(f"{current_node + 1}", style=STYLES["quest_primary"])
    stats.append(f"/{total_nodes}", style=STYLES["quest_dim"])
    stats.append("    XP ", style=STYLES["quest_dim"])
    stats.append(f"{total_xp}", style=STYLES["quest_accent"])
    stats.append("    Completed ", style=STYLES["quest_dim"])
    stats.append(f"{completed}", style=STYLES["quest_success"])

    return Panel(
        stats,
        title="[bold]HTML Quest[/bold]",
        border_style=Style(color=QUEST_THEME["primary"]),
        box=box.ROUNDED,
        padding=(0, 1),
    )


# =============================================================================
# QUIZ
# =============================================================================


def create_xp_bar(xp: int, required: int, width: int = 24) -> Text:
    """XP progress bar for the open node."""
    fraction = xp / required if required else 0.0
    filled = int(fraction * width)
    bar = Text()
    bar.append("█" * filled, style=STYLES["quest_accent"])
    bar.append("░" * (width - filled), style=STYLES["quest_dim"])
    bar.append(f" {xp}/{required} XP", style=STYLES["quest_accent"])
    return bar


def render_question_panel(view: NodeView, question: Question) -> Panel:
    """Question with numbered options for the open node."""
    table = Table(box=box.MINIMAL, show_header=False)
    table.add_column("Index", style="cyan", justify="right", width=4)
    table.add_column("Option", style="white")
    for i, option in enumerate(question.options):
        table.add_row(f"[{i + 1}]", option)

    tier_style = TIER_STYLES[view.tier]
    title = f"[bold]Node {view.number}[/bold]  [{tier_style}]{view.tier.value.upper()}[/{tier_style}]"

    return Panel(
        Group(
            create_xp_bar(view.xp, view.required_xp),
            Text(""),
            Text(question.prompt, style="bold"),
            table,
        ),
        title=title,
        title_align="left",
        border_style="cyan",
        box=box.HEAVY,
        padding=(1, 2),
    )


def render_feedback(feedback: AnswerFeedback, question: Question) -> Text:
    """One-line feedback after an answer."""
    if feedback.correct:
        text = Text(f"✅ {feedback.message}", style=STYLES["quest_success"])
        if feedback.outcome is not None and feedback.outcome.xp_gained:
            text.append(f"  +{feedback.outcome.xp_gained} XP", style=STYLES["quest_accent"])
        return text
    return Text(f"❌ {feedback.message}", style=STYLES["quest_error"])


def render_completion_panel(view: NodeView, unlocked_number: int | None) -> Panel:
    """Shown when a node's XP bar fills up."""
    body = Text(f"Node {view.number} complete!", style=STYLES["quest_success"])
    if unlocked_number is not None:
        body.append(f"\nNode {unlocked_number} is now unlocked.", style=STYLES["quest_primary"])
    else:
        body.append("\nYou reached the end of the map.", style=STYLES["quest_primary"])
    return Panel(body, border_style=Style(color=QUEST_THEME["success"]), box=box.DOUBLE, padding=(1, 2))
