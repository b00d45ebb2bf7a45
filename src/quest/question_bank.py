"""
Static question bank, keyed by difficulty tier.

Each tier holds an ordered pool of multiple-choice questions. Pools are
tuples of frozen dataclasses so nothing at runtime can reorder or edit them;
sessions shuffle their own copies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Tier(str, Enum):
    """Difficulty bands a node can draw questions from."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


@dataclass(frozen=True)
class Question:
    """One multiple-choice question."""

    prompt: str
    options: tuple[str, ...]
    correct_option_index: int

    def __post_init__(self) -> None:
        if not 2 <= len(self.options) <= 4:
            raise ValueError(f"Question needs 2-4 options, got {len(self.options)}: {self.prompt!r}")
        if not 0 <= self.correct_option_index < len(self.options):
            raise ValueError(f"Correct option index out of range: {self.prompt!r}")

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_option_index]

    def is_correct(self, selected_index: int) -> bool:
        """Check whether the selected option is the right one."""
        return selected_index == self.correct_option_index


def _q(prompt: str, options: list[str], answer: int) -> Question:
    return Question(prompt=prompt, options=tuple(options), correct_option_index=answer)


# =============================================================================
# Pools
# =============================================================================

POOLS: dict[Tier, tuple[Question, ...]] = {
    Tier.EASY: (
        _q("What does HTML stand for?",
           ["Hyper Text Markup Language", "Home Tool Markup Language", "Hyperlinks and Text Markup Language"], 0),
        _q("Which tag is used for a paragraph?", ["<p>", "<para>", "<pg>"], 0),
        _q("Which tag inserts an image?", ["<img>", "<image>", "<src>"], 0),
        _q("Which tag creates a hyperlink?", ["<link>", "<a>", "<href>"], 1),
        _q("Which tag creates an unordered list?", ["<ol>", "<ul>", "<li>"], 1),
    ),
    Tier.MEDIUM: (
        _q("Which attribute contains the URL for a link?", ["href", "src", "alt"], 0),
        _q("Where does the <title> tag belong?", ["<head>", "<body>", "<footer>"], 0),
        _q("Which tag groups table rows?", ["<tr>", "<td>", "<th>"], 0),
        _q("What's the semantic tag for main content?", ["<main>", "<section>", "<div>"], 0),
        _q("How do you make text bold in HTML?", ["<b>", "<strong>", "Both are acceptable"], 2),
    ),
    Tier.HARD: (
        _q("Which attribute provides alternate text for images?", ["alt", "title", "caption"], 0),
        _q("Which tag is used for embedding a video (HTML5)?", ["<video>", "<media>", "<embed>"], 0),
        _q("Which tag should contain site navigation links?", ["<nav>", "<header>", "<aside>"], 0),
        _q("What is ARIA used for?", ["Accessibility features", "Styling elements", "Database connections"], 0),
        _q("Which element is best for marking up a self-contained composition?",
           ["<article>", "<div>", "<section>"], 0),
    ),
    Tier.EXPERT: (
        _q("What's the purpose of the 'rel' attribute on <link> tags?",
           ["Defines relationship/behavior", "Refers to remote resources only", "Sets rendering mode"], 0),
        _q("Which attribute makes an input required in a form?", ["required", "must", "validate"], 0),
        _q("Which tag group is valid inside <table> (HTML5)?",
           ["<caption>, <thead>, <tbody>, <tfoot>", "<section>, <article>", "<nav>, <aside>"], 0),
        _q("Which meta tag sets the viewport for responsive design?",
           ['<meta name="viewport" content="width=device-width, initial-scale=1">',
            '<meta name="size">',
            '<meta name="responsive">'], 0),
        _q("When should you use <button type='submit'> vs <a> links?",
           ["Forms submit use button, navigation use <a>", "Both are interchangeable", "Use <a> for everything"], 0),
    ),
}


def get_pool(tier: str | Tier) -> tuple[Question, ...]:
    """
    Get the fixed question pool for a tier.

    Args:
        tier: Tier member or its name ("easy", "medium", ...)

    Returns:
        The tier's questions in bank order (read-only)

    Raises:
        ValueError: If a string is not a known tier name
    """
    if isinstance(tier, str) and not isinstance(tier, Tier):
        tier = Tier(tier.lower())
    return POOLS[tier]
