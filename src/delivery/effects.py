"""
Decorative effects: confetti on completion and a nudge for locked nodes.

Fire-and-forget. Nothing here reads or changes progress.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass

from rich.console import Console
from rich.live import Live
from rich.text import Text

CONFETTI_PALETTE = ("#8bd26f", "#f6e05e", "#34d399", "#60a5fa", "#a78bfa", "#f472b6")
CONFETTI_GLYPHS = ("▪", "▫", "◆", "●", "▲")


@dataclass
class _Piece:
    x: float
    y: float
    vx: float
    vy: float
    glyph: str
    color: str


def _frame(pieces: list[_Piece], width: int, height: int) -> Text:
    grid: list[list[tuple[str, str] | None]] = [[None] * width for _ in range(height)]
    for p in pieces:
        col, row = int(p.x), int(p.y)
        if 0 <= col < width and 0 <= row < height:
            grid[row][col] = (p.glyph, p.color)

    text = Text()
    for row in grid:
        for cell in row:
            if cell is None:
                text.append(" ")
            else:
                text.append(cell[0], style=cell[1])
        text.append("\n")
    return text


class Confetti:
    """Short confetti burst rendered with rich.live."""

    def __init__(
        self,
        console: Console,
        count: int = 70,
        frames: int = 18,
        frame_seconds: float = 0.05,
        height: int = 12,
        rng: random.Random | None = None,
    ):
        self.console = console
        self.count = count
        self.frames = frames
        self.frame_seconds = frame_seconds
        self.height = height
        self.rng = rng or random.Random()

    def _launch(self, width: int) -> list[_Piece]:
        rng = self.rng
        return [
            _Piece(
                x=width / 2 + (rng.random() * width - width / 2) * 0.8,
                y=self.height / 2 + rng.random() * 2 - 1,
                vx=(rng.random() - 0.5) * 3,
                vy=-(rng.random() * 1.5 + 0.5),
                glyph=rng.choice(CONFETTI_GLYPHS),
                color=rng.choice(CONFETTI_PALETTE),
            )
            for _ in range(self.count)
        ]

    def __call__(self) -> None:
        """Play the burst. Plain text output when the console is not a terminal."""
        if not self.console.is_terminal:
            self.console.print("🎉 🎉 🎉")
            return

        width = max(20, self.console.width - 2)
        pieces = self._launch(width)
        with Live(console=self.console, transient=True, refresh_per_second=30) as live:
            for _ in range(self.frames):
                for p in pieces:
                    p.x += p.vx
                    p.vy += 0.35
                    p.y += p.vy
                pieces = [p for p in pieces if p.y < self.height + 2]
                live.update(_frame(pieces, width, self.height))
                if not pieces:
                    break
                time.sleep(self.frame_seconds)


def nudge_locked(console: Console, number: int) -> None:
    """Feedback for clicking a locked node."""
    console.print(f"[dim]🔒 Node {number} is locked. Complete node {number - 1} first.[/dim]")
