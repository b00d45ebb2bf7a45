"""
HTML Quest terminal front end.

Components:
- quest_cli: Typer application (map, play, stats, reset, export)
- quest_visuals: Rich renderables for the map and quiz panels
- effects: Confetti and locked-node feedback
"""

from .effects import Confetti, nudge_locked
from .quest_cli import app, main

__all__ = [
    "app",
    "main",
    "Confetti",
    "nudge_locked",
]
