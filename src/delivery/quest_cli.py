"""
HTML Quest: terminal front end.

A Rich terminal interface for the quest map: pick an unlocked node, answer
questions from its difficulty tier until the XP bar fills, unlock the next.

Commands:
- quest map      - Show the map and progress
- quest play     - Practice a node (default: the last one opened)
- quest stats    - Show progress statistics
- quest reset    - Clear progress
- quest export   - Print the saved snapshot as JSON
"""
from __future__ import annotations

import random
import sys
import time
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from config import Settings, get_settings
from src.quest.layout import NodeView, build_node_views
from src.quest.models import QuestState
from src.quest.progression import answers_needed, difficulty_for_node
from src.quest.question_bank import Tier
from src.quest.session import QuizController, QuizPhase
from src.quest.state_store import JsonFileBackend, StateStore

from .effects import Confetti, nudge_locked
from .quest_visuals import (
    render_completion_panel,
    render_feedback,
    render_header_stats,
    render_map,
    render_question_panel,
)

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="quest",
    help="HTML Quest: climb the map one quiz at a time",
    no_args_is_help=True,
)
console = Console()

QUIT_INPUTS = {"q", "quit", "exit"}


def build_store(settings: Settings) -> StateStore:
    """State store backed by the configured snapshot file."""
    return StateStore(JsonFileBackend(settings.state_path), settings.get_progression_rules())


def _views(store: StateStore, settings: Settings, state: QuestState) -> list[NodeView]:
    return build_node_views(state.nodes, store.rules, settings.get_layout())


# =============================================================================
# Commands
# =============================================================================


@app.command("map")
def show_map(
    width: int = typer.Option(60, "--width", "-w", help="Map width in columns"),
) -> None:
    """Show the quest map with node status and XP."""
    settings = get_settings()
    store = build_store(settings)
    state = store.load()

    console.print(
        render_header_stats(state.current_node, state.total_xp(), state.completed_count(), len(state.nodes))
    )
    console.print(
        render_map(_views(store, settings, state), settings.get_layout(), width=width, current_node=state.current_node)
    )


@app.command()
def play(
    node: Optional[int] = typer.Argument(
        None,
        help="Node number to practice (1-based, defaults to the last node opened)",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed the question shuffle",
    ),
) -> None:
    """
    Practice a node.

    Questions from the node's tier repeat in shuffled batches until its XP
    bar fills. Enter 'q' to leave; XP earned so far is kept.
    """
    settings = get_settings()
    store = build_store(settings)
    state = store.load()

    index = state.current_node if node is None else node - 1
    if not 0 <= index < len(state.nodes):
        console.print(f"[red]No node {index + 1}. The map has {len(state.nodes)} nodes.[/red]")
        raise typer.Exit(1)

    controller = QuizController(
        state,
        store,
        pacing=settings.get_pacing(),
        rng=random.Random(seed),
        on_celebrate=Confetti(console),
    )
    if not controller.open(index):
        nudge_locked(console, index + 1)
        raise typer.Exit(1)

    console.print(
        f"[dim]Node {index + 1} needs {answers_needed(index, store.rules)} correct answers "
        f"from empty. Enter an option number, or 'q' to leave.[/dim]"
    )

    while controller.phase is not QuizPhase.IDLE:
        question = controller.current_question
        view = _views(store, settings, state)[index]
        console.print(render_question_panel(view, question))

        choice = Prompt.ask(f"[cyan]>[/cyan] [1-{len(question.options)}]", console=console).strip().lower()
        if choice in QUIT_INPUTS:
            controller.close()
            break
        try:
            selected = int(choice) - 1
        except ValueError:
            console.print("[yellow]Enter an option number.[/yellow]")
            continue

        feedback = controller.answer(selected)
        if feedback is None:
            console.print("[yellow]That is not one of the options.[/yellow]")
            continue

        console.print(render_feedback(feedback, question))
        if feedback.completed:
            unlocked = feedback.outcome.unlocked_index
            console.print(render_completion_panel(view, unlocked + 1 if unlocked is not None else None))

        wait = controller.seconds_until_due()
        if wait:
            time.sleep(wait)
        controller.advance()

    node_state = state.nodes[index]
    console.print(
        f"\nNode {index + 1}: {node_state.xp} XP  |  Total XP: {state.total_xp()}"
    )


@app.command()
def stats() -> None:
    """Show progress statistics by tier."""
    settings = get_settings()
    store = build_store(settings)
    state = store.load()
    rules = store.rules

    console.print(
        render_header_stats(state.current_node, state.total_xp(), state.completed_count(), len(state.nodes))
    )

    table = Table(title="Progress by Tier")
    table.add_column("Tier")
    table.add_column("Nodes", justify="right")
    table.add_column("Completed", justify="right")
    table.add_column("XP", justify="right")

    for tier in Tier:
        nodes = [n for n in state.nodes if difficulty_for_node(n.index, rules) is tier]
        if not nodes:
            continue
        first, last = nodes[0].index + 1, nodes[-1].index + 1
        table.add_row(
            tier.value,
            f"{first}-{last}",
            str(sum(1 for n in nodes if n.completed)),
            str(sum(n.xp for n in nodes)),
        )
    console.print(table)


@app.command()
def reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Clear all progress and start from node 1."""
    settings = get_settings()
    store = build_store(settings)

    if not force and not Confirm.ask("Delete all quest progress?", default=False, console=console):
        console.print("Reset cancelled.")
        raise typer.Exit(0)

    store.reset()
    console.print("[green]✓ Progress reset[/green]")


@app.command()
def export() -> None:
    """Print the saved progress snapshot as JSON."""
    settings = get_settings()
    store = build_store(settings)
    console.print_json(store.export())


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging(settings: Settings) -> None:
    """Route loguru to stderr (and optionally a file) at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(
            settings.log_file,
            level="DEBUG",
            rotation="1 MB",
            retention=3,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        )


def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings())
    app()


if __name__ == "__main__":
    main()
