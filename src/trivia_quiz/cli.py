from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table
from rich.theme import Theme

from trivia_quiz.categories import LEADERBOARD_FILTERS, category_label
from trivia_quiz.quiz.builder import category_pool
from trivia_quiz.quiz.session import (
    AnswerFeedback,
    QuestionView,
    QuizController,
    QuizInputError,
    NAME_REQUIRED,
    ResultView,
    ViewUpdate,
)
from trivia_quiz.system import QuizSystem

app = typer.Typer(help="Ultimate Knowledge Quiz: ten questions, one category, a local leaderboard.")

THEMES = {
    "light": Theme({"info": "cyan", "good": "bold green", "bad": "bold red", "error": "bold red", "muted": "grey50"}),
    "dark": Theme({"info": "bright_cyan", "good": "bold bright_green", "bad": "bold bright_red", "error": "bold bright_red", "muted": "grey70"}),
}


def _load_system(config: Optional[Path]) -> QuizSystem:
    """Instantiate `QuizSystem` with an optional config path."""
    return QuizSystem.from_config(config)


def _console(system: QuizSystem) -> Console:
    return Console(theme=THEMES[system.theme.mode])


class TerminalRenderer:
    """Applies controller updates to the terminal."""

    def __init__(self, console: Console):
        self.console = console

    def __call__(self, update: ViewUpdate) -> None:
        if isinstance(update, QuestionView):
            self._question(update)
        elif isinstance(update, AnswerFeedback):
            style = "good" if update.is_correct else "bad"
            self.console.print(f"[{style}]{escape(update.message)}[/{style}]  Score: {update.score}")
        elif isinstance(update, ResultView):
            self._result(update)

    def _question(self, view: QuestionView) -> None:
        filled = int(view.progress * 20)
        bar = escape("[" + "#" * filled + "-" * (20 - filled) + "]")
        self.console.print()
        self.console.print(
            f"[muted]{escape(view.player_name)} · {escape(view.category_label)} · {bar} "
            f"Question {view.number}/{view.total} · Score {view.score}[/muted]"
        )
        self.console.print(f"[bold]{escape(view.text)}[/bold]")
        for idx, option in enumerate(view.options, start=1):
            self.console.print(f"  {idx}. {escape(option)}")

    def _result(self, view: ResultView) -> None:
        result = view.result
        body = (
            f"{escape(result.player_name)} · {escape(result.category_label)}\n"
            f"Score: {result.score}/{result.total} ({result.percentage}%)\n"
            f"Time taken: {result.time_taken}\n\n"
            f"[bold]{result.message}[/bold]"
        )
        if result.celebrate:
            body += "\n🎉 🎉 🎉"
        self.console.print(Panel(body, title="Result", expand=False))


def _render_leaderboard(console: Console, system: QuizSystem, filter_name: str) -> None:
    rows = system.leaderboard.rows(filter_name)
    if not rows:
        console.print("[muted]No scores yet. Play a quiz to get on the board![/muted]")
        return
    table = Table(title=f"Leaderboard ({filter_name})")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Score", justify="right")
    table.add_column("Date")
    for row in rows:
        table.add_row(str(row.rank), escape(row.name), escape(row.category_label), row.score_display, escape(row.date))
    console.print(table)


def _choose_category(console: Console, system: QuizSystem) -> str:
    keys = system.categories()
    if not keys:
        console.print("[error]The question bank is empty.[/error]")
        raise typer.Exit(code=1)
    for idx, key in enumerate(keys, start=1):
        console.print(f"  {idx}. {category_label(key)}")
    choice = IntPrompt.ask(
        "Pick a category", choices=[str(idx) for idx in range(1, len(keys) + 1)], console=console
    )
    return keys[choice - 1]


def _start_round(console: Console, controller: QuizController, name: Optional[str]) -> None:
    """Keep asking for a name until the round starts; a category without questions aborts."""
    while True:
        if name is None:
            name = Prompt.ask("Your name", default="", show_default=False, console=console)
        try:
            controller.submit_name(name)
            return
        except QuizInputError as exc:
            console.print(f"[error]{exc}[/error]")
            if str(exc) != NAME_REQUIRED:
                raise typer.Exit(code=1)
            name = None


def _play_round(console: Console, controller: QuizController) -> None:
    while controller.session is not None:
        view = controller.current_view()
        choice = IntPrompt.ask(
            "Your answer",
            choices=[str(idx) for idx in range(1, len(view.options) + 1)],
            console=console,
        )
        controller.select_option(view.options[choice - 1])
        _await_advance(controller)


def _await_advance(controller: QuizController) -> None:
    """Sleep until the pending advance is due and fire it; a short sleep just waits again."""
    scheduler = controller.scheduler
    due = scheduler.next_due()
    while due is not None:
        time.sleep(max(0.0, due - scheduler.clock.now()))
        controller.tick()
        due = scheduler.next_due()


@app.command()
def play(
    category: Optional[str] = typer.Option(None, help="Category key, e.g. 'science' or 'mixed'."),
    name: Optional[str] = typer.Option(None, help="Player name for the leaderboard."),
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """
    Play one round in the terminal.

    Builds a `QuizController` from `QuizSystem`, renders each question through
    `TerminalRenderer`, advances after the configured delay, and records the
    result on the leaderboard when the round ends.
    """
    system = _load_system(config)
    console = _console(system)
    controller = system.new_controller()
    controller.subscribe(TerminalRenderer(console))

    controller.select_category(category or _choose_category(console, system))
    console.print(f"Category: [info]{controller.category_label}[/info]")
    _start_round(console, controller, name)
    _play_round(console, controller)


@app.command()
def leaderboard(
    filter_name: str = typer.Option("all", "--filter", help="One of: " + ", ".join(LEADERBOARD_FILTERS)),
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """Show the top scores, optionally filtered."""
    if filter_name not in LEADERBOARD_FILTERS:
        raise typer.BadParameter("filter must be one of: " + ", ".join(LEADERBOARD_FILTERS))
    system = _load_system(config)
    _render_leaderboard(_console(system), system, filter_name)


@app.command("clear-leaderboard")
def clear_leaderboard(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """Erase every stored score after confirmation."""
    system = _load_system(config)
    console = _console(system)
    controller = system.new_controller()

    def confirm() -> bool:
        return yes or typer.confirm(
            "Are you sure you want to clear all leaderboard scores? This cannot be undone."
        )

    if controller.clear_leaderboard(confirm):
        console.print("Leaderboard cleared.")
    else:
        console.print("[muted]Leaderboard left unchanged.[/muted]")


@app.command()
def categories(config: Optional[Path] = typer.Option(None, help="Path to configuration YAML.")):
    """List playable categories and how many questions each holds."""
    system = _load_system(config)
    console = _console(system)
    table = Table(title="Categories")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Questions", justify="right")
    for key in system.categories():
        table.add_row(key, category_label(key), str(len(category_pool(system.bank, key))))
    console.print(table)


@app.command()
def theme(config: Optional[Path] = typer.Option(None, help="Path to configuration YAML.")):
    """Toggle between dark and light mode."""
    system = _load_system(config)
    mode = system.theme.toggle()
    _console(system).print(f"Theme set to [info]{mode}[/info].")


if __name__ == "__main__":
    app()
