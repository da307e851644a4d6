"""Interactive CLI application."""
import random
from dataclasses import replace
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from lexicard.answers import expected_answer
from lexicard.cards import get_all_cards, get_due_cards, save_card
from lexicard.config import configure_logging, get_settings
from lexicard.dashboard import (
    get_due_summary, get_exercise_stats, get_mastery_breakdown, get_mastery_color,
    get_weak_exercise_types,
)
from lexicard.db import init_db
from lexicard.exercises import AnswerMode, ExerciseType, implemented_types
from lexicard.importer import import_cards
from lexicard.preferences import load_preferences, reset_preferences, save_preferences
from lexicard.scheduler import PracticeScheduler
from lexicard.streak import get_streak, record_session

console = Console()

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user leaves a practice session early."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if (answer or "").strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str]) -> int:
    answer = session_prompt(prompt, choices=choices + list(EXIT_WORDS), show_choices=False)
    return int(answer)


def show_welcome():
    console.print(Panel(
        "[bold]lexicard[/bold]\n[dim]Spaced repetition vocabulary practice[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("practice", "Practice due cards"),
        ("stats", "Mastery, streak and weak exercises"),
        ("prefs", "Choose exercise types"),
        ("import", "Add cards from a file"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def _exercise_prompt(card, exercise_type: ExerciseType) -> str:
    if exercise_type is ExerciseType.REVERSE_TRANSLATION:
        return f"Translate into the target language: [bold]{card.back_text}[/bold]"
    if exercise_type is ExerciseType.SENTENCE_BUILDING:
        words = expected_answer(card, exercise_type).split()
        return "Put the words in order: [bold]" + " / ".join(random.sample(words, len(words))) + "[/bold]"
    if exercise_type is ExerciseType.CONJUGATION_PRACTICE:
        label = next(iter(card.word_data.forms()))
        return f"Give the {label} of [bold]{card.front_text}[/bold]"
    if exercise_type is ExerciseType.ARTICLE_SELECTION:
        return f"Which article goes with [bold]{card.front_text}[/bold]?"
    if exercise_type is ExerciseType.MULTIPLE_CHOICE_ICON:
        return f"[bold]{card.front_text}[/bold]  [dim]({card.icon})[/dim]"
    return f"[bold]{card.front_text}[/bold]"


def run_practice_item(scheduler: PracticeScheduler) -> None:
    """Present the current item, record the verdict and confirm it."""
    item = scheduler.current_item
    card, exercise_type = item.card, item.exercise_type
    position = f"{scheduler.state.current_index + 1}/{scheduler.total_count}"
    console.print(Panel(
        _exercise_prompt(card, exercise_type),
        title=f"{exercise_type.display_name} {position}", border_style="cyan",
    ))

    mode = exercise_type.answer_mode
    if mode is AnswerMode.TEXT_ENTRY:
        answer = session_prompt("Your answer ('skip' to skip)")
        if answer.strip().lower() == "skip":
            scheduler.skip_exercise()
            return
        scheduler.submit_text_answer(answer)
    elif mode is AnswerMode.MULTIPLE_CHOICE:
        options = scheduler.state.choice_options or ()
        for i, option in enumerate(options, 1):
            console.print(f"  [cyan]{i})[/cyan] {option}")
        choice = session_int_prompt("Your choice", choices=[str(i) for i in range(1, len(options) + 1)])
        scheduler.select_option(options[choice - 1])
    else:
        session_prompt("[dim]Press Enter to reveal answer[/dim]", default="", show_default=False)
        console.print(Panel(card.back_text, border_style="green"))
        knew = session_prompt("Did you know it?", choices=["y", "n"])
        scheduler.check_answer(knew == "y")

    expected = expected_answer(card, exercise_type)
    if scheduler.state.current_answer_correct:
        console.print("[green]Correct![/green]")
    else:
        console.print(f"[red]Incorrect.[/red] Answer: [green]{expected}[/green]")
    action = session_prompt(
        "[dim]Enter to continue, 'o' to flip the verdict[/dim]", default="", show_default=False,
    )
    if action.strip().lower() == "o":
        scheduler.override_answer(not scheduler.state.current_answer_correct)
        verdict = "correct" if scheduler.state.current_answer_correct else "incorrect"
        console.print(f"[yellow]Marked {verdict}.[/yellow]")
    scheduler.confirm_answer_and_advance(bool(scheduler.state.current_answer_correct))
    console.print()


def run_practice_session(scheduler: PracticeScheduler):
    """Run items until the queue is exhausted or the user exits. Returns final stats."""
    try:
        while scheduler.current_item is not None:
            run_practice_item(scheduler)
    except SessionExitRequested:
        scheduler.end_session()
        console.print("[dim]Session ended.[/dim]")
    return scheduler.last_stats


def build_scheduler(db_path: str, language: str = "") -> PracticeScheduler:
    preferences = load_preferences(db_path)
    return PracticeScheduler(
        get_candidate_units=lambda: get_due_cards(db_path, preferences, language=language),
        persist_unit=lambda card: save_card(db_path, card),
        preferences=preferences,
        on_session_complete=lambda count: record_session(db_path, count),
        get_all_units=lambda: get_all_cards(db_path, language=language),
    )


def cmd_practice(db_path: str, language: str = ""):
    scheduler = build_scheduler(db_path, language)
    scheduler.start_session()
    if scheduler.state.no_due_items:
        console.print("[yellow]Nothing is due right now![/yellow]")
        return
    console.print(f"\n[bold]Practice Session[/bold] - {scheduler.total_count} exercises\n")
    stats = run_practice_session(scheduler)
    if stats and stats.cards_reviewed:
        minutes, seconds = divmod(int(stats.duration.total_seconds()), 60)
        console.print(
            f"[bold]Score: {stats.correct_count}/{stats.cards_reviewed} "
            f"({stats.accuracy * 100:.0f}%) in {minutes}m {seconds:02d}s[/bold]\n"
        )


def cmd_stats(db_path: str, language: str = ""):
    cards = get_all_cards(db_path, language=language)
    preferences = load_preferences(db_path)
    due = get_due_summary(cards, preferences)
    streak = get_streak(db_path)
    console.print(Panel(
        f"Cards: [bold]{due['total_cards']}[/bold]  |  Due: [bold]{due['due_cards']}[/bold] "
        f"({due['due_items']} exercises)\n"
        f"Streak: [bold]{streak['current_streak']}[/bold] days (best {streak['best_streak']})  |  "
        f"Reviewed today: [bold]{streak['cards_today']}[/bold]",
        title="Progress", border_style="blue",
    ))

    table = Table(title="Mastery")
    table.add_column("Level")
    table.add_column("Cards", justify="right")
    for level, count in get_mastery_breakdown(cards).items():
        color = get_mastery_color(level)
        table.add_row(f"[{color}]{level.value}[/{color}]", str(count))
    console.print(table)

    exercise_stats = get_exercise_stats(cards)
    if exercise_stats:
        table = Table(title="Exercises")
        table.add_column("Exercise", style="cyan")
        table.add_column("Attempts", justify="right")
        table.add_column("Success", justify="right")
        for row in exercise_stats:
            table.add_row(row["exercise_type"].display_name, str(row["attempts"]), f"{row['success_rate']}%")
        console.print(table)

    weak = get_weak_exercise_types(cards, preferences.weakness_threshold)
    if weak:
        console.print(f"\n  [yellow]Weakest exercise: {weak[0]['exercise_type'].display_name}[/yellow]")


def cmd_prefs(db_path: str):
    preferences = load_preferences(db_path)
    types = implemented_types()
    while True:
        table = Table(title="Exercise Preferences")
        table.add_column("#", justify="right")
        table.add_column("Exercise")
        table.add_column("Enabled")
        for i, exercise_type in enumerate(types, 1):
            mark = "[green]yes[/green]" if preferences.is_enabled(exercise_type) else "[dim]no[/dim]"
            table.add_row(str(i), exercise_type.display_name, mark)
        console.print(table)
        console.print(
            f"  Prioritize weaknesses: [bold]{preferences.prioritize_weaknesses}[/bold]  |  "
            f"Threshold: [bold]{preferences.weakness_threshold:.0f}%[/bold]"
        )
        choice = Prompt.ask(
            "Number to toggle, 'w' weaknesses, 't' threshold, 'r' reset, Enter to save",
            default="", show_default=False,
        ).strip().lower()
        if not choice:
            break
        if choice == "w":
            preferences = replace(preferences, prioritize_weaknesses=not preferences.prioritize_weaknesses)
        elif choice == "t":
            threshold = IntPrompt.ask("Weakness threshold (0-100)", default=70)
            preferences = replace(preferences, weakness_threshold=float(min(max(threshold, 0), 100)))
        elif choice == "r":
            preferences = reset_preferences(db_path)
        elif choice.isdigit() and 1 <= int(choice) <= len(types):
            preferences = preferences.toggle_type(types[int(choice) - 1])
        else:
            console.print("[red]Unknown option.[/red]")
    if not preferences.has_any_enabled:
        console.print("[yellow]No exercise types enabled - nothing will be scheduled.[/yellow]")
    save_preferences(db_path, preferences)
    console.print("[green]Preferences saved.[/green]")


def cmd_import(db_path: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    language = Prompt.ask("Language code", default="")
    result = import_cards(db_path, file_path, language=language)
    console.print(
        f"[green]Imported {result['imported']} cards from {result['filename']}[/green]"
        + (f" [dim]({result['skipped']} skipped)[/dim]" if result["skipped"] else "")
    )


def main():
    settings = get_settings()
    configure_logging(settings)
    db_path = settings.db_path
    init_db(db_path)

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="practice").strip().lower()
        try:
            if choice == "practice":
                cmd_practice(db_path, settings.language)
            elif choice == "stats":
                cmd_stats(db_path, settings.language)
            elif choice == "prefs":
                cmd_prefs(db_path)
            elif choice == "import":
                cmd_import(db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Bis bald![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command {} failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
