import typer
from rich.console import Console
from rich.table import Table
from rich.markup import escape
from typing import Optional, List
from datetime import date
from pathlib import Path
import json

from pydantic import ValidationError

from vocab.config import settings
from vocab.database import SessionLocal, init_db
from vocab.logging_config import setup_logging
from vocab.crud import (
    create_user, get_user, create_word, create_word_list, get_word_lists,
    enable_word_list, disable_word_list
)
from vocab.schemas import (
    UserCreate, WordCreate, Definition, RawWordEntry,
    MCQQuestion, UserSettings
)
from vocab.store import VocabStore
from vocab.session import SessionOrchestrator
from vocab.selector import DueCardSelector
from vocab.quiz import QuizGenerator, QuizRun
from vocab.streak import StreakTracker
from vocab.stats import compute_progress
from vocab.backup import export_data, import_data
from vocab.sm2 import SM2Algorithm, RATING_QUALITIES, format_interval
from vocab.exceptions import VocabError
from vocab.daily_state import load_daily_state, save_daily_state

app = typer.Typer(help="Vocabulary trainer CLI - spaced repetition with SM-2")
console = Console()

RATING_LABELS = {1: "Forget", 3: "Hard", 4: "Good", 5: "Easy"}


@app.callback()
def main(log_level: str = typer.Option(settings.log_level, help="Logging level")):
    """Configure logging before any command runs"""
    setup_logging(log_level)


def _require_user(db, user_id: int) -> bool:
    if not get_user(db, user_id):
        console.print(f"[red]✗[/red] User ID {user_id} not found")
        return False
    return True


@app.command()
def init():
    """Initialize database tables"""
    init_db()
    console.print("[green]✓[/green] Database initialized successfully!")


@app.command()
def reset_db():
    """Delete all data and reinitialize database (WARNING: irreversible!)"""
    confirm = typer.confirm("⚠️  This will DELETE ALL DATA. Are you sure?")
    if not confirm:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    from vocab.database import reset_db as drop_and_create
    console.print("[yellow]Dropping and recreating all tables...[/yellow]")
    drop_and_create()
    console.print("[green]✓[/green] Database reset complete! All data deleted.")


@app.command()
def create_profile(
    name: str = typer.Option(..., prompt="Learner name"),
    new_limit: int = typer.Option(settings.default_daily_new_card_limit, help="New cards per day"),
    review_limit: int = typer.Option(settings.default_daily_review_limit, help="Reviews per day")
):
    """Create a new learner profile"""
    db = SessionLocal()
    try:
        user = create_user(db, UserCreate(
            name=name,
            daily_new_card_limit=new_limit,
            daily_review_limit=review_limit
        ))
        console.print(f"[green]✓[/green] Profile created successfully! User ID: {user.id}")
        console.print(f"  Name: {user.name}")
        console.print(f"  Daily limits: {user.daily_new_card_limit} new, {user.daily_review_limit} reviews")
    finally:
        db.close()


@app.command("settings")
def show_settings(
    user_id: int,
    new_limit: Optional[int] = typer.Option(None, help="New daily new-card limit"),
    review_limit: Optional[int] = typer.Option(None, help="New daily review limit")
):
    """View or update study limits"""
    db = SessionLocal()
    try:
        if not _require_user(db, user_id):
            return
        store = VocabStore(db, user_id)
        current = store.get_settings()

        if new_limit is not None or review_limit is not None:
            current = UserSettings(
                daily_new_card_limit=new_limit if new_limit is not None else current.daily_new_card_limit,
                daily_review_limit=review_limit if review_limit is not None else current.daily_review_limit,
                enabled_list_ids=current.enabled_list_ids
            )
            store.update_settings(current)
            console.print("[green]✓[/green] Settings updated!")

        console.print(f"  New cards per day: {current.daily_new_card_limit}")
        console.print(f"  Reviews per day: {current.daily_review_limit}")
        console.print(f"  Enabled lists: {', '.join(current.enabled_list_ids) or 'none'}")
    finally:
        db.close()


@app.command()
def add_word(
    user_id: int = typer.Option(..., prompt="User ID"),
    word: str = typer.Option(..., prompt="Word"),
    meaning: str = typer.Option(..., prompt="Meaning"),
    pos: str = typer.Option("", help="Part of speech (e.g., n., v.)"),
    phonetic: Optional[str] = typer.Option(None, help="Phonetic transcription"),
    example: Optional[str] = typer.Option(None, help="Example sentence"),
    tags: Optional[str] = typer.Option(None, help="Tags (comma-separated)")
):
    """Add a word to your personal collection"""
    db = SessionLocal()
    try:
        if not _require_user(db, user_id):
            return
        db_word = create_word(db, user_id, WordCreate(
            word=word.strip(),
            phonetic=phonetic,
            definitions=[Definition(pos=pos, meaning=meaning.strip())],
            example=example,
            tags=[t.strip() for t in tags.split(",")] if tags else []
        ))
        console.print(f"[green]✓[/green] Added '{db_word.word}' (ID: {db_word.id})")
    finally:
        db.close()


@app.command()
def import_list(
    file_path: str = typer.Option(..., prompt="Word list file (.json)"),
    name: str = typer.Option(..., prompt="List name"),
    description: str = typer.Option("", help="List description"),
    list_id: Optional[str] = typer.Option(None, help="Explicit list ID")
):
    """Import a builtin word list from a JSON array of entries"""
    db = SessionLocal()
    try:
        raw_entries = json.loads(Path(file_path).read_text(encoding="utf-8"))
        entries: List[RawWordEntry] = []
        for raw in raw_entries:
            try:
                entries.append(RawWordEntry(**raw))
            except ValidationError as e:
                console.print(f"[red]Skipping {escape(str(raw.get('word', '?')))}: {escape(str(e))}[/red]")

        word_list = create_word_list(db, name, entries, description=description, list_id=list_id)
        console.print(f"[green]✓[/green] List '{word_list.name}' imported! ID: {word_list.id}")
        console.print(f"  Added {len(entries)} words")
    except (OSError, ValueError) as e:
        console.print(f"[red]✗[/red] Error: {escape(str(e))}")
    finally:
        db.close()


@app.command()
def lists():
    """Show available word lists"""
    db = SessionLocal()
    try:
        word_lists = get_word_lists(db)
        if not word_lists:
            console.print("[yellow]No word lists imported yet[/yellow]")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Words", justify="right")
        table.add_column("Description", style="dim")
        for word_list in word_lists:
            table.add_row(word_list.id, word_list.name, str(len(word_list.words)), word_list.description or "")
        console.print(table)
    finally:
        db.close()


@app.command()
def enable_list(user_id: int, list_id: str):
    """Start studying a word list"""
    db = SessionLocal()
    try:
        if not _require_user(db, user_id):
            return
        created = enable_word_list(db, user_id, list_id)
        console.print(f"[green]✓[/green] List {list_id} enabled ({created} new cards)")
    finally:
        db.close()


@app.command()
def disable_list(user_id: int, list_id: str):
    """Stop studying a word list (progress is kept)"""
    db = SessionLocal()
    try:
        if disable_word_list(db, user_id, list_id):
            console.print(f"[green]✓[/green] List {list_id} disabled")
        else:
            console.print(f"[yellow]List {list_id} was not enabled[/yellow]")
    finally:
        db.close()


@app.command()
def due(user_id: int):
    """Show today's study queue"""
    db = SessionLocal()
    try:
        if not _require_user(db, user_id):
            return
        store = VocabStore(db, user_id)
        user_settings = store.get_settings()
        queue = DueCardSelector(store).scheduled_queue(
            user_settings.daily_new_card_limit,
            user_settings.daily_review_limit,
            user_settings.enabled_list_ids
        )

        console.print(f"\n[bold]Today's queue[/bold]: {len(queue.review_cards)} reviews, {len(queue.new_cards)} new\n")
        if not queue.cards:
            console.print("[green]Nothing due today![/green]")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Word", style="green")
        table.add_column("Status", style="cyan")
        table.add_column("Due Date", style="yellow")
        table.add_column("Days Overdue", style="red")
        table.add_column("Ease", style="blue", justify="right")

        for card in queue.cards[:30]:
            state = card.card_state
            days_overdue = SM2Algorithm.get_days_overdue(state.due_date)
            table.add_row(
                card.word.word,
                state.status,
                str(state.due_date),
                str(days_overdue) if days_overdue > 0 else "Today",
                f"{state.ease_factor:.2f}"
            )
        console.print(table)
        if len(queue.cards) > 30:
            console.print(f"[dim]... and {len(queue.cards) - 30} more cards[/dim]")
    finally:
        db.close()


def _show_definitions(word):
    for definition in word.definitions:
        pos = f"[cyan]{definition.pos}[/cyan] " if definition.pos else ""
        console.print(f"  {pos}{definition.meaning}")
    if word.example:
        console.print(f"  [dim]{word.example}[/dim]")
    if word.example_translation:
        console.print(f"  [dim]{word.example_translation}[/dim]")


def _prompt_rating(previews) -> int:
    choices = {str(i): quality for i, quality in enumerate(RATING_QUALITIES, 1)}
    labels = "  ".join(
        f"[{key}] {RATING_LABELS[quality]} ({format_interval(previews.get(quality, 0))})"
        for key, quality in choices.items()
    )
    console.print(labels)
    while True:
        choice = typer.prompt("Rating", default="3")
        if choice in choices:
            return choices[choice]
        console.print("[red]Choose 1-4[/red]")


def _run_quiz(run: QuizRun):
    while not run.is_complete:
        question = run.current_question
        console.print(f"\n[bold]Question {run.index + 1}/{len(run.questions)}[/bold]")
        if isinstance(question, MCQQuestion):
            console.print(f"  [green]{question.question_text}[/green] {question.phonetic or ''}")
            for i, option in enumerate(question.options, 1):
                console.print(f"  {i}. {option}")
            choice = typer.prompt("Answer", type=int)
            response = question.options[choice - 1] if 1 <= choice <= len(question.options) else ""
        else:
            console.print(f"  Meaning: {question.hint}")
            response = typer.prompt("Spelling")

        if run.answer(response):
            console.print("[green]✓ Correct[/green]")
        else:
            console.print(f"[red]✗[/red] Answer: {question.correct_answer}")

    if run.result:
        console.print(f"\n[bold]Score:[/bold] {run.result.correct_count}/{run.result.total_questions}")


@app.command()
def review(user_id: int):
    """Run today's study session (learning, then optional reinforcement and quiz)"""
    db = SessionLocal()
    daily_state = load_daily_state(user_id)
    orchestrator = None
    try:
        if not _require_user(db, user_id):
            return
        store = VocabStore(db, user_id)
        orchestrator = SessionOrchestrator(store, daily_state, streak=StreakTracker(store))
        orchestrator.start_learning()

        if orchestrator.complete and not orchestrator.touched_words():
            if not store.get_all_card_states():
                console.print("[yellow]No words yet - add words or enable a list first.[/yellow]")
            else:
                console.print("[green]Nothing due today. Come back tomorrow![/green]")
            return

        while not orchestrator.complete:
            card = orchestrator.current_card
            console.print(f"\n[bold]{orchestrator.index + 1} / {len(orchestrator.queue)}[/bold]")
            console.print(f"  [bold green]{card.word.word}[/bold green] {card.word.phonetic or ''}")
            typer.prompt("Press Enter to flip", default="", show_default=False)
            _show_definitions(card.word)
            quality = _prompt_rating(orchestrator.preview_intervals())
            orchestrator.rate(quality)

        stats = orchestrator.stats
        console.print("\n[green]✓[/green] [bold]Today's learning complete![/bold]")
        console.print(f"  Reviewed: {stats.reviewed}  Remembered: {stats.correct}  Forgotten: {stats.incorrect}")
        if stats.accuracy is not None:
            console.print(f"  Accuracy: {stats.accuracy:.0%}")
        if orchestrator.buffer.pending:
            console.print("[red]Some ratings could not be saved yet; they will be retried.[/red]")

        if typer.confirm("Reinforce today's words?", default=False):
            words = orchestrator.start_reinforcement()
            while not orchestrator.complete:
                word = orchestrator.current_word
                console.print(f"\n[bold]{orchestrator.index + 1} / {len(words)}[/bold]  [bold green]{word.word}[/bold green]")
                typer.prompt("Press Enter to flip", default="", show_default=False)
                _show_definitions(word)
                typer.prompt("Press Enter for next", default="", show_default=False)
                orchestrator.next_card()

        if typer.confirm("Take a quiz on today's words?", default=False):
            questions = orchestrator.start_quiz()
            if not questions:
                console.print("[yellow]Need at least 4 studied words today for a quiz.[/yellow]")
            else:
                _run_quiz(orchestrator.quiz)
    except VocabError as e:
        console.print(f"[red]✗[/red] Error: {escape(str(e))}")
    finally:
        if orchestrator:
            orchestrator.close()
        save_daily_state(user_id, daily_state)
        db.close()


@app.command()
def quiz(
    user_id: int,
    mode: str = typer.Option("mcq", help="Quiz type: mcq or spelling"),
    count: int = typer.Option(settings.quiz_question_count, help="Number of questions")
):
    """Quiz yourself on all studied words"""
    if mode not in ["mcq", "spelling"]:
        console.print("[red]✗[/red] Invalid mode. Use 'mcq' or 'spelling'")
        return

    db = SessionLocal()
    try:
        if not _require_user(db, user_id):
            return
        store = VocabStore(db, user_id)
        generator = QuizGenerator(store)
        if mode == "mcq":
            questions = generator.generate_mcq(count)
        else:
            questions = generator.generate_spelling(count)

        if not questions:
            needed = 4 if mode == "mcq" else 1
            console.print(f"[yellow]Not enough studied words for this quiz (need {needed}).[/yellow]")
            return

        _run_quiz(QuizRun(store, questions, mode=mode, streak=StreakTracker(store)))
    except VocabError as e:
        console.print(f"[red]✗[/red] Error: {escape(str(e))}")
    finally:
        db.close()


@app.command()
def stats(user_id: int):
    """View learning progress"""
    db = SessionLocal()
    try:
        if not _require_user(db, user_id):
            return
        progress = compute_progress(VocabStore(db, user_id))

        console.print("\n[bold]Learning Progress[/bold]\n")
        console.print("[cyan]Statistics:[/cyan]")
        console.print(f"  Words tracked: {progress.total_words}")
        console.print(f"  Total reviews: {progress.total_reviews}")
        console.print(f"  Current streak: {progress.streak.current_streak} days (best {progress.streak.longest_streak})")
        if progress.quiz_accuracy is not None:
            console.print(f"  Quiz accuracy: {progress.quiz_accuracy:.0%}")

        table = Table(show_header=True, header_style="bold magenta", title="Cards by status")
        table.add_column("Status", style="cyan")
        table.add_column("Cards", justify="right")
        for status in ["new", "learning", "review", "mastered", "retired"]:
            table.add_row(status, str(progress.status_counts.get(status, 0)))
        console.print(table)

        forecast = Table(show_header=True, header_style="bold magenta", title="Upcoming reviews")
        forecast.add_column("Date", style="yellow")
        forecast.add_column("Due", justify="right")
        for day in progress.due_forecast:
            forecast.add_row(str(day.date), str(day.count))
        console.print(forecast)
    finally:
        db.close()


@app.command()
def export(user_id: int, output: str = typer.Option(None, help="Output file path")):
    """Export your words and progress to JSON"""
    db = SessionLocal()
    try:
        if not _require_user(db, user_id):
            return
        path = Path(output or f"vocab-backup-{date.today().isoformat()}.json")
        path.write_text(export_data(VocabStore(db, user_id)), encoding="utf-8")
        console.print(f"[green]✓[/green] Exported to {path}")
    finally:
        db.close()


@app.command("import-data")
def import_data_file(user_id: int, file_path: str):
    """Restore words and progress from an export (replaces current data)"""
    db = SessionLocal()
    try:
        if not _require_user(db, user_id):
            return
        if not typer.confirm("⚠️  This replaces your current words and progress. Continue?"):
            console.print("[yellow]Cancelled.[/yellow]")
            return
        bundle = import_data(VocabStore(db, user_id), Path(file_path).read_text(encoding="utf-8"))
        console.print(f"[green]✓[/green] Imported {len(bundle.words)} words and {len(bundle.card_states)} cards")
    except (VocabError, OSError) as e:
        console.print(f"[red]✗[/red] Error: {escape(str(e))}")
    finally:
        db.close()


@app.command()
def restart_today(user_id: int):
    """Clear today's session memory so learning starts over"""
    daily_state = load_daily_state(user_id)
    daily_state.ensure_day()
    daily_state.restart()
    save_daily_state(user_id, daily_state)
    console.print("[green]✓[/green] Today's session reset")


if __name__ == "__main__":
    app()
