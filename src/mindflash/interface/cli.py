"""MindFlash CLI: root commands and subgroup registration."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from mindflash.application.deck_service import DeckService
from mindflash.application.due import get_due_cards
from mindflash.application.scheduler import Scheduler
from mindflash.application.session import StudySession
from mindflash.application.stats import StatsService
from mindflash.application.utils.dates import format_day
from mindflash.domain.errors import MalformedPayloadError, MindFlashError
from mindflash.domain.models import Grade
from mindflash.interface._common import _resolve_with_overrides, fail, open_library

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="mindflash: Flashcards with Leitner-box spaced repetition.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Subgroups
# ---------------------------------------------------------------------------

deck_app = typer.Typer(help="Create, edit and browse decks.", no_args_is_help=True)
app.add_typer(deck_app, name="deck")

card_app = typer.Typer(help="Add, edit and remove cards.", no_args_is_help=True)
app.add_typer(card_app, name="card")

config_app = typer.Typer(help="Manage mindflash configuration.")
app.add_typer(config_app, name="config")

GRADE_KEYS = {"1": Grade.AGAIN, "2": Grade.HARD, "3": Grade.GOOD, "4": Grade.EASY}


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_file: Annotated[
        Path | None, typer.Option("--data-file", help="Override the library data file.")
    ] = None,
):
    """Global settings for mindflash."""
    ctx.ensure_object(dict)
    # 0 means "not given", so MINDFLASH_VERBOSE or the config file decides
    ctx.obj["verbose_bonus"] = verbose or None
    ctx.obj["data_file"] = data_file


# ---------------------------------------------------------------------------
# Deck subgroup
# ---------------------------------------------------------------------------


@deck_app.command("list")
def deck_list(
    ctx: typer.Context,
    search: Annotated[str, typer.Option("--search", "-s", help="Filter by name/description.")] = "",
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List decks with card and due counts."""
    context, _ = open_library(ctx)
    decks = DeckService(context).filter_decks(search)
    today = context.today()

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "id": d.id,
                        "name": d.name,
                        "description": d.description,
                        "cards": len(d.cards),
                        "due": len(get_due_cards(d, today)),
                    }
                    for d in decks
                ],
                indent=2,
            )
        )
        return

    if not decks:
        typer.secho("No decks found.", fg="yellow")
        return

    for d in decks:
        due_count = len(get_due_cards(d, today))
        typer.echo(f"{d.id}  {d.name}  ({len(d.cards)} cards, {due_count} due)")
        if d.description:
            typer.echo(f"    {d.description}")


@deck_app.command("add")
def deck_add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Deck name.")],
    description: Annotated[str, typer.Option("--description", "-d", help="Description.")] = "",
):
    """Create a new deck."""
    context, repo = open_library(ctx)
    try:
        deck = DeckService(context).create_deck(name, description)
    except MindFlashError as e:
        fail(e)
    repo.save(context)
    typer.secho(f"Created deck '{deck.name}' ({deck.id})", fg="green")


@deck_app.command("edit")
def deck_edit(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck ID.")],
    name: Annotated[str | None, typer.Option(help="New name.")] = None,
    description: Annotated[str | None, typer.Option(help="New description.")] = None,
):
    """Rename a deck or change its description."""
    context, repo = open_library(ctx)
    try:
        deck = DeckService(context).update_deck(deck_id, name=name, description=description)
    except MindFlashError as e:
        fail(e)
    repo.save(context)
    typer.secho(f"Updated deck '{deck.name}'", fg="green")


@deck_app.command("remove")
def deck_remove(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck ID.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Delete a deck and all of its cards."""
    context, repo = open_library(ctx)
    service = DeckService(context)
    try:
        deck = service.get_deck(deck_id)
        if not force:
            typer.confirm(f"Delete deck '{deck.name}' and its {len(deck.cards)} cards?", abort=True)
        service.delete_deck(deck_id)
    except MindFlashError as e:
        fail(e)
    repo.save(context)
    typer.secho(f"Deleted deck '{deck.name}'", fg="green")


@deck_app.command("show")
def deck_show(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck ID.")],
):
    """Show a deck's cards with their box and due date."""
    context, _ = open_library(ctx)
    try:
        deck = DeckService(context).get_deck(deck_id)
    except MindFlashError as e:
        fail(e)

    typer.secho(deck.name, bold=True)
    if deck.description:
        typer.echo(deck.description)
    if not deck.cards:
        typer.secho("No cards yet.", fg="yellow")
        return

    for card in deck.cards:
        due_on = format_day(card.next_due) if card.next_due else "now"
        typer.echo(
            f"{card.id}  box {card.box}  ease {card.ease}  due {due_on}  "
            f"{_truncate(card.front, 40)}"
        )


# ---------------------------------------------------------------------------
# Card subgroup
# ---------------------------------------------------------------------------


@card_app.command("add")
def card_add(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck ID.")],
    front: Annotated[str, typer.Argument(help="Question side.")],
    back: Annotated[str, typer.Argument(help="Answer side.")],
):
    """Add a card to a deck. New cards are due today."""
    context, repo = open_library(ctx)
    try:
        card = DeckService(context).create_card(deck_id, front, back)
    except MindFlashError as e:
        fail(e)
    repo.save(context)
    typer.secho(f"Added card {card.id}", fg="green")


@card_app.command("edit")
def card_edit(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck ID.")],
    card_id: Annotated[str, typer.Argument(help="Card ID.")],
    front: Annotated[str | None, typer.Option(help="New question side.")] = None,
    back: Annotated[str | None, typer.Option(help="New answer side.")] = None,
):
    """Edit a card's text. Scheduling state is kept."""
    context, repo = open_library(ctx)
    try:
        DeckService(context).update_card(deck_id, card_id, front=front, back=back)
    except MindFlashError as e:
        fail(e)
    repo.save(context)
    typer.secho(f"Updated card {card_id}", fg="green")


@card_app.command("remove")
def card_remove(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck ID.")],
    card_id: Annotated[str, typer.Argument(help="Card ID.")],
):
    """Delete a card."""
    context, repo = open_library(ctx)
    try:
        DeckService(context).delete_card(deck_id, card_id)
    except MindFlashError as e:
        fail(e)
    repo.save(context)
    typer.secho(f"Deleted card {card_id}", fg="green")


# ---------------------------------------------------------------------------
# Study
# ---------------------------------------------------------------------------


@app.command()
def study(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck to study.")],
    seed: Annotated[int | None, typer.Option(help="Seed for the card order.")] = None,
    shuffle: Annotated[
        bool | None, typer.Option("--shuffle/--no-shuffle", help="Shuffle due cards.")
    ] = None,
):
    """[bold green]Study[/bold green] the due cards of a deck."""
    context, repo = open_library(ctx, seed=seed, shuffle=shuffle)
    try:
        deck = DeckService(context).get_deck(deck_id)
    except MindFlashError as e:
        fail(e)

    session = StudySession(context)
    if not session.start(deck):
        typer.secho("No cards due. Come back later!", fg="green")
        return

    typer.echo(f"Studying '{deck.name}': {session.remaining} due")

    while session.current() is not None:
        card = session.current()
        typer.echo("")
        typer.secho(f"Q: {card.front}", bold=True)
        answer = typer.prompt("Show answer [Enter] / quit [q]", default="", show_default=False)
        if answer.strip().lower() == "q":
            break

        typer.echo(f"A: {card.back}")
        chosen = _prompt_grade()
        if chosen is None:
            break

        session.grade(chosen)
        repo.save(context)
        typer.echo(f"Session: {session.reviewed_count}  Due: {session.still_due()}")

    typer.secho(f"\nReviewed {session.reviewed_count} cards.", fg="green")
    if session.remaining:
        typer.echo(f"{session.remaining} left in this session.")
        session.abandon()


def _prompt_grade() -> Grade | None:
    while True:
        raw = typer.prompt("Grade [1] again [2] hard [3] good [4] easy / quit [q]")
        token = raw.strip().lower()
        if token == "q":
            return None
        grade = GRADE_KEYS.get(token) or Grade.parse(token)
        if grade is not None:
            return grade
        typer.secho(f"Unknown grade '{raw}'.", fg="yellow")


@app.command()
def grade(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck ID.")],
    card_id: Annotated[str, typer.Argument(help="Card ID.")],
    grade_token: Annotated[str, typer.Argument(metavar="GRADE", help="again, hard, good or easy.")],
):
    """Grade a single card without a session."""
    context, repo = open_library(ctx)
    try:
        card = DeckService(context).get_card(deck_id, card_id)
        Scheduler(context.clock, strict=context.strict_grades).schedule(card, grade_token)
    except MindFlashError as e:
        fail(e)
    context.review_log.record_review(context.today())
    repo.save(context)
    typer.echo(f"box {card.box}  ease {card.ease}  next due {format_day(card.next_due)}")


@app.command()
def due(
    ctx: typer.Context,
    deck_id: Annotated[str | None, typer.Argument(help="Deck ID. Defaults to all decks.")] = None,
):
    """Show how many cards are due today."""
    context, _ = open_library(ctx)
    try:
        decks = [DeckService(context).get_deck(deck_id)] if deck_id else context.decks
    except MindFlashError as e:
        fail(e)

    today = context.today()
    for deck in decks:
        typer.echo(f"{deck.name}: {len(get_due_cards(deck, today))} due")


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


@app.command()
def stats(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Limit to one deck ID.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show totals, due count, mastered cards, streak and box distribution."""
    context, _ = open_library(ctx)
    service = StatsService(context)
    try:
        summary = service.summary(deck)
        boxes = service.box_distribution(deck)
    except MindFlashError as e:
        fail(e)

    if json_output:
        typer.echo(json.dumps({**asdict(summary), "boxes": boxes}, indent=2))
        return

    typer.echo(f"Total cards: {summary.total}")
    typer.echo(f"Due today:   {summary.due_today}")
    typer.echo(f"Mastered:    {summary.mastered}")
    typer.echo(f"Streak:      {summary.streak} day(s)")
    typer.echo("Boxes: " + "  ".join(f"{b}:{n}" for b, n in boxes.items()))


@app.command()
def history(
    ctx: typer.Context,
    days: Annotated[int | None, typer.Option(min=1, help="Number of days to show.")] = None,
):
    """Show reviews per day for the recent window."""
    context, _ = open_library(ctx)
    for day, count in StatsService(context).review_history(days):
        typer.echo(f"{format_day(day)}  {count:>3}  {'#' * count}")


# ---------------------------------------------------------------------------
# Data management
# ---------------------------------------------------------------------------


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    path: Annotated[
        Path | None,
        typer.Argument(help="Output file. Defaults to mindflash-backup-<date>.json."),
    ] = None,
):
    """Export all decks and the review log to JSON."""
    context, repo = open_library(ctx)
    path = path or Path(f"mindflash-backup-{format_day(context.today())}.json")
    payload = repo.export_payload(context)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    typer.secho(f"Exported {len(context.decks)} decks to {path}", fg="green")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Backup file to import.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Replace the library with the contents of a backup file."""
    context, repo = open_library(ctx)
    if not force and context.decks:
        typer.confirm("This replaces all decks and analytics. Continue?", abort=True)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        fail(e)
    except json.JSONDecodeError as e:
        fail(MalformedPayloadError(f"{path} is not valid JSON: {e}"))

    try:
        repo.import_payload(context, payload)
    except MindFlashError as e:
        fail(e)
    typer.secho(f"Imported {len(context.decks)} decks.", fg="green")


@app.command()
def reset(
    ctx: typer.Context,
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Erase all decks, cards and analytics."""
    context, repo = open_library(ctx)
    if not force:
        typer.confirm("This will erase all decks, cards, and analytics. Continue?", abort=True)
    repo.reset(context)
    typer.secho("Library reset.", fg="green")


@app.command()
def seed(ctx: typer.Context):
    """Create demo decks if the library is empty."""
    context, repo = open_library(ctx)
    created = DeckService(context).seed_demo()
    if not created:
        typer.secho("Library is not empty; nothing seeded.", fg="yellow")
        return
    repo.save(context)
    typer.secho(f"Seeded {len(created)} demo decks.", fg="green")


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8777,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP API server."""
    import uvicorn

    uvicorn.run("mindflash.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


def _truncate(text: str, n: int) -> str:
    return text if len(text) <= n else text[: n - 1] + "…"
