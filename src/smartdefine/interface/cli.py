"""SmartDefine CLI: vocabulary review commands, reminders and configuration."""

import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, Any

import typer

from smartdefine.application.config import AppConfig, resolve_config
from smartdefine.application.factory import get_word_store
from smartdefine.application.scheduling import SchedulingService
from smartdefine.application.stats import StatsAggregator
from smartdefine.domain.constants import ReviewType
from smartdefine.domain.errors import SmartDefineError
from smartdefine.domain.models import ReviewOutcome
from smartdefine.infrastructure.codec import due_word_to_dict, record_to_dict

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="smartdefine: spaced-repetition review for the words you look up.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage smartdefine configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_with_overrides(ctx: typer.Context, **overrides: Any) -> AppConfig:
    obj = ctx.obj or {}
    merged = {"store_path": obj.get("store_path"), "verbose": obj.get("verbose")}
    merged.update(overrides)
    config = resolve_config(merged)
    if config.verbose > 1:
        logging.getLogger("smartdefine").setLevel(logging.DEBUG)
    return config


def _service(config: AppConfig) -> SchedulingService:
    if config.store_backend == "memory":
        logger.warning("Memory store selected: changes are discarded when this command exits")
    return SchedulingService(
        get_word_store(config),
        aggregator=StatsAggregator(treat_missing_as_new=config.treat_missing_as_new),
    )


def _run(coro):
    """Run a coroutine, turning engine errors into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except SmartDefineError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    store: Annotated[
        Path | None, typer.Option("--store", help="Word store file (.json, .yaml).")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for smartdefine."""
    ctx.ensure_object(dict)
    ctx.obj["store_path"] = store
    # Config level 1 is INFO and each -v adds one.
    ctx.obj["verbose"] = 1 + verbose if verbose else None


# ---------------------------------------------------------------------------
# Word commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Word to save (stored lower-case).")],
    category: Annotated[str, typer.Option("--category", "-c", help="Word list.")] = "General",
    explanation: Annotated[str, typer.Option(help="Explanation text to keep.")] = "",
    notes: Annotated[str | None, typer.Option(help="Personal notes.")] = None,
    context: Annotated[
        str | None, typer.Option("--context", help="Sentence the word was found in.")
    ] = None,
):
    """[bold green]Save[/bold green] a word; it is due for review immediately."""
    config = _resolve_with_overrides(ctx)
    record = _run(
        _service(config).add_word(word, category, explanation, notes=notes, context=context)
    )
    typer.secho(f"Saved '{record.word}' to '{category}'.", fg="green")


@app.command()
def remove(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Word to delete.")],
    category: Annotated[str, typer.Option("--category", "-c", help="Word list.")] = "General",
):
    """Delete a word from a category."""
    config = _resolve_with_overrides(ctx)
    _run(_service(config).delete_word(category, word))
    typer.echo(f"Removed '{word}' from '{category}'.")


@app.command()
def review(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Word that was reviewed.")],
    correct: Annotated[
        bool, typer.Option("--correct/--incorrect", help="Outcome of the review.")
    ] = True,
    category: Annotated[str, typer.Option("--category", "-c", help="Word list.")] = "General",
    confidence: Annotated[
        float, typer.Option(min=0.0, max=1.0, clamp=True, help="Confidence from 0 to 1.")
    ] = 0.5,
    response_time: Annotated[
        float, typer.Option("--response-time", min=0, help="Response time in ms.")
    ] = 5000,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Record a review outcome and reschedule the word."""
    config = _resolve_with_overrides(ctx)
    outcome = ReviewOutcome(
        is_correct=correct, response_time_ms=response_time, confidence_level=confidence
    )
    record = _run(_service(config).review_word(category, word, outcome))

    if json_output:
        typer.echo(json.dumps(record_to_dict(record), indent=2))
        return

    typer.echo(
        f"{record.word}: {record.difficulty.value}, ease {record.ease_factor:.2f}, "
        f"next review in {record.interval} day(s)"
    )


@app.command()
def due(
    ctx: typer.Context,
    review_type: Annotated[
        ReviewType, typer.Option("--type", "-t", help="Which words to include.")
    ] = ReviewType.ALL,
    limit: Annotated[int | None, typer.Option(help="Maximum words to list.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List words due for review, most urgent first."""
    config = _resolve_with_overrides(ctx)
    items = _run(
        _service(config).get_due(review_type, config.default_limit if limit is None else limit)
    )

    if json_output:
        typer.echo(json.dumps([due_word_to_dict(item) for item in items], indent=2))
        return

    if not items:
        typer.secho("No words due.", fg="green")
        return

    for item in items:
        typer.echo(
            f"{item.priority:7.1f}  {item.record.word:<24} "
            f"[{item.category}] {item.record.difficulty.value}"
        )


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show study statistics."""
    config = _resolve_with_overrides(ctx)
    result = _run(_service(config).get_stats())

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    typer.echo(
        f"Words: {result.total_words}  New: {result.new_words}  "
        f"Learning: {result.learning_words}  Mastered: {result.mastered_words}"
    )
    color = "yellow" if result.overdue_words else "green"
    typer.secho(f"Overdue: {result.overdue_words}", fg=color)
    typer.echo(f"Reviewed today: {result.today_reviews}  Streak: {result.current_streak} day(s)")


@app.command()
def recommend(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Suggest what to study next."""
    config = _resolve_with_overrides(ctx)
    items = _run(_service(config).get_recommendations(config.learning))

    if json_output:
        typer.echo(json.dumps([asdict(item) for item in items], indent=2))
        return

    colors = {"high": "red", "medium": "yellow", "low": "green"}
    for item in items:
        typer.secho(f"[{item.priority}] {item.message}", fg=colors.get(item.priority))


# ---------------------------------------------------------------------------
# Background commands
# ---------------------------------------------------------------------------


@app.command()
def remind(
    ctx: typer.Context,
    watch: Annotated[
        bool, typer.Option("--watch", help="Keep running and check periodically.")
    ] = False,
):
    """Update the overdue badge and send a review reminder if words are due."""
    from smartdefine.application.reminders import ReminderService
    from smartdefine.infrastructure.adapters import LoggingNotifier

    config = _resolve_with_overrides(ctx)
    reminders = ReminderService(
        _service(config),
        LoggingNotifier(),
        settings=config.learning,
        badge_limit=config.badge_limit,
    )

    if not watch:
        count = _run(reminders.update_badge())
        sent = _run(reminders.send_reminder())
        typer.echo(f"Due: {count}" + ("  (reminder sent)" if sent else ""))
        return

    config.log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(config.log_dir / "reminders.log", encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))
    logging.getLogger("smartdefine").addHandler(handler)

    async def run():
        stop = asyncio.Event()
        try:
            await reminders.run(stop)
        except asyncio.CancelledError:
            stop.set()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        typer.echo("Stopped.")
    finally:
        logging.getLogger("smartdefine").removeHandler(handler)
        handler.close()


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8777,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Start the HTTP API used by the browser extension."""
    import uvicorn

    uvicorn.run("smartdefine.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))


def main():
    app()
