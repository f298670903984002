"""CLI entry point for AutoList batch edits."""

from pathlib import Path

import click
from loguru import logger

from .api.widar import WidarClient
from .config import AutoListConfig
from .errors import MalformedSelectionError
from .parser import ParseResult, Selection, parse_commands
from .quickstatements import to_quickstatements
from .scheduler import CommandScheduler

log = logger.bind(component="cli")


def _input_options(f):
    """Options shared by every subcommand that builds a command list."""
    options = [
        click.argument("items", nargs=-1),
        click.option(
            "-s",
            "--statement",
            "statements",
            multiple=True,
            help="Statement row: 'P31:Q5' adds, '-P31' or '-P31:Q5' removes.",
        ),
        click.option(
            "-f",
            "--file",
            "commands_file",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="File with one statement row per line.",
        ),
        click.option(
            "--create",
            "create_pages",
            multiple=True,
            help="Create a new item linked to this page.",
        ),
        click.option(
            "--redlink",
            "redlink_pages",
            multiple=True,
            help="Create a blank item labelled after this missing page.",
        ),
        click.option("--wiki", default=None, help="Wiki of the pages, e.g. enwiki."),
        click.option(
            "-c",
            "--config",
            "config_file",
            type=click.Path(exists=True),
            default=None,
            help="Path to .env file.",
        ),
        click.option("-v", "--verbose", is_flag=True, help="Enable debug logging."),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _make_config(config_file: str | None, **overrides) -> AutoListConfig:
    """Build config; CLI flags are passed as kwargs and win over env/.env."""
    kwargs = {k: v for k, v in overrides.items() if v is not None}
    if config_file:
        kwargs["_env_file"] = config_file
    return AutoListConfig(**kwargs)  # type: ignore[arg-type]


def _build_commands(
    items: tuple[str, ...],
    statements: tuple[str, ...],
    commands_file: str | None,
    create_pages: tuple[str, ...],
    redlink_pages: tuple[str, ...],
) -> ParseResult:
    rows = list(statements)
    if commands_file:
        rows.extend(Path(commands_file).read_text().splitlines())

    selections = [Selection(entity_ref=item, group_id=item) for item in items]
    selections += [
        Selection(page=page, create=True, group_id=page) for page in create_pages
    ]
    selections += [
        Selection(page=page, create=True, from_redlink=True, group_id=page)
        for page in redlink_pages
    ]
    if not selections:
        raise click.UsageError("Give at least one item, --create or --redlink page.")

    try:
        result = parse_commands("\n".join(rows), selections)
    except MalformedSelectionError as e:
        raise click.UsageError(str(e)) from e

    for err in result.malformed:
        click.echo(f"  Skipped unrecognized row: {err.text.strip()}", err=True)
    if not result.commands:
        raise click.UsageError("Nothing to do: no valid statement rows.")
    return result


@click.group()
def main() -> None:
    """Run batches of Wikidata statement edits on lists of items."""


@main.command()
@_input_options
@click.option("--concurrency", type=int, default=None, help="Commands in flight.")
@click.option(
    "--throttle-ms", type=int, default=None, help="Pause after each completion."
)
@click.option("--bot", is_flag=True, help="Use bot-account limits.")
@click.option("--dry-run", is_flag=True, help="Show the commands without running them.")
def run(
    items: tuple[str, ...],
    statements: tuple[str, ...],
    commands_file: str | None,
    create_pages: tuple[str, ...],
    redlink_pages: tuple[str, ...],
    wiki: str | None,
    config_file: str | None,
    verbose: bool,
    concurrency: int | None,
    throttle_ms: int | None,
    bot: bool,
    dry_run: bool,
) -> None:
    """Execute statement rows on ITEMS (and on newly created items)."""
    config = _make_config(
        config_file,
        wiki=wiki,
        concurrency=concurrency,
        throttle_ms=throttle_ms,
        bot_mode=bot or None,
        dry_run=dry_run or None,
        verbose=verbose or None,
        log_level="DEBUG" if verbose else None,
    )
    config.setup_logging()

    result = _build_commands(
        items, statements, commands_file, create_pages, redlink_pages
    )
    log.info(
        f"Batch: {len(result.commands)} commands, wiki={config.wiki} "
        f"bot={config.bot_mode} dry_run={config.dry_run}"
    )

    if config.dry_run:
        click.echo(f"[DRY-RUN] {len(result.commands)} commands:")
        for command in result.commands:
            click.echo(f"  {command.describe()}")
        return

    with WidarClient.from_config(config) as client:
        scheduler = CommandScheduler(client, config)
        handle = scheduler.start(result.commands)
        try:
            while not handle.wait(timeout=1.0):
                progress = handle.progress()
                click.echo(f"\r  Running: {progress.done}/{progress.total}", nl=False)
        except KeyboardInterrupt:
            click.echo("\nStopping, waiting for running commands to finish...")
            scheduler.cancel(handle)
            handle.wait()

    report = handle.report
    click.echo("")
    click.echo(
        f"Batch {report.outcome}: {report.done}/{report.total} done, "
        f"{len(report.failed_ids)} failed"
    )
    if report.created_ids:
        click.echo("Created items:")
        for item_id in report.created_ids:
            click.echo(f"  {item_id}")
    if report.failed_ids:
        raise SystemExit(1)


@main.command()
@_input_options
def export(
    items: tuple[str, ...],
    statements: tuple[str, ...],
    commands_file: str | None,
    create_pages: tuple[str, ...],
    redlink_pages: tuple[str, ...],
    wiki: str | None,
    config_file: str | None,
    verbose: bool,
) -> None:
    """Print the batch in QuickStatements v1 format instead of running it."""
    config = _make_config(
        config_file, wiki=wiki, log_level="DEBUG" if verbose else None
    )
    config.setup_logging()

    result = _build_commands(
        items, statements, commands_file, create_pages, redlink_pages
    )
    click.echo(to_quickstatements(result.commands, config.wiki))
