"""Main CLI entry point."""

import logging

import click
from dayledger.config import Settings
from dayledger.database.factories import create_sqlite_database
from dayledger.domain.errors import ValidationError

# Import and register all commands at module level
from dayledger.cli.commands import (
    calc,
    category,
    export_cmd,
    init_categories,
    record,
    summary,
    sync,
)


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides DAYLEDGER_DB_PATH environment variable)",
    envvar="DAYLEDGER_DB_PATH",
)
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False),
    help="Directory for the local record cache (overrides DAYLEDGER_CACHE_DIR)",
    envvar="DAYLEDGER_CACHE_DIR",
)
@click.option("-v", "--verbose", count=True, help="Log more (-v for info, -vv for debug)")
@click.pass_context
def cli(ctx, db_path: str | None, cache_dir: str | None, verbose: int):
    """Dayledger - Daily inventory reconciliation for restaurants.

    Record each day's sales and item amounts, see the derived net cash
    and net profit, and report over months and arbitrary periods.
    """
    ctx.ensure_object(dict)
    _configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = Settings.from_env().with_overrides(database_path=db_path, cache_dir=cache_dir)
        except ValidationError as e:
            raise click.UsageError(str(e), ctx=ctx)
        db = create_sqlite_database(database_path=settings.resolve_database_path())
        db.connect()
        db.initialize_schema()
        ctx.obj["settings"] = settings
        ctx.obj["db"] = db


# Register all commands
init_categories.register_commands(cli)
category.register_commands(cli)
calc.register_commands(cli)
record.register_commands(cli)
sync.register_commands(cli)
summary.register_commands(cli)
export_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
