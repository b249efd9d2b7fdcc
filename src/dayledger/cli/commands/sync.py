"""Push locally pending records to the remote store."""

import asyncio

import click
from dayledger.cli.context import build_coordinator


@click.command("sync")
@click.pass_context
def sync(ctx):
    """Upload every record that was saved while offline."""
    coordinator = build_coordinator(ctx)

    async def run():
        try:
            return await coordinator.sync_pending()
        finally:
            await coordinator.close()

    synced = asyncio.run(run())
    remaining = coordinator.pending_dates()
    click.echo(f"Synced {synced} record(s).")
    if remaining:
        dates = ", ".join(d.isoformat() for d in remaining)
        click.echo(f"Still pending: {dates}")


def register_commands(cli):
    """Register sync command with main CLI."""
    cli.add_command(sync)
