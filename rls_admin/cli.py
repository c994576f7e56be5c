"""
Admin CLI for inspecting and pruning a release store.

Provides read commands (list, query, get) and delete on top of any
configured release driver.
"""

import asyncio
import json
import logging
import sys

import click

from rls_common.driver import Driver
from rls_common.errors import DriverError
from rls_common.models import RELEASE_STATUSES, Release
from rls_persistence.factory import new_driver


def get_driver(ctx: click.Context) -> Driver:
    """Get the driver configured on the command group."""
    try:
        return new_driver(ctx.obj["driver"], ctx.obj["db_path"])
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def parse_selector(pairs: tuple[str, ...]) -> dict[str, str]:
    """Turn KEY=VALUE arguments into a label selector."""
    selector = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}")
        selector[key] = value
    return selector


def run_async(coro):
    """Helper to run async functions in CLI commands."""
    return asyncio.run(coro)


def echo_releases(releases: list[Release], json_output: bool) -> None:
    """Print releases as JSON or as a table sorted by name and revision."""
    releases = sorted(releases, key=lambda r: (r.name, r.version))

    if json_output:
        click.echo(json.dumps([r.to_dict() for r in releases], indent=2))
        return

    if not releases:
        click.echo("No releases found.")
        return

    click.echo(f"\n{'Key':<40} {'Namespace':<20} {'Status':<18} {'Labels'}")
    click.echo("-" * 100)
    for r in releases:
        labels = ",".join(f"{k}={v}" for k, v in sorted(r.labels.items()))
        click.echo(f"{r.key:<40} {r.namespace:<20} {r.status:<18} {labels}")
    click.echo()


@click.group()
@click.option("--driver", "driver_name", help="Release driver (default: RLS_DRIVER env or sql)")
@click.option("--db-path", help="SQLite database path (default: RLS_DB_PATH env or ~/.rls/releases.db)")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Logging level (default: WARNING)",
)
@click.pass_context
def cli(ctx: click.Context, driver_name: str | None, db_path: str | None, log_level: str):
    """RLS Admin - Inspect and prune stored releases."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["driver"] = driver_name
    ctx.obj["db_path"] = db_path


@cli.command("list")
@click.option("--name", help="Only releases with this name")
@click.option("--status", type=click.Choice(RELEASE_STATUSES), help="Only releases in this status")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def release_list(ctx: click.Context, name: str | None, status: str | None, json_output: bool):
    """List stored releases."""

    def predicate(release: Release) -> bool:
        if name and release.name != name:
            return False
        if status and release.status != status:
            return False
        return True

    async def list_releases():
        driver = get_driver(ctx)
        await driver.initialize()

        try:
            releases = await driver.list(predicate)
            echo_releases(releases, json_output)
        finally:
            await driver.close()

    run_async(list_releases())


@cli.command("query")
@click.option("-l", "--label", "labels", multiple=True, help="Label selector KEY=VALUE (repeatable)")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def release_query(ctx: click.Context, labels: tuple[str, ...], json_output: bool):
    """List releases whose labels match every selector."""
    try:
        selector = parse_selector(labels)
    except click.BadParameter as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    async def query_releases():
        driver = get_driver(ctx)
        await driver.initialize()

        try:
            releases = await driver.query(selector)
            echo_releases(releases, json_output)
        finally:
            await driver.close()

    run_async(query_releases())


@cli.command("get")
@click.argument("key")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def release_get(ctx: click.Context, key: str, json_output: bool):
    """Show a release by key (<name>.v<version>)."""

    async def get_release():
        driver = get_driver(ctx)
        await driver.initialize()

        try:
            release = await driver.get(key)
        except DriverError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        finally:
            await driver.close()

        if json_output:
            click.echo(json.dumps(release.to_dict(), indent=2))
            return

        click.echo("\nRelease Details:")
        click.echo(f"  Key:        {release.key}")
        click.echo(f"  Name:       {release.name}")
        click.echo(f"  Revision:   {release.version}")
        click.echo(f"  Namespace:  {release.namespace}")
        click.echo(f"  Status:     {release.status}")
        for label, value in sorted(release.labels.items()):
            click.echo(f"  Label:      {label}={value}")
        click.echo()

    run_async(get_release())


@cli.command("delete")
@click.argument("key")
@click.pass_context
def release_delete(ctx: click.Context, key: str):
    """Delete a release by key."""

    async def delete_release():
        driver = get_driver(ctx)
        await driver.initialize()

        try:
            release = await driver.delete(key)
        except DriverError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        finally:
            await driver.close()

        click.echo(f"✓ Release deleted: {release.name} (revision {release.version})")

    run_async(delete_release())


if __name__ == "__main__":
    cli()
