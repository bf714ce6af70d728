"""CLI interface using typer."""

import asyncio
import json
import logging

import typer
from pydantic import ValidationError
from rich.logging import RichHandler

from .catalog import Catalog, CatalogCheck, check_catalog, load_catalog
from .config import settings
from .healthcheck import HealthCheck
from .output import StreamingOutputWriter
from .results import HealthCheckResult
from .strategies import BaseStrategy, StrategyKind, parse_strategy

app = typer.Typer(
    name="resource-health",
    help="Check that cataloged resources are reachable and keep their titles",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False):
    """Send log records through rich, DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


async def _check(url: str, strategy: BaseStrategy) -> HealthCheckResult:
    async with HealthCheck(settings=settings) as healthcheck:
        return await healthcheck.run(url, strategy)


async def _check_file(catalog: Catalog) -> list[CatalogCheck]:
    async with HealthCheck(settings=settings) as healthcheck:
        return await check_catalog(catalog, healthcheck)


@app.command()
def check(
    url: str = typer.Argument(..., help="Resource URL to check"),
    kind: StrategyKind = typer.Option(StrategyKind.HTTP, "--kind", "-k", help="Health check strategy"),
    selector: str = typer.Option(None, "-s", "--selector", help="CSS selector of the title"),
    wait_for: str = typer.Option(None, "--wait-for", help="Load state to wait for (e2e)"),
    render: bool = typer.Option(False, "--render", help="Render JavaScript (zenscrape)"),
    premium: bool = typer.Option(False, "--premium", help="Use premium proxies (zenscrape)"),
    output: str = typer.Option(None, "-o", "--output", help="Output file (JSON)"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
):
    """Check a single resource."""
    setup_logging(verbose)

    descriptor: dict = {"kind": kind.value}
    if selector is not None:
        descriptor["titleSelector"] = selector
    if wait_for is not None:
        descriptor["waitForLoadState"] = wait_for
    if render:
        descriptor["render"] = True
    if premium:
        descriptor["premium"] = True

    try:
        strategy = parse_strategy(descriptor)
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e

    result = asyncio.run(_check(url, strategy))

    if output:
        with open(output, "w") as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        typer.echo(f"Saved to {output}")

    if result.success:
        typer.echo(f"OK {result.url}")
        typer.echo(f"Title: {result.title}")
    else:
        typer.echo(f"FAILED {result.url}")
        typer.echo(f"Error: {result.error}")
        raise typer.Exit(code=1)


@app.command("check-file")
def check_file(
    catalog: str = typer.Argument(..., help="JSON file mapping resource ids to resources"),
    output: str = typer.Option(None, "-o", "--output", help="Output file (JSONL)"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
):
    """Check every resource of a catalog file."""
    setup_logging(verbose)

    try:
        resources = load_catalog(catalog)
    except (OSError, ValueError) as e:
        typer.echo(f"Could not load {catalog}: {e}", err=True)
        raise typer.Exit(code=2)

    checks = asyncio.run(_check_file(resources))

    failed = 0
    for item in checks:
        if item.ok:
            typer.echo(f"  OK {item.resource.url}")
            continue

        failed += 1
        if item.result.success:
            typer.echo(f"  MISMATCH {item.resource.url}")
            typer.echo(f"    expected: {item.resource.title}")
            typer.echo(f"    found:    {item.result.title}")
        else:
            typer.echo(f"  FAILED {item.resource.url}")
            typer.echo(f"    {item.result.error}")

    if output:
        with StreamingOutputWriter(output) as writer:
            for item in checks:
                writer.write_one(item)
        typer.echo(f"Saved to {output}")

    typer.echo(f"\nChecked {len(checks)} resources: {len(checks) - failed} ok, {failed} failed")
    if failed:
        raise typer.Exit(code=1)


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"resource-health {__version__}")


if __name__ == "__main__":
    app()
