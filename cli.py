"""
CLI entrypoint for uiverify.

Commands:
  conditions – List the condition catalog.
  check      – Open a URL and poll one condition against it.
"""

from __future__ import annotations

import asyncio
import logging
import re
import sys
from typing import Any, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from uiverify.browser import BrowserManager
from uiverify.conditions import CATALOG, Condition, get_condition
from uiverify.errors import AssertionFailed, VerificationError
from uiverify.manager import AssertionManager
from uiverify.models import AssertionResult, ComparatorMode, TargetScope, VerifierConfig

console = Console()


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )


# ------------------------------------------------------------------
# CLI group
# ------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="uiverify")
def cli():
    """uiverify – poll UI conditions against a live page."""
    pass


# ------------------------------------------------------------------
# CONDITIONS command
# ------------------------------------------------------------------


@cli.command()
def conditions():
    """List every condition in the catalog."""
    table = Table(title="Conditions", show_lines=False)
    table.add_column("Name", style="bold cyan")
    table.add_column("Scope")
    table.add_column("Mode")
    table.add_column("Checks")

    for name in sorted(CATALOG):
        condition = CATALOG[name]
        table.add_row(
            name,
            condition.scope.value,
            "state" if condition.is_state else condition.mode.value,
            condition.expectation("…", "…"),
        )
    console.print(table)


# ------------------------------------------------------------------
# CHECK command
# ------------------------------------------------------------------


@cli.command()
@click.argument("url")
@click.option("--condition", "-c", "condition_name", required=True, help="Catalog condition name.")
@click.option("--target", "-t", default=None, help="Selector of the element to check.")
@click.option("--expected", "-e", default=None, help="Expected value (text, count, …).")
@click.option("--regex", is_flag=True, help="Treat --expected as a regular expression.")
@click.option("--arg", "-a", default=None, help="Attribute or CSS property name.")
@click.option("--timeout", type=int, default=None, help="Timeout override in ms.")
@click.option("--poll-interval", type=int, default=100, help="Poll interval in ms.")
@click.option("--headed", is_flag=True, help="Show the browser window.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def check(
    url: str,
    condition_name: str,
    target: Optional[str],
    expected: Optional[str],
    regex: bool,
    arg: Optional[str],
    timeout: Optional[int],
    poll_interval: int,
    headed: bool,
    verbose: bool,
):
    """Open URL and assert one condition, exiting 1 on failure."""
    _setup_logging(verbose)

    try:
        condition = get_condition(condition_name)
    except KeyError as e:
        raise click.BadParameter(str(e.args[0]), param_hint="--condition")
    if condition.scope == TargetScope.ELEMENT and not target:
        raise click.UsageError(f"Condition '{condition_name}' needs --target")

    if regex:
        condition = condition.with_mode(ComparatorMode.REGEX)
        expected_value: Any = re.compile(expected or "")
    else:
        expected_value = _coerce_expected(condition, expected)

    config = VerifierConfig(
        poll_interval_ms=poll_interval,
        headless=not headed,
        verbose=verbose,
    )

    try:
        result = asyncio.run(
            _run_check(config, url, condition, target, expected_value, arg, timeout)
        )
    except AssertionFailed as e:
        _display_result(e.result, condition_name)
        sys.exit(1)
    except VerificationError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(2)

    _display_result(result, condition_name)


async def _run_check(
    config: VerifierConfig,
    url: str,
    condition: Condition,
    target: Optional[str],
    expected: Any,
    arg: Optional[str],
    timeout: Optional[int],
) -> AssertionResult:
    async with BrowserManager(config) as browser:
        page = await browser.launch(url=url)
        verify = AssertionManager(page, config)
        return await verify.check(condition, target, expected, timeout=timeout, arg=arg)


def _coerce_expected(condition: Condition, raw: Optional[str]) -> Any:
    if condition.is_state or condition.mode == ComparatorMode.ATTRIBUTE_EXISTS:
        return None
    if condition.subject == "count":
        try:
            return int(raw or "")
        except ValueError:
            raise click.BadParameter(
                f"count conditions need an integer, got {raw!r}", param_hint="--expected"
            )
    return raw or ""


def _display_result(result: AssertionResult, condition_name: str) -> None:
    if result.passed:
        console.print(
            Panel(
                f"[bold green]✅ {condition_name}[/bold green]\n"
                f"Attempts: {result.attempts}  |  Duration: {result.elapsed_ms:.0f}ms",
                title="Passed",
                border_style="green",
            )
        )
        return
    console.print(
        Panel(
            f"[bold red]❌ {condition_name}[/bold red]\n"
            f"{result.message}\n"
            f"[dim]Expected: {result.expected_value!r}  Observed: {result.observed_value!r}[/dim]\n"
            f"Attempts: {result.attempts}  |  Duration: {result.elapsed_ms:.0f}ms",
            title="Failed",
            border_style="red",
        )
    )


# ------------------------------------------------------------------
# Entrypoint
# ------------------------------------------------------------------

if __name__ == "__main__":
    cli()
