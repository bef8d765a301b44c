"""Command-line interface for minisheet."""

from __future__ import annotations

import json
from pathlib import Path

import click

from minisheet import __version__


@click.group()
@click.version_option(version=__version__, prog_name="minisheet")
@click.option(
    "--config-dir",
    "config_dir",
    default=".",
    type=click.Path(file_okay=False),
    help="Directory containing minisheet.yaml.",
)
@click.pass_context
def main(ctx: click.Context, config_dir: str) -> None:
    """minisheet -- spreadsheet formula engine."""
    from minisheet.config import configure_logging, load_config

    base = Path(config_dir)
    try:
        config = load_config(base)
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))
    ctx.obj = {"config": config, "log_dir": configure_logging(config, base)}


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _parse_assignments(assignments: tuple[str, ...]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for item in assignments:
        if "=" not in item:
            raise click.ClickException(f"Invalid --set format: {item!r}. Use ADDR=TEXT.")
        k, v = item.split("=", 1)
        pairs.append((k.strip(), v))
    return pairs


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("text")
def parse(text: str) -> None:
    """Parse a formula body TEXT (without the leading '=')."""
    from minisheet.formulas import FormulaParseError, compile_formula

    body = text[1:] if text.startswith("=") else text
    try:
        formula = compile_formula(body)
    except FormulaParseError as e:
        raise click.ClickException(str(e))
    click.echo(f"{formula.op.name} {' '.join(formula.args)}")


@main.command("eval")
@click.option("--set", "assignments", multiple=True, help="Cell input as ADDR=TEXT (repeatable).")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.argument("addresses", nargs=-1)
def eval_cmd(assignments: tuple[str, ...], as_json: bool, addresses: tuple[str, ...]) -> None:
    """Evaluate cells given with --set and print ADDRESSES (default: all set cells)."""
    from minisheet.addressing import in_grid, is_valid_name
    from minisheet.sheet import Sheet

    sheet = Sheet()
    for addr, text in _parse_assignments(assignments):
        if not is_valid_name(addr) or not in_grid(addr):
            raise click.ClickException(f"Invalid cell address: {addr!r}")
        sheet.set_cell_input(addr, text)

    if addresses:
        displays = {a: sheet.get_cell_display(a) for a in addresses}
    else:
        displays = sheet.render_all()

    if as_json:
        click.echo(json.dumps(displays, indent=2))
        return
    for addr, display in displays.items():
        click.echo(f"{addr}\t{display}")


@main.command()
@click.argument("name")
def address(name: str) -> None:
    """Print the zero-based row and column of cell NAME."""
    from minisheet.addressing import name_to_address

    addr = name_to_address(name)
    if addr is None:
        raise click.ClickException(f"Invalid cell address: {name!r}")
    click.echo(f"{addr.row} {addr.col}")


@main.command("range")
@click.argument("span")
def range_cmd(span: str) -> None:
    """Print every cell in SPAN (FROM:TO), row-major."""
    from minisheet.addressing import InvalidAddressError
    from minisheet.ranges import parse_range

    try:
        names = parse_range(span)
    except InvalidAddressError as e:
        raise click.ClickException(str(e))
    click.echo(" ".join(names))


@main.command()
@click.option("--level", default=None, help="Filter by level (info, warning, error).")
@click.option("--type", "event_type", default=None, help="Filter by event type.")
@click.option("--limit", default=50, show_default=True, help="Maximum events to show.")
def events(level: str | None, event_type: str | None, limit: int) -> None:
    """Show recent logged events (requires logging enabled in minisheet.yaml)."""
    from minisheet.logging import get_sink

    sink = get_sink()
    if sink is None:
        raise click.ClickException("Event logging is disabled; set logging_enabled in minisheet.yaml.")
    for evt in sink.read_events(level=level, event_type=event_type, limit=limit):
        click.echo(f"{evt.get('ts', '')} {evt.get('level', ''):8s} {evt.get('event_type', '')}: {evt.get('message', '')}")
