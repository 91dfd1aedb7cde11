"""Settle Calc CLI - Command-line interface for settlement calculations."""

import json
import logging

import click
from rich.console import Console

from settlecalc import __version__
from settlecalc.sdk import (
    SettlementInputError,
    TaxRulesNotFoundError,
    calc_termination,
    calc_thirteenth,
    calc_vacation,
    load_tax_rules,
    reconcile_declared_total,
)

from .inputs import build_ledger, load_input_file, load_subject
from .renderers.settlement_renderer import render_lines, render_settlement
from .revenue_commands import revenue_tax
from .rules_commands import rules as rules_group
from .settings_commands import settings as settings_group

FORMAT_OPTION = click.option(
    "--format", "output_format", type=click.Choice(["text", "json"]), default="text",
    help="Output format (default: text)",
)


@click.group()
@click.version_option(version=__version__, prog_name="settle-calc")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose):
    """Settle Calc - Payroll, termination and revenue tax settlements.

    Tax tables are loaded per year from the bundled rules files. A file
    with the same name in the config directory overrides the bundled one.

    \b
    Config directory (in order):
    1. SETTLE_CALC_CONFIG_PATH environment variable
    2. ~/.config/settle-calc (XDG default)
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


cli.add_command(rules_group)
cli.add_command(settings_group)
cli.add_command(revenue_tax)


def _load_rules(year):
    try:
        return load_tax_rules(year)
    except TaxRulesNotFoundError as e:
        raise click.ClickException(str(e))


def _emit(output_format: str, data: dict, render) -> None:
    if output_format == "json":
        click.echo(json.dumps(data, indent=2))
    else:
        render(Console(), data)


@cli.command("payroll")
@click.argument("input_file", metavar="INPUT", type=click.Path(exists=True, dir_okay=False))
@click.option("--year", type=int, help="Rules year (default: file 'year', then settings/newest)")
@click.option("--declared-net", type=float, help="Net total to reconcile against the computed one")
@FORMAT_OPTION
def payroll(input_file, year, declared_net, output_format):
    """Settle a pay period from a ledger file.

    INPUT is a YAML or JSON file with 'subject', 'rubricas' and 'events'
    sections. Events are replayed in order onto a ledger seeded with the
    subject's base compensation; contribution and withholding are derived.

    \b
    Example:
      settle-calc payroll march.yaml --format json
    """
    data = load_input_file(input_file)
    rules = _load_rules(year or data.get("year"))
    ledger = build_ledger(data, rules)
    result = ledger.result

    output = result.rounded()
    declared = declared_net if declared_net is not None else data.get("declared_net")
    if declared is not None:
        output["reconciliation"] = reconcile_declared_total(result.net, declared).model_dump()

    def render(console, payload):
        render_settlement(console, payload)
        rec = payload.get("reconciliation")
        if rec and rec["status"] == "gap":
            console.print(
                f"[yellow]Declared net {rec['declared']:,.2f} differs from computed "
                f"{rec['computed']:,.2f} by {rec['variance']:+,.2f}[/yellow]"
            )
        elif rec and rec["status"] == "match":
            console.print("[green]Declared net matches computed net[/green]")

    _emit(output_format, output, render)


@cli.command("termination")
@click.argument("input_file", metavar="INPUT", type=click.Path(exists=True, dir_okay=False))
@click.option("--date", "termination_date", type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Termination date (YYYY-MM-DD)")
@click.option("--reason", type=click.Choice(["without-cause", "resignation", "with-cause"]),
              help="Termination reason")
@click.option("--notice", type=click.Choice(["indemnified", "worked"]), help="Notice modality")
@click.option("--fund-balance", type=float, default=0.0, show_default=True,
              help="Accumulated benefit fund balance")
@click.option("--year", type=int, help="Rules year (default: termination year)")
@FORMAT_OPTION
def termination(input_file, termination_date, reason, notice, fund_balance, year, output_format):
    """Calculate a termination settlement.

    INPUT is a YAML or JSON file with a 'subject' section; the subject
    must have an admission date. All missing inputs are reported at once.

    \b
    Example:
      settle-calc termination ana.yaml --date 2024-07-31 \\
          --reason without-cause --notice indemnified --fund-balance 8000
    """
    subject = load_subject(load_input_file(input_file))
    on = termination_date.date() if termination_date else None
    rules = _load_rules(year or (on.year if on else None))

    try:
        result = calc_termination(subject, on, reason, notice, rules, fund_balance=fund_balance)
    except SettlementInputError as e:
        raise click.ClickException(str(e))

    _emit(output_format, result.rounded(), lambda c, d: render_lines(c, "Termination", d))


@cli.command("thirteenth")
@click.argument("input_file", metavar="INPUT", type=click.Path(exists=True, dir_okay=False))
@click.option("--year", type=int, required=True, help="Reference year")
@click.option("--installment", type=click.Choice(["first", "second", "single"]), default="single",
              show_default=True, help="Which installment to calculate")
@FORMAT_OPTION
def thirteenth(input_file, year, installment, output_format):
    """Calculate a 13th salary installment for the subject in INPUT."""
    subject = load_subject(load_input_file(input_file))
    rules = _load_rules(year)

    try:
        result = calc_thirteenth(subject, year, installment, rules)
    except SettlementInputError as e:
        raise click.ClickException(str(e))

    _emit(output_format, result.rounded(), lambda c, d: render_lines(c, f"13th salary {year}", d))


@cli.command("vacation")
@click.argument("input_file", metavar="INPUT", type=click.Path(exists=True, dir_okay=False))
@click.option("--days", type=int, required=True, help="Vacation days taken")
@click.option("--sell", "sell_days", is_flag=True, help="Convert part of the leave into cash")
@click.option("--advance-thirteenth", is_flag=True, help="Pay half the 13th salary with the vacation")
@click.option("--year", type=int, help="Rules year (default: file 'year', then settings/newest)")
@FORMAT_OPTION
def vacation(input_file, days, sell_days, advance_thirteenth, year, output_format):
    """Calculate a vacation settlement for the subject in INPUT."""
    data = load_input_file(input_file)
    subject = load_subject(data)
    rules = _load_rules(year or data.get("year"))

    try:
        result = calc_vacation(
            subject, days, rules, sell_days=sell_days, advance_thirteenth=advance_thirteenth
        )
    except SettlementInputError as e:
        raise click.ClickException(str(e))

    _emit(output_format, result.rounded(), lambda c, d: render_lines(c, "Vacation", d))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
