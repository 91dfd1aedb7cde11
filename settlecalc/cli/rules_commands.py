"""Tax rules CLI commands."""

import json

import click
from rich.console import Console
from rich.table import Table
from rich import box

from settlecalc.sdk import TaxRulesNotFoundError, get_rules_override_dir, load_tax_rules
from settlecalc.sdk.taxes import get_available_years


@click.group()
def rules():
    """Inspect the yearly tax tables."""
    pass


@rules.command("list")
def rules_list():
    """List years with a rules file (bundled or override)."""
    for year in get_available_years():
        click.echo(year)
    click.echo(f"\nOverride directory: {get_rules_override_dir()}")


def _bracket_table(title: str, brackets, open_label: str = "above") -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAD, title_justify="left")
    table.add_column("Up to", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Deduction", justify="right")
    for bracket in brackets:
        limit = f"{bracket.up_to:,.2f}" if bracket.up_to is not None else open_label
        table.add_row(limit, f"{bracket.rate * 100:.2f}%", f"{bracket.deduction:,.2f}")
    return table


@rules.command("show")
@click.argument("year", type=int, required=False)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def rules_show(year, output_format):
    """Show the tax tables in force for YEAR (default: settings/newest).

    A year without its own file uses the newest earlier one.
    """
    try:
        tax_rules = load_tax_rules(year)
    except TaxRulesNotFoundError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(tax_rules.model_dump(mode="json"), indent=2))
        return

    console = Console()
    console.print(f"[bold]Tax rules {tax_rules.year}[/bold]  (minimum wage {tax_rules.minimum_wage:,.2f})")
    console.print(_bracket_table(
        f"Social contribution (ceiling {tax_rules.contribution.ceiling:,.2f})",
        tax_rules.contribution.brackets,
    ))
    console.print(_bracket_table(
        f"Income withholding (dependent allowance {tax_rules.withholding.dependent_allowance:,.2f})",
        tax_rules.withholding.brackets,
    ))
    console.print(
        f"Benefit fund: {tax_rules.fund.rate * 100:.0f}% deposit, "
        f"{tax_rules.fund.penalty_rate * 100:.0f}% penalty"
    )
    for key, annex in tax_rules.revenue_tax.annexes.items():
        console.print(_bracket_table(f"{key}: {annex.description}", annex.brackets))
