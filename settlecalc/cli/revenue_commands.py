"""Revenue tax CLI command."""

import json

import click
from pydantic import ValidationError
from rich.console import Console

from settlecalc.sdk import (
    SettlementInputError,
    TaxRulesNotFoundError,
    load_tax_rules,
    calc_revenue_tax,
    calc_revenue_tax_by_category,
)
from settlecalc.sdk.taxes import total_tax

from .inputs import load_input_file
from .renderers.settlement_renderer import render_revenue_tax


@click.command("revenue-tax")
@click.option("--annex", help="Annex key (e.g. anexo-iii)")
@click.option("--category", help="Revenue category (mapped to its annex by the rules)")
@click.option("--current", "current_revenue", type=float, help="Revenue of the period")
@click.option("--trailing", "trailing_revenue", type=float, default=0.0, show_default=True,
              help="Revenue of the previous 12 periods")
@click.option("--input", "input_file", type=click.Path(exists=True, dir_okay=False),
              help="YAML/JSON file with a 'segments' list, one per category")
@click.option("--year", type=int, help="Rules year (default: file 'year', then settings/newest)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def revenue_tax(annex, category, current_revenue, trailing_revenue, input_file, year, output_format):
    """Calculate the simplified-regime revenue tax.

    The effective rate comes from the trailing 12-period revenue; the tax
    is the current revenue times that rate, split across component taxes.

    \b
    Examples:
      settle-calc revenue-tax --annex anexo-iii --current 15000 --trailing 180000
      settle-calc revenue-tax --input segments.yaml --format json
    """
    data = load_input_file(input_file) if input_file else {}

    try:
        rules = load_tax_rules(year or data.get("year"))
    except TaxRulesNotFoundError as e:
        raise click.ClickException(str(e))

    try:
        if input_file:
            if "segments" not in data:
                raise click.ClickException("Input file has no 'segments' list")
            outcomes = calc_revenue_tax_by_category(data["segments"], rules)
        else:
            if current_revenue is None:
                raise click.UsageError("--current is required without --input")
            if not annex and not category:
                raise click.UsageError("Either --annex or --category is required without --input")
            if category and not annex:
                outcomes = calc_revenue_tax_by_category(
                    [{"category": category, "current_revenue": current_revenue,
                      "trailing_revenue": trailing_revenue}],
                    rules,
                )
            else:
                outcomes = [calc_revenue_tax(current_revenue, trailing_revenue, annex, rules, category)]
    except (SettlementInputError, ValidationError) as e:
        raise click.ClickException(str(e))

    rendered = [o.rounded() for o in outcomes]
    if output_format == "json":
        click.echo(json.dumps({"results": rendered, "total_tax": round(total_tax(outcomes), 2)}, indent=2))
        return

    console = Console()
    render_revenue_tax(console, rendered)
    if len(rendered) > 1:
        console.print(f"[bold]Total tax: {total_tax(outcomes):,.2f}[/bold]")
