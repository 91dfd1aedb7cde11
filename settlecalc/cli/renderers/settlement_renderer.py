"""Rich renderers for settlement results.

Transforms rounded SDK output (``result.rounded()``) into formatted Rich
tables.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box


def _money(value: float) -> str:
    return f"{value:,.2f}" if value else ""


def _pct(rate: float) -> str:
    return f"{rate * 100:.2f}%"


def render_settlement(console: Console, data: dict) -> None:
    """Render a period settlement.

    Args:
        console: Rich Console instance
        data: Output of SettlementResult.rounded()
    """
    table = Table(title="Settlement", box=box.SIMPLE_HEAD)
    table.add_column("Code", style="dim")
    table.add_column("Description")
    table.add_column("Ref", justify="right")
    table.add_column("Earnings", justify="right", style="green")
    table.add_column("Deductions", justify="right", style="red")

    for event in data["events"]:
        rubrica = event["rubrica"]
        table.add_row(
            rubrica["code"],
            rubrica["description"],
            f"{event['reference']:g}",
            _money(event["earning_amount"]),
            _money(event["deduction_amount"]),
        )

    _add_totals(table, data, columns_before=3)
    console.print(table)

    bases = Table(show_header=False, box=None, padding=(0, 2))
    bases.add_column("key", style="dim")
    bases.add_column("value", justify="right")
    bases.add_row("Contribution base", f"{data['contribution_base']:,.2f}")
    if data["contribution"]["capped"]:
        bases.add_row("  capped at", f"{data['contribution']['taxable_base']:,.2f}")
    bases.add_row("Withholding base", f"{data['withholding']['taxable_base']:,.2f}")
    bases.add_row("Fund base", f"{data['fund_base']:,.2f}")
    bases.add_row("Fund deposit", f"{data['fund_amount']:,.2f}")
    console.print(Panel(bases, title="Bases", border_style="dim"))


def render_lines(console: Console, title: str, data: dict) -> None:
    """Render a line-item settlement (termination, 13th salary, vacation)."""
    table = Table(title=title, box=box.SIMPLE_HEAD)
    table.add_column("Description")
    table.add_column("Ref", justify="right")
    table.add_column("Earnings", justify="right", style="green")
    table.add_column("Deductions", justify="right", style="red")

    for line in data["lines"]:
        table.add_row(
            line["description"],
            line["reference_label"],
            _money(line["earning"]),
            _money(line["deduction"]),
        )

    _add_totals(table, data, columns_before=2)
    console.print(table)

    if "fund_deposit" in data:
        console.print(f"[dim]Fund deposit on termination: {data['fund_deposit']:,.2f}[/dim]")


def render_revenue_tax(console: Console, outcomes: list) -> None:
    """Render revenue tax outcomes (rounded dicts)."""
    for data in outcomes:
        label = data.get("category") or data["annex"]
        if "tax_amount" not in data:
            console.print(Panel(
                f"[yellow]{data['message']}[/yellow]",
                title=f"{label} ({data['annex']})",
                border_style="yellow",
            ))
            continue

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("key", style="dim")
        table.add_column("value", justify="right")
        table.add_row("Current revenue", f"{data['current_revenue']:,.2f}")
        table.add_row("Trailing 12 revenue", f"{data['trailing_revenue']:,.2f}")
        table.add_row("Nominal rate", _pct(data["nominal_rate"]))
        table.add_row("Deduction", f"{data['deduction']:,.2f}")
        table.add_row("Effective rate", _pct(data["effective_rate"]))
        table.add_row("[bold]Tax[/bold]", f"[bold]{data['tax_amount']:,.2f}[/bold]")
        for tax, amount in data.get("distribution", {}).items():
            table.add_row(f"  {tax}", f"{amount:,.2f}")
        console.print(Panel(table, title=f"{label} ({data['annex']})", border_style="dim"))


def _add_totals(table: Table, data: dict, columns_before: int) -> None:
    pad = [""] * (columns_before - 1)
    table.add_section()
    table.add_row("[bold]Totals[/bold]", *pad, f"{data['total_earnings']:,.2f}", f"{data['total_deductions']:,.2f}")
    table.add_row("[bold]Net[/bold]", *pad, f"[bold]{data['net']:,.2f}[/bold]", "")
