"""Settings CLI commands for Settle Calc.

Manages settings.json - default rules year.
"""

import click

from settlecalc.sdk import (
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_settings_path,
    get_rules_override_dir,
)
from settlecalc.sdk.taxes import get_available_years


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - rules_year: tax rules year used when a command doesn't specify one
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo(f"Rules override directory: {get_rules_override_dir()}")


@settings.command("rules-year")
@click.argument("year", type=int, required=False)
@click.option("--clear", is_flag=True, help="Clear rules_year, revert to newest available")
def settings_rules_year(year, clear):
    """Set or clear the default tax rules year.

    Examples:
        settle-calc settings rules-year 2024
        settle-calc settings rules-year --clear
    """
    if clear:
        current = load_settings()
        if "rules_year" in current:
            del current["rules_year"]
            save_settings(current)
            click.echo("Cleared rules_year setting.")
        else:
            click.echo("rules_year was not set.")
        return

    if year is None:
        current_year = get_setting("rules_year")
        if current_year:
            click.echo(f"Current rules_year: {current_year}")
        else:
            click.echo("No rules_year set. Using newest available.")
        return

    available = get_available_years()
    if not any(y <= year for y in available):
        raise click.ClickException(
            f"No rules available for {year} or earlier (available: {sorted(available)})"
        )

    set_setting("rules_year", year)
    click.echo(f"Set rules_year: {year}")
    click.echo(f"Saved to: {get_settings_path()}")
