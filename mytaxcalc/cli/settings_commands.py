"""Settings CLI commands for My Tax Calc.

Manages settings.json - default tax year and output format.
"""

import click

from mytaxcalc.sdk import (
    DEFAULT_YEAR,
    OUTPUT_FORMATS,
    SettingsError,
    clear_setting,
    get_available_years,
    get_setting,
    get_settings_path,
    load_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - year: default tax year for calc/brackets/reliefs
    - format: default output format (text or json)
    """
    pass


def _load_or_fail() -> dict:
    try:
        return load_settings()
    except SettingsError as e:
        raise click.ClickException(str(e))


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = _load_or_fail()

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
    click.echo("Effective values:")
    click.echo(f"  year: {current.get('year', DEFAULT_YEAR)}")
    click.echo(f"  format: {current.get('format', 'text')}")


@settings.command("year")
@click.argument("year", required=False)
@click.option("--clear", is_flag=True, help="Clear default year, revert to built-in default")
def settings_year(year, clear):
    """Set or clear the default tax year.

    Examples:
        my-tax settings year 2024
        my-tax settings year --clear
    """
    _load_or_fail()

    if clear:
        if clear_setting("year"):
            click.echo(f"Cleared year setting. Default year is now: {DEFAULT_YEAR}")
        else:
            click.echo("year was not set.")
        return

    if not year:
        current = get_setting("year")
        if current:
            click.echo(f"Current year: {current}")
        else:
            click.echo(f"No year set. Using default: {DEFAULT_YEAR}")
        return

    available = get_available_years()
    if year not in available:
        raise click.BadParameter(
            f"No tax rules for {year}. Available: {', '.join(available)}",
            param_hint="YEAR",
        )

    set_setting("year", year)
    click.echo(f"Set year: {year}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("format")
@click.argument("output_format", required=False, type=click.Choice(OUTPUT_FORMATS))
def settings_format(output_format):
    """Show or set the default output format."""
    _load_or_fail()

    if not output_format:
        click.echo(f"Current format: {get_setting('format', 'text')}")
        return

    set_setting("format", output_format)
    click.echo(f"Set format: {output_format}")
    click.echo(f"Saved to: {get_settings_path()}")
