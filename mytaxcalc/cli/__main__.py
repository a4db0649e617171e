"""My Tax Calc CLI - Command-line interface for income tax calculation."""

import json
import logging
import os

import click
from pydantic import ValidationError

from mytaxcalc import __version__
from mytaxcalc.sdk import (
    SettingsError,
    TaxInputs,
    TaxRules,
    UnknownDeductionError,
    UnknownRebateError,
    bracket_breakdown,
    calc_contributions,
    calculate,
    fixed_amounts,
    get_default_format,
    get_default_year,
    load_tax_rules,
    load_tax_rules_file,
    parse_amount,
)

from .settings_commands import settings as settings_group


def _configure_logging():
    """Configure logging based on LOG_LEVEL environment variable."""
    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S"
    )


@click.group()
@click.version_option(version=__version__, prog_name="my-tax")
def cli():
    """My Tax Calc - Malaysian personal income tax calculator.

    Computes chargeable income, tax payable and effective rate from
    annual income, EPF/SOCSO contributions, capped reliefs and rebates.

    Settings are loaded from (in order):

    \b
    1. MY_TAX_CALC_CONFIG_PATH environment variable
    2. ~/.config/my-tax-calc/settings.json (XDG default)

    Run 'my-tax reliefs' to see the claimable reliefs for a year.
    """
    pass


cli.add_command(settings_group)


def _load_rules(year, rules_file) -> TaxRules:
    """Load rules from --rules FILE, else the packaged table for --year."""
    try:
        if rules_file:
            return load_tax_rules_file(rules_file)
        return load_tax_rules(year or get_default_year())
    except (FileNotFoundError, SettingsError) as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Invalid tax rules:\n{e}")


def _parse_pairs(pairs, option_name) -> dict:
    """Parse repeated KEY=AMOUNT options into a dict."""
    parsed = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(
                f"Expected KEY=AMOUNT, got '{pair}'", param_hint=option_name
            )
        parsed[key.strip()] = value
    return parsed


def _format_summary_text(rules: TaxRules, inputs: TaxInputs, contributions: dict, result) -> str:
    """Format a calculation as ASCII tables for terminal display."""
    lines = []

    lines.append(f"INCOME TAX CALCULATION FOR {rules.year}")
    lines.append("=" * 60)
    lines.append("")

    lines.append("DEDUCTIONS")
    lines.append("-" * 60)
    lines.append(f"  {'Annual income':<28} RM {inputs.income:>14,.2f}")
    if inputs.epf:
        lines.append(f"  {'EPF':<28}-RM {contributions['epf']:>14,.2f}")
    if inputs.socso:
        lines.append(f"  {'SOCSO':<28}-RM {contributions['socso']:>14,.2f}")
    for definition in rules.deductions:
        amount = inputs.deductions[definition.id]
        if amount > 0:
            lines.append(f"  {definition.label:<28}-RM {amount:>14,.2f}")
    lines.append("  " + "-" * 46)
    lines.append(f"  {'Total deductions':<28} RM {result.total_deductions:>14,.2f}")
    lines.append(f"  {'Chargeable income':<28} RM {result.taxable_income:>14,.2f}")
    lines.append("")

    lines.append("TAX BRACKETS")
    lines.append("-" * 60)
    lines.append(f"  {'Chargeable income':<24} {'Rate':>7} {'Tax Assessed':>17}")
    lines.append(f"  {'-'*24} {'-'*7} {'-'*17}")
    gross_tax = 0.0
    for row in bracket_breakdown(result.taxable_income, rules.brackets):
        bracket = row["bracket"]
        if bracket.upper_bound is not None:
            bracket_str = f"{bracket.lower_bound:,} - {bracket.upper_bound:,}"
        else:
            bracket_str = f"{bracket.lower_bound:,} and above"
        gross_tax += row["tax"]
        lines.append(f"  {bracket_str:<24} {bracket.rate:>6g}% RM {row['tax']:>14,.2f}")
    lines.append(f"  {'-'*24} {'-'*7} {'-'*17}")
    lines.append(f"  {'Tax before rebates':<24} {'':<7} RM {gross_tax:>14,.2f}")

    rebates = [(c, a) for c, a in inputs.rebates.items() if a > 0]
    for category, amount in rebates:
        label = f"Rebate ({category})"
        lines.append(f"  {label:<24} {'':<7}-RM {amount:>14,.2f}")
    lines.append("")

    lines.append("RESULT")
    lines.append("-" * 60)
    lines.append(f"  {'Tax payable':<28} RM {result.tax_amount:>14,.2f}")
    lines.append(f"  {'Effective rate':<28} {result.effective_rate:>16.2f}%")

    return "\n".join(lines)


@cli.command("calc")
@click.argument("income")
@click.option("--year", "-y", help="Tax year (default: settings 'year' or latest)")
@click.option("--rules", "rules_file", type=click.Path(dir_okay=False), help="Load bracket table from a YAML file instead")
@click.option("--epf/--no-epf", default=True, help="Deduct EPF contribution (default: on)")
@click.option("--socso/--no-socso", default=True, help="Deduct SOCSO contribution (default: on)")
@click.option("--relief", "-r", "reliefs", multiple=True, metavar="ID=AMOUNT", help="Claim a relief (repeatable)")
@click.option("--rebate", "rebates", multiple=True, metavar="CATEGORY=AMOUNT", help="Claim a rebate (repeatable)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), help="Output format (default: settings 'format' or text)")
def calc(income, year, rules_file, epf, socso, reliefs, rebates, output_format):
    """Calculate income tax for an annual INCOME.

    INCOME and amounts accept free-form text ("RM 85,000"); anything that
    cannot be read as a number counts as 0. Relief claims above their cap
    are reduced to the cap.

    Examples:
        my-tax calc 100000 --no-epf --no-socso
        my-tax calc 85000 -r medical=2000 -r lifestyle=3000 --rebate zakat=500
    """
    rules = _load_rules(year, rules_file)
    relief_claims = _parse_pairs(reliefs, "--relief")
    rebate_claims = _parse_pairs(rebates, "--rebate")

    try:
        inputs = TaxInputs.for_rules(
            rules,
            income=max(parse_amount(income), 0.0),
            epf=epf,
            socso=socso,
            reliefs=relief_claims,
            rebates=rebate_claims,
        )
    except UnknownDeductionError as e:
        raise click.BadParameter(e.args[0], param_hint="--relief")
    except UnknownRebateError as e:
        raise click.BadParameter(e.args[0], param_hint="--rebate")

    result = calculate(inputs, rules)

    if output_format is None:
        try:
            output_format = get_default_format()
        except SettingsError as e:
            raise click.ClickException(str(e))

    contributions = calc_contributions(
        inputs.income, epf=inputs.epf, socso=inputs.socso, rules=rules.contributions
    )

    if output_format == "json":
        output = {
            "year": rules.year,
            "income": inputs.income,
            "contributions": contributions,
            "reliefs": dict(inputs.deductions),
            "rebates": dict(inputs.rebates),
            **result.model_dump(),
        }
        click.echo(json.dumps(output, indent=2))
    else:
        click.echo(_format_summary_text(rules, inputs, contributions, result))


@cli.command("brackets")
@click.option("--year", "-y", help="Tax year (default: settings 'year' or latest)")
@click.option("--rules", "rules_file", type=click.Path(dir_okay=False), help="Load bracket table from a YAML file instead")
def brackets(year, rules_file):
    """Show the bracket table with the fixed tax at each bracket's start."""
    rules = _load_rules(year, rules_file)

    click.echo(f"{rules.year} TAX BRACKETS")
    click.echo(f"  {'Chargeable income (RM)':<26} {'Rate':>7} {'Fixed tax (RM)':>16}")
    click.echo(f"  {'-'*26} {'-'*7} {'-'*16}")
    for bracket, fixed in zip(rules.brackets, fixed_amounts(rules.brackets)):
        if bracket.upper_bound is not None:
            bracket_str = f"{bracket.lower_bound:,} - {bracket.upper_bound:,}"
        else:
            bracket_str = f"{bracket.lower_bound:,} and above"
        click.echo(f"  {bracket_str:<26} {bracket.rate:>6g}% {fixed:>16,.2f}")


@cli.command("reliefs")
@click.option("--year", "-y", help="Tax year (default: settings 'year' or latest)")
@click.option("--rules", "rules_file", type=click.Path(dir_okay=False), help="Load bracket table from a YAML file instead")
def reliefs(year, rules_file):
    """List claimable reliefs, their caps and rebate categories."""
    rules = _load_rules(year, rules_file)

    click.echo(f"{rules.year} RELIEFS")
    click.echo(f"  {'ID':<12} {'Relief':<28} {'Max (RM)':>10} {'Default':>10}")
    click.echo(f"  {'-'*12} {'-'*28} {'-'*10} {'-'*10}")
    for d in rules.deductions:
        default = f"{d.default_amount:,.0f}" if d.default_amount else ""
        click.echo(f"  {d.id:<12} {d.label:<28} {d.cap:>10,.0f} {default:>10}")

    click.echo()
    click.echo(f"Rebate categories: {', '.join(rules.rebate_categories)}")


def main():
    """Entry point for the CLI."""
    _configure_logging()
    cli()


if __name__ == "__main__":
    main()
