"""My Tax Calc MCP Server - FastMCP implementation for tax calculation tools."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from mytaxcalc.sdk import (
    SettingsError,
    TaxInputs,
    calc_contributions,
    calculate,
    fixed_amounts,
    get_available_years,
    get_default_year,
    load_tax_rules,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("my-tax-calc")


# --- Tools ---

@mcp.tool()
async def calculate_tax(
    income: str = Field(description="Annual gross income in MYR; free text like 'RM 85,000' is accepted"),
    year: str | None = Field(default=None, description="Tax year (e.g., '2024'). Defaults to the configured year"),
    epf: bool = Field(default=True, description="Deduct the EPF contribution"),
    socso: bool = Field(default=True, description="Deduct the SOCSO contribution"),
    reliefs: dict[str, str] | None = Field(default=None, description="Relief claims by id, e.g. {'medical': '2000'}. Amounts above the cap are reduced to the cap"),
    rebates: dict[str, str] | None = Field(default=None, description="Rebate claims by category (individual, spouse, zakat)"),
) -> dict[str, Any]:
    """Calculate Malaysian income tax. Returns total deductions, chargeable income, tax payable and effective rate."""
    try:
        rules = load_tax_rules(year or get_default_year())
        inputs = TaxInputs.for_rules(
            rules,
            income=income,
            epf=epf,
            socso=socso,
            reliefs=reliefs,
            rebates=rebates,
        )
        result = calculate(inputs, rules)

        return {
            "year": rules.year,
            "income": inputs.income,
            "contributions": calc_contributions(
                inputs.income, epf=epf, socso=socso, rules=rules.contributions
            ),
            "reliefs": dict(inputs.deductions),
            "rebates": dict(inputs.rebates),
            **result.model_dump(),
        }

    except (FileNotFoundError, KeyError, ValueError, SettingsError) as e:
        logger.error(f"Error calculating tax: {e}")
        return {"error": str(e)}


@mcp.tool()
async def list_brackets(
    year: str | None = Field(default=None, description="Tax year (e.g., '2024'). Defaults to the configured year"),
) -> dict[str, Any]:
    """List the progressive bracket table for a year, with the fixed tax owed at each bracket's start."""
    try:
        rules = load_tax_rules(year or get_default_year())
        return {
            "year": rules.year,
            "brackets": [
                {**bracket.model_dump(), "fixed_amount": fixed}
                for bracket, fixed in zip(rules.brackets, fixed_amounts(rules.brackets))
            ],
        }
    except (FileNotFoundError, ValueError, SettingsError) as e:
        logger.error(f"Error listing brackets: {e}")
        return {"error": str(e), "brackets": []}


@mcp.tool()
async def list_reliefs(
    year: str | None = Field(default=None, description="Tax year (e.g., '2024'). Defaults to the configured year"),
) -> dict[str, Any]:
    """List claimable reliefs with their caps and defaults, plus rebate categories."""
    try:
        rules = load_tax_rules(year or get_default_year())
        return {
            "year": rules.year,
            "reliefs": [d.model_dump() for d in rules.deductions],
            "rebate_categories": list(rules.rebate_categories),
        }
    except (FileNotFoundError, ValueError, SettingsError) as e:
        logger.error(f"Error listing reliefs: {e}")
        return {"error": str(e), "reliefs": []}


# --- Resources (optional, for browsing) ---

@mcp.resource("mytaxcalc://rules/years")
async def list_years_resource() -> str:
    """List tax years with packaged rules."""
    return json.dumps({"years": get_available_years()}, indent=2)


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
