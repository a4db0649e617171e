"""taxes - Rule tables and tax calculation logic.

Scope:
- Bracket tables, relief catalogue, rebate categories (tax_rules/{year}.yaml)
- Progressive tax on chargeable income (fixed-amount method)
- Mandatory contribution deductions (EPF, SOCSO)

Constraints:
- Pure calculation - no settings or CLI concerns
- Bracket tables are always passed in, never hardcoded in the calculation

Usage:
    from mytaxcalc.sdk.taxes import load_tax_rules, compute_tax

    rules = load_tax_rules("2024")
    tax = compute_tax(91000, rules.brackets)
"""

from .schemas import (
    TaxBracket,
    DeductionDefinition,
    ContributionRules,
    TaxRules,
    validate_brackets,
)

from .rules import (
    load_tax_rules,
    load_tax_rules_file,
    get_available_years,
)

from .brackets import (
    compute_tax,
    fixed_amounts,
    find_bracket,
    bracket_breakdown,
)

from .contributions import (
    calc_epf,
    calc_socso,
    calc_contributions,
)

__all__ = [
    # Schemas
    "TaxBracket",
    "DeductionDefinition",
    "ContributionRules",
    "TaxRules",
    "validate_brackets",
    # Rules loading
    "load_tax_rules",
    "load_tax_rules_file",
    "get_available_years",
    # Brackets
    "compute_tax",
    "fixed_amounts",
    "find_bracket",
    "bracket_breakdown",
    # Contributions
    "calc_epf",
    "calc_socso",
    "calc_contributions",
]
