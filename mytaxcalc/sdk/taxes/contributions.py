"""Mandatory contribution deductions (EPF, SOCSO).

Each contribution is a pure function of annual income and whether the
scheme applies. They are deducted from income alongside reliefs but are
not part of the relief catalogue.
"""

from typing import Optional

from .schemas import ContributionRules

DEFAULT_CONTRIBUTION_RULES = ContributionRules()


def calc_epf(income: float, enabled: bool = True, rules: Optional[ContributionRules] = None) -> float:
    """EPF employee contribution: a flat percentage of annual income."""
    if not enabled or income <= 0:
        return 0.0
    rules = rules or DEFAULT_CONTRIBUTION_RULES
    return income * rules.epf_rate / 100


def calc_socso(income: float, enabled: bool = True, rules: Optional[ContributionRules] = None) -> float:
    """SOCSO contribution on annual income.

    The rate is tiered on monthly income: socso_rate_low up to and including
    the monthly threshold, socso_rate_high above it. The chosen rate applies
    to the whole income, not just the excess.

    Example (default rates):
        calc_socso(60000)   # monthly 5000 -> 0.5% -> 300.0
        calc_socso(72000)   # monthly 6000 -> 0.6% -> 432.0
    """
    if not enabled or income <= 0:
        return 0.0
    rules = rules or DEFAULT_CONTRIBUTION_RULES
    monthly_income = income / 12
    if monthly_income <= rules.socso_monthly_threshold:
        rate = rules.socso_rate_low
    else:
        rate = rules.socso_rate_high
    return monthly_income * 12 * rate / 100


def calc_contributions(
    income: float,
    epf: bool = True,
    socso: bool = True,
    rules: Optional[ContributionRules] = None,
) -> dict[str, float]:
    """All mandatory contributions keyed by scheme name."""
    return {
        "epf": calc_epf(income, epf, rules),
        "socso": calc_socso(income, socso, rules),
    }
