"""Progressive tax on chargeable income.

Uses the fixed-amount method of the published rate schedule: for each
bracket, the tax owed on all income below it is precomputed, so the tax on
any income is that fixed amount plus the marginal rate on the excess over
the bracket's threshold.

    tax = fixed[b] + (income - threshold(b)) * rate(b) / 100

threshold(b) is the previous bracket's upper bound (0 for the first
bracket), which makes bounded brackets hold exactly
upper_bound - lower_bound + 1 ringgit and keeps boundaries from being
double counted.
"""

import logging
from typing import Sequence

from .schemas import TaxBracket

logger = logging.getLogger(__name__)


def fixed_amounts(brackets: Sequence[TaxBracket]) -> list[float]:
    """Cumulative tax owed on income up to each bracket's threshold.

    Example (YA2024 table):
        [0, 0, 150, 600, 1500, 3700, 9400, 84400, 136400, 528400]
    """
    amounts = []
    total = 0.0
    for bracket in brackets:
        amounts.append(total)
        if bracket.upper_bound is not None:
            total += (bracket.upper_bound - bracket.threshold) * bracket.rate / 100
    return amounts


def find_bracket(income: float, brackets: Sequence[TaxBracket]) -> int:
    """Index of the bracket whose range contains income.

    Income on an upper bound belongs to the lower bracket. Anything past
    the last bounded bracket lands in the final unbounded one.
    """
    for index, bracket in enumerate(brackets):
        if bracket.contains(income):
            return index
    return len(brackets) - 1


def compute_tax(taxable_income: float, brackets: Sequence[TaxBracket]) -> float:
    """Tax due on chargeable income under a progressive bracket table.

    Args:
        taxable_income: Chargeable income (callers clamp negatives to 0)
        brackets: Validated, contiguous bracket table

    Returns:
        Tax in ringgit (unrounded)
    """
    if taxable_income <= 0:
        return 0.0

    index = find_bracket(taxable_income, brackets)
    bracket = brackets[index]
    fixed = fixed_amounts(brackets)[index]
    tax = fixed + (taxable_income - bracket.threshold) * bracket.rate / 100
    logger.debug(
        f"compute_tax: {taxable_income:.2f} in bracket {bracket.lower_bound}+ "
        f"@ {bracket.rate}% (fixed {fixed:.2f}) = {tax:.2f}"
    )
    return tax


def bracket_breakdown(taxable_income: float, brackets: Sequence[TaxBracket]) -> list[dict]:
    """Income and tax falling in each bracket, for display.

    Per-bracket tax is read off the fixed-amount table, so the rows always
    sum to compute_tax().

    Returns:
        One dict per bracket with keys: bracket, income, tax.
        Brackets the income does not reach have income and tax of 0.
    """
    fixed = fixed_amounts(brackets)
    current = find_bracket(taxable_income, brackets) if taxable_income > 0 else -1
    total = compute_tax(taxable_income, brackets)

    rows = []
    for index, bracket in enumerate(brackets):
        if index < current:
            income_in_bracket = float(bracket.upper_bound - bracket.threshold)
            tax = fixed[index + 1] - fixed[index]
        elif index == current:
            income_in_bracket = taxable_income - bracket.threshold
            tax = total - fixed[index]
        else:
            income_in_bracket = 0.0
            tax = 0.0
        rows.append({"bracket": bracket, "income": income_in_bracket, "tax": tax})
    return rows
