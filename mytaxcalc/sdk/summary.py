"""Aggregation of income, deductions and rebates into tax payable.

compute_summary() is the whole calculation: it holds no state, so callers
re-run it with the current inputs after every change.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from .amounts import parse_amount
from .deductions import DeductionEntries, RebateEntries
from .taxes.brackets import compute_tax
from .taxes.contributions import calc_contributions
from .taxes.schemas import TaxBracket, TaxRules

logger = logging.getLogger(__name__)

Amounts = Union[Mapping, Iterable[float]]


class CalculationResult(BaseModel):
    """The four figures shown to the taxpayer."""
    model_config = ConfigDict(frozen=True)

    total_deductions: float = Field(..., ge=0, description="Contributions plus reliefs")
    taxable_income: float = Field(..., ge=0, description="Income less deductions, floored at 0")
    tax_amount: float = Field(..., ge=0, description="Tax after rebates, floored at 0")
    effective_rate: float = Field(..., ge=0, description="Tax as a percentage of gross income")


def _non_negative_sum(amounts: Amounts) -> float:
    values = amounts.values() if isinstance(amounts, Mapping) else amounts
    return sum(max(parse_amount(v), 0.0) for v in values)


def compute_summary(
    income: float,
    contributions: Amounts,
    deduction_entries: Amounts,
    rebate_entries: Amounts,
    brackets: Sequence[TaxBracket],
) -> CalculationResult:
    """Compute deductions, chargeable income, tax payable and effective rate.

    Args:
        income: Gross annual income (negative is treated as 0)
        contributions: Mandatory contribution amounts (list or mapping)
        deduction_entries: Relief claims, normally a DeductionEntries
        rebate_entries: Rebate claims, normally a RebateEntries
        brackets: Bracket table for the tax year

    Returns:
        CalculationResult. Rebates reduce tax payable but never below 0.
    """
    income = max(parse_amount(income), 0.0)

    total_deductions = _non_negative_sum(contributions) + _non_negative_sum(deduction_entries)
    taxable_income = max(0.0, income - total_deductions)

    gross_tax = compute_tax(taxable_income, brackets)
    total_rebates = _non_negative_sum(rebate_entries)
    tax_amount = max(0.0, gross_tax - total_rebates)

    effective_rate = (tax_amount / income) * 100 if income > 0 else 0.0

    logger.debug(
        f"compute_summary: income={income:.2f} deductions={total_deductions:.2f} "
        f"taxable={taxable_income:.2f} tax={gross_tax:.2f} rebates={total_rebates:.2f} "
        f"payable={tax_amount:.2f}"
    )

    return CalculationResult(
        total_deductions=total_deductions,
        taxable_income=taxable_income,
        tax_amount=tax_amount,
        effective_rate=effective_rate,
    )


@dataclass
class TaxInputs:
    """Caller-owned snapshot of everything the taxpayer has entered."""

    income: float
    deductions: DeductionEntries
    rebates: RebateEntries
    epf: bool = True
    socso: bool = True

    @classmethod
    def for_rules(
        cls,
        rules: TaxRules,
        income: float = 0,
        epf: bool = True,
        socso: bool = True,
        reliefs: Optional[dict] = None,
        rebates: Optional[dict] = None,
    ) -> "TaxInputs":
        """Build inputs with relief defaults from the rule set applied.

        Raises:
            UnknownDeductionError: If reliefs names an id not in the catalogue
            UnknownRebateError: If rebates names an unknown category
        """
        return cls(
            income=parse_amount(income),
            deductions=DeductionEntries(rules.deductions, reliefs),
            rebates=RebateEntries(rules.rebate_categories, rebates),
            epf=epf,
            socso=socso,
        )


def calculate(inputs: TaxInputs, rules: TaxRules) -> CalculationResult:
    """Run compute_summary() with contributions derived from the input flags."""
    income = max(inputs.income, 0.0)
    contributions = calc_contributions(
        income, epf=inputs.epf, socso=inputs.socso, rules=rules.contributions
    )
    return compute_summary(
        income,
        contributions,
        inputs.deductions,
        inputs.rebates,
        rules.brackets,
    )
