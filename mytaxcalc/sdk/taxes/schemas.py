"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed access
to the bracket table, the relief catalogue, rebate categories and the
mandatory contribution rates.

Rates are percentages (0-100, may be fractional, e.g. 24.5).
Bracket bounds are inclusive whole-ringgit boundaries: 0-5000, 5001-20000, ...
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TaxBracket(BaseModel):
    """Single chargeable income band taxed at one marginal rate."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    lower_bound: int = Field(..., ge=0, description="First ringgit in this band (inclusive)")
    upper_bound: Optional[int] = Field(default=None, description="Last ringgit in this band (None if unbounded)")
    rate: float = Field(..., ge=0, le=100, description="Marginal rate as a percentage")

    @model_validator(mode="after")
    def check_bounds(self) -> "TaxBracket":
        if self.upper_bound is not None and self.upper_bound < self.lower_bound:
            raise ValueError(
                f"upper_bound {self.upper_bound} is below lower_bound {self.lower_bound}"
            )
        return self

    @property
    def threshold(self) -> int:
        """Income already fully taxed by the bands below this one."""
        return self.lower_bound - 1 if self.lower_bound > 0 else 0

    def contains(self, income: float) -> bool:
        """True if income falls in this band (upper bound inclusive)."""
        above_floor = self.lower_bound == 0 or income > self.threshold
        return above_floor and (self.upper_bound is None or income <= self.upper_bound)


class DeductionDefinition(BaseModel):
    """A capped relief the taxpayer may claim."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., min_length=1, description="Unique key, e.g. 'personal'")
    label: str = Field(..., description="Display text")
    cap: float = Field(..., ge=0, description="Maximum claimable amount")
    default_amount: Optional[float] = Field(default=None, ge=0, description="Claimed amount at session start")

    @model_validator(mode="after")
    def check_default(self) -> "DeductionDefinition":
        if self.default_amount is not None and self.default_amount > self.cap:
            raise ValueError(
                f"default_amount {self.default_amount} for '{self.id}' exceeds cap {self.cap}"
            )
        return self


class ContributionRules(BaseModel):
    """Mandatory contribution rates deducted from income."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    epf_rate: float = Field(default=11, ge=0, le=100, description="EPF employee share, % of income")
    socso_monthly_threshold: float = Field(default=5000, ge=0, description="Monthly income splitting the SOCSO rates")
    socso_rate_low: float = Field(default=0.5, ge=0, le=100, description="SOCSO %, monthly income at or below threshold")
    socso_rate_high: float = Field(default=0.6, ge=0, le=100, description="SOCSO %, monthly income above threshold")


class TaxRules(BaseModel):
    """Complete rule set for one tax year / regime."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    year: str
    brackets: tuple[TaxBracket, ...]
    deductions: tuple[DeductionDefinition, ...] = ()
    rebate_categories: tuple[str, ...] = ("individual", "spouse", "zakat")
    contributions: ContributionRules = Field(default_factory=ContributionRules)

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, value):
        # YAML reads `year: 2024` as an int
        return str(value)

    @field_validator("brackets")
    @classmethod
    def check_contiguous(cls, brackets: tuple[TaxBracket, ...]) -> tuple[TaxBracket, ...]:
        validate_brackets(brackets)
        return brackets

    @field_validator("deductions")
    @classmethod
    def check_unique_ids(cls, deductions: tuple[DeductionDefinition, ...]) -> tuple[DeductionDefinition, ...]:
        seen = set()
        for d in deductions:
            if d.id in seen:
                raise ValueError(f"Duplicate deduction id '{d.id}'")
            seen.add(d.id)
        return deductions

    @field_validator("rebate_categories")
    @classmethod
    def check_unique_categories(cls, categories: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(categories)) != len(categories):
            raise ValueError(f"Duplicate rebate categories in {list(categories)}")
        return categories

    def get_deduction(self, deduction_id: str) -> DeductionDefinition:
        """Look up a catalogue entry by id.

        Raises:
            KeyError: If the id is not in the catalogue
        """
        for d in self.deductions:
            if d.id == deduction_id:
                return d
        raise KeyError(deduction_id)


def validate_brackets(brackets) -> None:
    """Check a bracket table covers [0, inf) with no gaps or overlaps.

    Raises:
        ValueError: Describing the first violation found
    """
    if not brackets:
        raise ValueError("Bracket table is empty")

    if brackets[0].lower_bound != 0:
        raise ValueError(f"First bracket must start at 0, got {brackets[0].lower_bound}")

    for prev, cur in zip(brackets, brackets[1:]):
        if prev.upper_bound is None:
            raise ValueError(
                f"Unbounded bracket starting at {prev.lower_bound} must be the last bracket"
            )
        if cur.lower_bound != prev.upper_bound + 1:
            raise ValueError(
                f"Bracket starting at {cur.lower_bound} does not follow "
                f"bracket ending at {prev.upper_bound}"
            )

    if brackets[-1].upper_bound is not None:
        raise ValueError(
            f"Last bracket must be unbounded, ends at {brackets[-1].upper_bound}"
        )
