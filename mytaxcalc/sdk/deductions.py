"""Relief claims and rebate claims.

Claims are held in closed mappings: only ids from the relief catalogue (or
categories from the rule set) can be stored, so a misspelt key fails when
it is set instead of silently contributing nothing.
"""

from collections.abc import Mapping
from typing import Iterable, Iterator, Optional, Union

from .amounts import parse_amount
from .taxes.schemas import DeductionDefinition

Amount = Union[str, int, float, None]


class UnknownDeductionError(KeyError):
    """Raised when a relief id is not in the catalogue."""
    pass


class UnknownRebateError(KeyError):
    """Raised when a rebate category is not in the rule set."""
    pass


def cap_deduction(definition: DeductionDefinition, raw_amount: Amount) -> float:
    """Clamp a claimed relief amount to [0, definition.cap].

    Text is normalized first (malformed input counts as 0). Negative
    claims are clamped to 0 so they can never raise taxable income.

    Example:
        cap_deduction(personal, "15,000")  # cap 9000 -> 9000.0
    """
    amount = parse_amount(raw_amount)
    return min(max(amount, 0.0), definition.cap)


class DeductionEntries(Mapping):
    """Claimed relief amounts keyed by catalogue id.

    Starts from each definition's default_amount (0 if absent). Every
    stored amount goes through cap_deduction().
    """

    def __init__(self, definitions: Iterable[DeductionDefinition], claims: Optional[dict] = None):
        self._definitions = {d.id: d for d in definitions}
        self._amounts = {
            d.id: cap_deduction(d, d.default_amount or 0) for d in self._definitions.values()
        }
        for deduction_id, amount in (claims or {}).items():
            self.set(deduction_id, amount)

    def definition(self, deduction_id: str) -> DeductionDefinition:
        try:
            return self._definitions[deduction_id]
        except KeyError:
            raise UnknownDeductionError(
                f"Unknown relief '{deduction_id}'. "
                f"Valid: {', '.join(self._definitions)}"
            ) from None

    def set(self, deduction_id: str, raw_amount: Amount) -> float:
        """Store a claim, capped. Returns the stored amount."""
        capped = cap_deduction(self.definition(deduction_id), raw_amount)
        self._amounts[deduction_id] = capped
        return capped

    def copy(self) -> "DeductionEntries":
        return DeductionEntries(self._definitions.values(), dict(self._amounts))

    @property
    def total(self) -> float:
        return sum(self._amounts.values())

    def __getitem__(self, deduction_id: str) -> float:
        if deduction_id not in self._amounts:
            raise UnknownDeductionError(deduction_id)
        return self._amounts[deduction_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._amounts)

    def __len__(self) -> int:
        return len(self._amounts)

    def __repr__(self) -> str:
        return f"DeductionEntries({self._amounts!r})"


class RebateEntries(Mapping):
    """Claimed rebate amounts keyed by category.

    Rebates have no cap; negative claims are clamped to 0.
    """

    def __init__(self, categories: Iterable[str], claims: Optional[dict] = None):
        self._amounts = {category: 0.0 for category in categories}
        for category, amount in (claims or {}).items():
            self.set(category, amount)

    def set(self, category: str, raw_amount: Amount) -> float:
        """Store a claim. Returns the stored amount."""
        if category not in self._amounts:
            raise UnknownRebateError(
                f"Unknown rebate category '{category}'. "
                f"Valid: {', '.join(self._amounts)}"
            )
        amount = max(parse_amount(raw_amount), 0.0)
        self._amounts[category] = amount
        return amount

    def copy(self) -> "RebateEntries":
        return RebateEntries(self._amounts.keys(), dict(self._amounts))

    @property
    def total(self) -> float:
        return sum(self._amounts.values())

    def __getitem__(self, category: str) -> float:
        if category not in self._amounts:
            raise UnknownRebateError(category)
        return self._amounts[category]

    def __iter__(self) -> Iterator[str]:
        return iter(self._amounts)

    def __len__(self) -> int:
        return len(self._amounts)

    def __repr__(self) -> str:
        return f"RebateEntries({self._amounts!r})"
