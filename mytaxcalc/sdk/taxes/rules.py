"""Loading of versioned tax rule tables.

One YAML file per tax year lives in mytaxcalc/tax_rules/YYYY.yaml. A rule
file of the same shape can also be loaded from any path, which is how a
different regime or a corrected table is used without code changes.
"""

import logging
from pathlib import Path
from typing import Union

import yaml

from .schemas import TaxRules

logger = logging.getLogger(__name__)


def _get_tax_rules_dir() -> Path:
    """Get the packaged tax_rules directory path."""
    package_root = Path(__file__).parent.parent.parent  # taxes -> sdk -> mytaxcalc
    return package_root / "tax_rules"


def get_available_years() -> list[str]:
    """Sorted list of tax years with packaged rules (descending)."""
    rules_dir = _get_tax_rules_dir()
    years = [p.stem for p in rules_dir.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


def load_tax_rules_file(path: Union[str, Path]) -> TaxRules:
    """Load and validate a rule table from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the table is malformed (gaps or
            overlaps between brackets, duplicate relief ids, defaults
            above caps, unknown keys)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Tax rules file not found: {path}")

    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}

    rules = TaxRules.model_validate(raw)
    logger.debug(
        f"Loaded tax rules {rules.year} from {path}: "
        f"{len(rules.brackets)} brackets, {len(rules.deductions)} reliefs"
    )
    return rules


def load_tax_rules(year: str) -> TaxRules:
    """Load the packaged rules for a tax year from tax_rules/YYYY.yaml."""
    config_file = _get_tax_rules_dir() / f"{year}.yaml"
    if not config_file.exists():
        available = ", ".join(get_available_years()) or "none"
        raise FileNotFoundError(
            f"Tax rules file not found for year {year}: {config_file} (available: {available})"
        )
    return load_tax_rules_file(config_file)
