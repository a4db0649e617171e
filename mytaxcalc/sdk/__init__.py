"""My Tax Calc SDK - Core functionality for income tax calculation."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    clear_setting,
    get_default_year,
    get_default_format,
    SettingsError,
    DEFAULT_YEAR,
    OUTPUT_FORMATS,
)

from .amounts import parse_amount

from .deductions import (
    cap_deduction,
    DeductionEntries,
    RebateEntries,
    UnknownDeductionError,
    UnknownRebateError,
)

from .summary import (
    CalculationResult,
    TaxInputs,
    compute_summary,
    calculate,
)

from .taxes import (
    TaxBracket,
    DeductionDefinition,
    ContributionRules,
    TaxRules,
    load_tax_rules,
    load_tax_rules_file,
    get_available_years,
    compute_tax,
    fixed_amounts,
    find_bracket,
    bracket_breakdown,
    calc_epf,
    calc_socso,
    calc_contributions,
)

__all__ = [
    # Settings
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "clear_setting",
    "get_default_year",
    "get_default_format",
    "SettingsError",
    "DEFAULT_YEAR",
    "OUTPUT_FORMATS",
    # Input normalization
    "parse_amount",
    # Claims
    "cap_deduction",
    "DeductionEntries",
    "RebateEntries",
    "UnknownDeductionError",
    "UnknownRebateError",
    # Aggregation
    "CalculationResult",
    "TaxInputs",
    "compute_summary",
    "calculate",
    # Tax rules and brackets
    "TaxBracket",
    "DeductionDefinition",
    "ContributionRules",
    "TaxRules",
    "load_tax_rules",
    "load_tax_rules_file",
    "get_available_years",
    "compute_tax",
    "fixed_amounts",
    "find_bracket",
    "bracket_breakdown",
    "calc_epf",
    "calc_socso",
    "calc_contributions",
]
