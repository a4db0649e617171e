"""Unit tests for loading tax rule tables."""

import pytest
import yaml
from pydantic import ValidationError

from mytaxcalc.sdk.taxes import get_available_years, load_tax_rules, load_tax_rules_file


def write_rules(path, **overrides):
    rules = {
        "year": 2030,
        "brackets": [
            {"lower_bound": 0, "upper_bound": 10000, "rate": 0},
            {"lower_bound": 10001, "rate": 10},
        ],
        "deductions": [
            {"id": "personal", "label": "Personal Relief", "cap": 5000, "default_amount": 5000},
        ],
    }
    rules.update(overrides)
    path.write_text(yaml.safe_dump(rules))
    return path


class TestPackagedRules:
    """Tests for the rule tables shipped with the package."""

    def test_2024_available(self):
        assert "2024" in get_available_years()

    def test_load_2024(self):
        rules = load_tax_rules("2024")
        assert rules.year == "2024"
        assert len(rules.brackets) == 10
        assert [b.rate for b in rules.brackets] == [0, 1, 3, 6, 11, 19, 25, 26, 28, 30]
        assert rules.brackets[-1].upper_bound is None

    def test_relief_catalogue(self):
        rules = load_tax_rules("2024")
        assert rules.get_deduction("personal").cap == 9000
        assert rules.get_deduction("personal").default_amount == 9000
        assert rules.get_deduction("domestic").cap == 1000
        assert len(rules.deductions) == 9

    def test_contribution_rates(self):
        contributions = load_tax_rules("2024").contributions
        assert contributions.epf_rate == 11
        assert contributions.socso_monthly_threshold == 5000

    def test_missing_year(self):
        with pytest.raises(FileNotFoundError, match="1999"):
            load_tax_rules("1999")

    def test_unknown_deduction_lookup(self):
        with pytest.raises(KeyError):
            load_tax_rules("2024").get_deduction("yacht")


class TestRulesFile:
    """Tests for loading a rule table from an arbitrary file."""

    def test_load_custom_file(self, tmp_path):
        rules = load_tax_rules_file(write_rules(tmp_path / "custom.yaml"))
        assert rules.year == "2030"
        assert rules.rebate_categories == ("individual", "spouse", "zakat")
        assert rules.contributions.epf_rate == 11

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_tax_rules_file(tmp_path / "nope.yaml")

    def test_gap_fails_fast(self, tmp_path):
        path = write_rules(tmp_path / "bad.yaml", brackets=[
            {"lower_bound": 0, "upper_bound": 10000, "rate": 0},
            {"lower_bound": 20001, "rate": 10},
        ])
        with pytest.raises(ValidationError):
            load_tax_rules_file(path)

    def test_duplicate_relief_ids(self, tmp_path):
        path = write_rules(tmp_path / "dup.yaml", deductions=[
            {"id": "personal", "label": "A", "cap": 1},
            {"id": "personal", "label": "B", "cap": 2},
        ])
        with pytest.raises(ValidationError, match="Duplicate deduction id"):
            load_tax_rules_file(path)

    def test_unknown_key_rejected(self, tmp_path):
        path = write_rules(tmp_path / "typo.yaml", bracketz=[])
        with pytest.raises(ValidationError):
            load_tax_rules_file(path)

    def test_custom_rebate_categories(self, tmp_path):
        path = write_rules(tmp_path / "rebates.yaml", rebate_categories=["individual", "departure_levy"])
        rules = load_tax_rules_file(path)
        assert rules.rebate_categories == ("individual", "departure_levy")
