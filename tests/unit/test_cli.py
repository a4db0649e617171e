"""Tests for the my-tax CLI commands."""

import json

import pytest
import yaml
from click.testing import CliRunner

from mytaxcalc.cli.__main__ import cli


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point settings at an empty temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("MY_TAX_CALC_CONFIG_PATH", str(config_dir))
    return config_dir


@pytest.fixture
def runner():
    return CliRunner()


def run_json(runner, *args):
    result = runner.invoke(cli, ["calc", *args, "--format", "json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


class TestCalcCommand:
    """Tests for 'my-tax calc'."""

    def test_json_output(self, runner, isolated_config):
        data = run_json(runner, "100000", "--no-epf", "--no-socso")

        assert data["year"] == "2024"
        assert data["taxable_income"] == pytest.approx(91000)
        assert data["tax_amount"] == pytest.approx(7690)
        assert data["effective_rate"] == pytest.approx(7.69)
        assert data["reliefs"]["personal"] == 9000

    def test_free_form_income(self, runner, isolated_config):
        data = run_json(runner, "RM 100,000", "--no-epf", "--no-socso")
        assert data["income"] == 100000

    def test_contributions_on_by_default(self, runner, isolated_config):
        data = run_json(runner, "72000")
        assert data["contributions"] == {"epf": pytest.approx(7920), "socso": pytest.approx(432)}
        assert data["total_deductions"] == pytest.approx(17352)

    def test_relief_is_capped(self, runner, isolated_config):
        data = run_json(runner, "100000", "--no-epf", "--no-socso", "-r", "medical=15,000")
        assert data["reliefs"]["medical"] == 8000
        assert data["total_deductions"] == pytest.approx(17000)

    def test_rebate_floors_tax(self, runner, isolated_config):
        data = run_json(runner, "40000", "--rebate", "zakat=99999")
        assert data["tax_amount"] == 0

    def test_unknown_relief(self, runner, isolated_config):
        result = runner.invoke(cli, ["calc", "100000", "-r", "yacht=100"])
        assert result.exit_code == 2
        assert "yacht" in result.output

    def test_unknown_rebate(self, runner, isolated_config):
        result = runner.invoke(cli, ["calc", "100000", "--rebate", "church=100"])
        assert result.exit_code == 2
        assert "church" in result.output

    def test_malformed_pair(self, runner, isolated_config):
        result = runner.invoke(cli, ["calc", "100000", "-r", "medical"])
        assert result.exit_code == 2
        assert "KEY=AMOUNT" in result.output

    def test_text_output(self, runner, isolated_config):
        result = runner.invoke(cli, ["calc", "100000", "--no-epf", "--no-socso"])
        assert result.exit_code == 0, result.output
        assert "INCOME TAX CALCULATION FOR 2024" in result.output
        assert "7,690.00" in result.output
        assert "7.69%" in result.output

    def test_missing_year(self, runner, isolated_config):
        result = runner.invoke(cli, ["calc", "100000", "--year", "1999"])
        assert result.exit_code == 1
        assert "1999" in result.output

    def test_rules_file(self, runner, isolated_config, tmp_path):
        rules_path = tmp_path / "flat.yaml"
        rules_path.write_text(yaml.safe_dump({
            "year": "flat",
            "brackets": [
                {"lower_bound": 0, "upper_bound": 0, "rate": 0},
                {"lower_bound": 1, "rate": 10},
            ],
        }))
        data = run_json(runner, "50000", "--no-epf", "--no-socso", "--rules", str(rules_path))
        assert data["year"] == "flat"
        assert data["tax_amount"] == pytest.approx(5000)

    def test_invalid_rules_file(self, runner, isolated_config, tmp_path):
        rules_path = tmp_path / "gap.yaml"
        rules_path.write_text(yaml.safe_dump({
            "year": 2024,
            "brackets": [
                {"lower_bound": 0, "upper_bound": 100, "rate": 0},
                {"lower_bound": 500, "rate": 10},
            ],
        }))
        result = runner.invoke(cli, ["calc", "50000", "--rules", str(rules_path)])
        assert result.exit_code == 1
        assert "Invalid tax rules" in result.output

    def test_format_from_settings(self, runner, isolated_config):
        (isolated_config / "settings.json").write_text(json.dumps({"format": "json"}))
        result = runner.invoke(cli, ["calc", "100000"])
        assert result.exit_code == 0, result.output
        assert "tax_amount" in json.loads(result.output)


class TestListingCommands:
    """Tests for 'my-tax brackets' and 'my-tax reliefs'."""

    def test_brackets(self, runner, isolated_config):
        result = runner.invoke(cli, ["brackets"])
        assert result.exit_code == 0, result.output
        assert "70,001 - 100,000" in result.output
        assert "2,000,001 and above" in result.output
        assert "528,400.00" in result.output

    def test_reliefs(self, runner, isolated_config):
        result = runner.invoke(cli, ["reliefs"])
        assert result.exit_code == 0, result.output
        assert "Personal Relief" in result.output
        assert "Rebate categories: individual, spouse, zakat" in result.output


class TestSettingsCommands:
    """Tests for 'my-tax settings'."""

    def test_show_defaults(self, runner, isolated_config):
        result = runner.invoke(cli, ["settings", "show"])
        assert result.exit_code == 0, result.output
        assert "No settings configured" in result.output
        assert "year: 2024" in result.output

    def test_set_and_clear_year(self, runner, isolated_config):
        result = runner.invoke(cli, ["settings", "year", "2024"])
        assert result.exit_code == 0, result.output
        saved = json.loads((isolated_config / "settings.json").read_text())
        assert saved == {"year": "2024"}

        result = runner.invoke(cli, ["settings", "year", "--clear"])
        assert result.exit_code == 0, result.output
        assert json.loads((isolated_config / "settings.json").read_text()) == {}

    def test_set_unknown_year(self, runner, isolated_config):
        result = runner.invoke(cli, ["settings", "year", "1999"])
        assert result.exit_code == 2
        assert not (isolated_config / "settings.json").exists()

    def test_set_format(self, runner, isolated_config):
        result = runner.invoke(cli, ["settings", "format", "json"])
        assert result.exit_code == 0, result.output
        assert json.loads((isolated_config / "settings.json").read_text()) == {"format": "json"}

    def test_invalid_format_in_settings(self, runner, isolated_config):
        (isolated_config / "settings.json").write_text(json.dumps({"format": "xml"}))
        result = runner.invoke(cli, ["calc", "100000"])
        assert result.exit_code == 1
        assert "Invalid format" in result.output

    def test_corrupt_settings(self, runner, isolated_config):
        (isolated_config / "settings.json").write_text("{not json")
        result = runner.invoke(cli, ["settings", "show"])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output
