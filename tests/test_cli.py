"""Tests for CLI commands."""

import json
from decimal import Decimal

from typer.testing import CliRunner

from taxplanner.cli import app

runner = CliRunner()


class TestCLI:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Tax scenario planner" in result.output

    def test_no_command_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "calculate" in result.output

    def test_command_help(self):
        for command in ("calculate", "traps", "options", "safe-harbor", "versions", "years"):
            result = runner.invoke(app, [command, "--help"])
            assert result.exit_code == 0


class TestCalculate:
    def test_summary(self):
        result = runner.invoke(app, ["calculate", "2023", "--wages", "60000"])
        assert result.exit_code == 0
        assert "Tax Scenario: 2023 (SINGLE)" in result.output
        assert "$5,460.50" in result.output

    def test_json(self):
        result = runner.invoke(app, ["calculate", "2023", "--wages", "60000", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_tax"] == "5460.50"
        assert data["tax_data_version_used"] == "2023.1.0"

    def test_filing_status_alias(self):
        result = runner.invoke(
            app, ["calculate", "2024", "-s", "mfj", "--wages", "100000", "--json"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["filing_status"] == "MARRIED_FILING_JOINTLY"

    def test_as_of_selects_version(self):
        result = runner.invoke(
            app, ["calculate", "2025", "--wages", "80000", "--as-of", "2025-03-01", "--json"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["tax_data_version_used"] == "2025.1.0"

    def test_state(self):
        result = runner.invoke(app, ["calculate", "2024", "--wages", "60000", "--state", "IL"])
        assert result.exit_code == 0
        assert "$2,970.00" in result.output

    def test_invalid_filing_status(self):
        result = runner.invoke(app, ["calculate", "2024", "-s", "WIDOWED"])
        assert result.exit_code == 1
        assert "Invalid filing status" in result.output

    def test_unknown_year(self):
        result = runner.invoke(app, ["calculate", "1999", "--wages", "1000"])
        assert result.exit_code == 1
        assert "No tax data available for year 1999" in result.output

    def test_invalid_as_of(self):
        result = runner.invoke(app, ["calculate", "2024", "--as-of", "03/01/2024"])
        assert result.exit_code == 1

    def test_required_distribution(self):
        result = runner.invoke(app, [
            "calculate", "2024", "--ira-balance", "265000", "--age", "73", "--json",
        ])
        assert result.exit_code == 0
        assert Decimal(json.loads(result.output)["total_income"]) == Decimal("10000")

    def test_negative_ira_balance(self):
        result = runner.invoke(app, [
            "calculate", "2024", "--ira-balance", "-1", "--age", "75",
        ])
        assert result.exit_code == 1

    def test_missing_dataset(self, tmp_path):
        result = runner.invoke(
            app, ["calculate", "2024", "--data", str(tmp_path / "missing.json")]
        )
        assert result.exit_code == 1
        assert "Dataset not found" in result.output


class TestTraps:
    def test_report(self):
        result = runner.invoke(app, ["traps", "2023", "--wages", "150000"])
        assert result.exit_code == 0
        assert "Medicare IRMAA surcharge (tier 2)" in result.output
        assert "Total potential savings: $1,418.40" in result.output

    def test_json(self):
        result = runner.invoke(app, ["traps", "2023", "--wages", "150000", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [w["source_rule_id"] for w in data["warnings"]] == ["irmaa-2023-single-2"]
        assert data["strategies"][0]["estimated_tax_savings"] == "1418.40"

    def test_no_medicare_enrollees(self):
        result = runner.invoke(
            app, ["traps", "2023", "--wages", "150000", "--medicare-enrollees", "0"]
        )
        assert result.exit_code == 0
        assert "No threshold traps detected." in result.output

    def test_aca(self):
        result = runner.invoke(app, ["traps", "2024", "--wages", "61000", "--aca", "--json"])
        assert result.exit_code == 0
        warnings = json.loads(result.output)["warnings"]
        assert warnings[0]["trap_type"] == "aca"
        assert warnings[0]["severity"] == "critical"

    def test_invalid_household(self):
        result = runner.invoke(app, ["traps", "2024", "--household-size", "0"])
        assert result.exit_code == 1

    def test_bracket_fill_conversion(self):
        result = runner.invoke(app, [
            "traps", "2024", "--wages", "30000",
            "--conversion-strategy", "bracket_12", "--json",
        ])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert Decimal(data["roth_conversion"]) == Decimal("31750")
        assert Decimal(data["result"]["ordinary_taxable_income"]) == Decimal("47150")

    def test_conversion_in_report(self):
        result = runner.invoke(app, [
            "traps", "2024", "--wages", "30000", "--conversion-strategy", "BRACKET_12",
        ])
        assert result.exit_code == 0
        assert "Roth conversion analyzed: $31,750.00" in result.output

    def test_invalid_conversion_strategy(self):
        result = runner.invoke(app, ["traps", "2024", "--conversion-strategy", "max"])
        assert result.exit_code == 1
        assert "Invalid conversion strategy" in result.output


class TestOptions:
    def test_nso(self):
        result = runner.invoke(app, [
            "options", "2024",
            "--shares", "1000", "--grant-price", "10", "--market-price", "50",
            "--base-income", "100000",
        ])
        assert result.exit_code == 0
        assert "NSO exercise: 2024" in result.output
        assert "9,589.50" in result.output

    def test_iso_json(self):
        result = runner.invoke(app, [
            "options", "2024", "-t", "iso_exercise_hold",
            "--shares", "1000", "--grant-price", "10", "--market-price", "110",
            "--base-income", "100000", "--json",
        ])
        assert result.exit_code == 0
        assert json.loads(result.output)["amt"] == "12665.00"

    def test_invalid_type(self):
        result = runner.invoke(app, [
            "options", "2024", "-t", "RSU",
            "--shares", "10", "--grant-price", "1", "--market-price", "2",
        ])
        assert result.exit_code == 1
        assert "Invalid option type" in result.output

    def test_zero_shares(self):
        result = runner.invoke(app, [
            "options", "2024",
            "--shares", "0", "--grant-price", "1", "--market-price", "2",
        ])
        assert result.exit_code == 1


class TestSafeHarbor:
    def test_met(self):
        result = runner.invoke(app, [
            "safe-harbor", "--current-tax", "20000", "--prior-tax", "15000",
            "--withholding", "16000",
        ])
        assert result.exit_code == 0
        assert "Safe harbor met." in result.output

    def test_shortfall(self):
        result = runner.invoke(app, [
            "safe-harbor", "--current-tax", "20000", "--prior-tax", "15000",
            "--withholding", "10000", "--prior-agi", "200000", "--json",
        ])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["uses_high_income_rule"] is True
        assert data["recommended_additional_withholding"] == "6500"


class TestDataCommands:
    def test_versions_table(self):
        result = runner.invoke(app, ["versions"])
        assert result.exit_code == 0
        assert "Tax data versions" in result.output

    def test_versions_json(self):
        result = runner.invoke(app, ["versions", "2025", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [v["id"] for v in data] == ["2025.1.0", "2025.1.1"]
        assert data[1]["is_correction"] is True

    def test_versions_unknown_year(self):
        result = runner.invoke(app, ["versions", "1999"])
        assert result.exit_code == 1

    def test_years(self):
        result = runner.invoke(app, ["years"])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert [line.split(":")[0] for line in lines] == ["2022", "2023", "2024", "2025"]
        assert "MARRIED_FILING_JOINTLY" in lines[0]

    def test_years_with_dataset(self, tmp_path):
        path = tmp_path / "2026.json"
        path.write_text(json.dumps({
            "versions": [
                {"id": "2026.1.0", "year": 2026, "version": "1.0",
                 "effective_date": "2025-10-09", "is_projected": True}
            ],
            "bracket_tables": [
                {"version_id": "2026.1.0", "year": 2026, "filing_status": "SINGLE",
                 "income_type": "ORDINARY", "brackets": [[12400, "0.10"], [None, "0.37"]]}
            ],
        }))
        result = runner.invoke(app, ["years", "--data", str(path)])
        assert result.exit_code == 0
        assert "2026: SINGLE" in result.output
