import csv
import json
from decimal import Decimal

import pytest
from click.testing import CliRunner

from amortize.main import cli

SCHEDULE_ARGS = ["schedule", "-s", "2020-04-15", "-e", "2022-04-14", "-a", "1m"]


@pytest.fixture
def runner():
    return CliRunner()


class TestSchedule:
    def test_json(self, runner):
        result = runner.invoke(cli, SCHEDULE_ARGS + ["-i", "2400", "--round", "--json"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.output)
        assert len(rows) == 24
        assert rows[0]["Payment"] == "-52871"
        assert rows[-1]["Payment"] == "-52873"
        assert rows[-1]["Principal"] == "-51836"

    def test_table(self, runner):
        result = runner.invoke(cli, SCHEDULE_ARGS + ["-i", "2400", "--round"])
        assert result.exit_code == 0, result.output
        assert "Total principal    : -1000000" in result.output
        assert "24\t2022-03-15\t2022-04-14\t-52873\t-1037\t-51836" in result.output

    def test_flat_daily(self, runner):
        result = runner.invoke(
            cli,
            [
                "schedule", "-s", "2020-04-15", "-e", "2020-05-14", "-a", "1000000",
                "-f", "daily", "--interest-type", "flat", "-i", "7300", "--round", "--json",
            ],
        )
        assert result.exit_code == 0, result.output
        rows = json.loads(result.output)
        assert [r["Interest"] for r in rows] == ["-2000"] * 30

    def test_uneven_end_date(self, runner):
        result = runner.invoke(cli, ["schedule", "-s", "2020-04-15", "-e", "2022-04-20", "-a", "1m", "-i", "2400"])
        assert result.exit_code == 1
        assert "uneven end date" in result.output

    def test_bad_date(self, runner):
        result = runner.invoke(cli, ["schedule", "-s", "15/04/2020", "-e", "2022-04-14", "-a", "1m", "-i", "2400"])
        assert result.exit_code == 2
        assert "Invalid date string" in result.output

    def test_amount_finer_than_rounding(self, runner):
        result = runner.invoke(
            cli,
            ["schedule", "-s", "2020-04-15", "-e", "2022-04-14", "-a", "1000000.55", "-i", "2400", "--round"],
        )
        assert result.exit_code == 2
        assert "decimal places" in result.output

    def test_settings_from_environment(self, runner):
        result = runner.invoke(
            cli,
            SCHEDULE_ARGS + ["--json"],
            env={
                "AMORTIZE_SCHEDULE_INTEREST": "2400",
                "AMORTIZE_SCHEDULE_ROUNDING": "true",
                "AMORTIZE_SCHEDULE_ROUNDING_PLACES": "2",
            },
            auto_envvar_prefix="AMORTIZE",
        )
        assert result.exit_code == 0, result.output
        rows = json.loads(result.output)
        assert rows[0]["Payment"] == "-52871.10"
        assert rows[0]["Interest"] == "-20000.00"

    def test_export_csv(self, runner, tmp_path):
        target = tmp_path / "schedule.csv"
        result = runner.invoke(cli, SCHEDULE_ARGS + ["-i", "2400", "--round", "--output", str(target)])
        assert result.exit_code == 0, result.output
        with target.open(newline="", encoding="utf-8") as f:
            records = list(csv.DictReader(f))
        assert len(records) == 24
        assert records[0]["Principal"] == "-32871"
        assert records[0]["EndDate"] == "2020-05-14T23:59:59+00:00"

    def test_export_json(self, runner, tmp_path):
        target = tmp_path / "schedule.json"
        result = runner.invoke(cli, SCHEDULE_ARGS + ["-i", "2400", "--round", "--output", str(target)])
        assert result.exit_code == 0, result.output
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["summary"]["total_principal"] == "-1000000"
        assert len(data["schedule"]) == 24

    def test_export_html(self, runner, tmp_path):
        target = tmp_path / "schedule.html"
        result = runner.invoke(cli, SCHEDULE_ARGS + ["-i", "2400", "--output", str(target)])
        assert result.exit_code == 0, result.output
        assert "<html" in target.read_text(encoding="utf-8")

    def test_unsupported_export(self, runner, tmp_path):
        target = tmp_path / "schedule.txt"
        result = runner.invoke(cli, SCHEDULE_ARGS + ["-i", "2400", "--output", str(target)])
        assert result.exit_code == 2
        assert not target.exists()


class TestTvmCommands:
    def test_pmt(self, runner):
        result = runner.invoke(cli, ["pmt", "--rate", "0.02", "--nper", "24", "--pv", "1m"])
        assert result.exit_code == 0, result.output
        assert abs(Decimal(result.output) - Decimal("-52871.097253249890")) < Decimal("1e-12")

    def test_ipmt(self, runner):
        result = runner.invoke(cli, ["ipmt", "-r", "0.02", "-p", "1", "-n", "24", "--pv", "1000000"])
        assert result.exit_code == 0, result.output
        assert Decimal(result.output) == Decimal("-20000")

    def test_fv_zero_rate(self, runner):
        result = runner.invoke(cli, ["fv", "-r", "0", "-n", "10", "--pmt=-100", "--pv=-1000"])
        assert result.exit_code == 0, result.output
        assert Decimal(result.output) == Decimal("2000")

    def test_npv(self, runner):
        result = runner.invoke(cli, ["npv", "--rate", "0.1", "--", "0", "110", "121"])
        assert result.exit_code == 0, result.output
        assert Decimal(result.output) == Decimal("200")

    def test_nper(self, runner):
        result = runner.invoke(cli, ["nper", "-r", "0", "--pmt=-100", "--pv", "1000"])
        assert result.exit_code == 0, result.output
        assert Decimal(result.output) == Decimal("10")

    def test_nper_out_of_bounds(self, runner):
        result = runner.invoke(cli, ["nper", "-r", "0.1", "--pmt=-50", "--pv", "1000"])
        assert result.exit_code == 1
        assert "out of bounds" in result.output

    def test_rate(self, runner):
        result = runner.invoke(cli, ["rate", "-n", "10", "--pmt", "0", "--pv=-3500", "--fv", "10000"])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("0.110690")

    def test_rate_not_converged(self, runner):
        result = runner.invoke(
            cli, ["rate", "-n", "10", "--pmt", "0", "--pv=-3500", "--fv", "10000", "--max-iterations", "1"]
        )
        assert result.exit_code == 1
        assert "did not converge" in result.output

    def test_debug_logging(self, runner):
        result = runner.invoke(cli, ["--log-level", "debug", "pmt", "-r", "0.02", "-n", "24", "--pv", "1m"])
        assert result.exit_code == 0
