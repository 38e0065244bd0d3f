"""Tests for the report and chart CLI entry points."""

import sys

import pytest
from careplan_sim import chart_cli, cli


def _run(monkeypatch, module, argv):
    monkeypatch.setattr(sys, "argv", ["prog"] + argv)
    module.main()


class TestReportCli:
    def test_single_person(self, monkeypatch, capsys, tmp_path):
        _run(monkeypatch, cli, ["--config", str(tmp_path / "none.toml"), "--base-year", "2030"])
        out = capsys.readouterr().out
        assert "base year 2030" in out
        assert "[Yearly log - Person 1]" in out
        assert "[Household]" in out

    def test_scenarios(self, monkeypatch, capsys, tmp_path):
        _run(monkeypatch, cli, ["--config", str(tmp_path / "none.toml"), "--p2", "--p1-ltc", "--scenarios"])
        out = capsys.readouterr().out
        assert "[Yearly log - Person 2]" in out
        assert "high LTC inflation" in out

    def test_invalid_parameters_exit(self, monkeypatch, capsys, tmp_path):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, cli, ["--config", str(tmp_path / "none.toml"),
                                    "--p1-age", "70", "--p1-retirement-age", "65"])
        assert exc.value.code == 1
        assert "Retirement age 65 is before current age 70" in capsys.readouterr().err

    def test_both_disabled_exit(self, monkeypatch, tmp_path):
        with pytest.raises(SystemExit):
            _run(monkeypatch, cli, ["--config", str(tmp_path / "none.toml"), "--no-p1"])


class TestChartCli:
    def test_writes_charts(self, monkeypatch, capsys, tmp_path):
        output = tmp_path / "charts"
        _run(monkeypatch, chart_cli, [
            "--config", str(tmp_path / "none.toml"), "--output", str(output), "--name", "t",
            "--no-scenarios",
        ])
        assert sorted(p.name for p in output.iterdir()) == ["assets-t.png", "income-t.png", "ltc-t.png"]
        assert "wrote" in capsys.readouterr().err
