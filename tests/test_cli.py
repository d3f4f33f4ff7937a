"""Tests for the operator CLI (admin bootstrap and report generation)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from click.testing import CliRunner
from smartpark import cli as cli_module
from smartpark.config import settings
from smartpark.models.report import Report
from smartpark.models.user import User, UserRole
from smartpark.services.auth_service import verify_password


@pytest.fixture
def runner(session_factory, monkeypatch):
    monkeypatch.setattr(cli_module, "SessionLocal", session_factory)
    return CliRunner()


class TestCreateAdmin:
    def test_refused_without_bootstrap_flag(self, runner, db, monkeypatch):
        monkeypatch.setattr(settings, "ALLOW_ADMIN_BOOTSTRAP", False)
        result = runner.invoke(cli_module.cli, ["create-admin", "--username", "root", "--generate-password"])

        assert result.exit_code != 0
        assert "disabled" in result.output
        assert db.query(User).count() == 0

    def test_generated_password(self, runner, db, monkeypatch):
        monkeypatch.setattr(settings, "ALLOW_ADMIN_BOOTSTRAP", True)
        result = runner.invoke(cli_module.cli, ["create-admin", "--username", "root", "--generate-password"])

        assert result.exit_code == 0, result.output
        password = result.output.strip().splitlines()[-1].split(": ", 1)[1]
        user = db.query(User).filter(User.username == "root").one()
        assert user.role == UserRole.ADMIN
        assert verify_password(password, user.hashed_password)

    def test_prompted_password(self, runner, db, monkeypatch):
        monkeypatch.setattr(settings, "ALLOW_ADMIN_BOOTSTRAP", True)
        result = runner.invoke(cli_module.cli, ["create-admin", "--username", "root"],
                               input="long-enough-pass\nlong-enough-pass\n")

        assert result.exit_code == 0, result.output
        user = db.query(User).filter(User.username == "root").one()
        assert verify_password("long-enough-pass", user.hashed_password)

    def test_duplicate_username(self, runner, manager, monkeypatch):
        monkeypatch.setattr(settings, "ALLOW_ADMIN_BOOTSTRAP", True)
        result = runner.invoke(cli_module.cli, ["create-admin", "--username", manager.username,
                                                "--password", "long-enough-pass"])
        assert result.exit_code != 0


class TestGenerateCommands:
    def test_generate_monthly_uses_calendar_month(self, runner, db, manager):
        result = runner.invoke(cli_module.cli, ["generate-monthly", "--year", "2024", "--month", "2",
                                                "--as-user", manager.username])

        assert result.exit_code == 0, result.output
        assert "2024-02" in result.output
        report = db.query(Report).one()
        assert len(report.data["daily_stats"]) == 29

    def test_generate_monthly_rejects_month_13(self, runner, manager):
        result = runner.invoke(cli_module.cli, ["generate-monthly", "--year", "2024", "--month", "13",
                                                "--as-user", manager.username])
        assert result.exit_code == 2

    def test_generate_daily(self, runner, db, manager):
        result = runner.invoke(cli_module.cli, ["generate-daily", "--date", "2024-03-15",
                                                "--as-user", manager.username])

        assert result.exit_code == 0, result.output
        assert db.query(Report).one().period_key == "2024-03-15"

    def test_unknown_user(self, runner):
        result = runner.invoke(cli_module.cli, ["generate-daily", "--as-user", "ghost"])
        assert result.exit_code != 0
        assert "ghost" in result.output
