"""Tests for the lbctl CLI."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from lbreconciler.cli import cli
from lbreconciler.main import HANDLER_NAME


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> Generator[CliRunner, None, None]:
    for var in ("LB_ACTIVE_INIT_DELAY", "LB_ACTIVE_FACTOR", "LB_ACTIVE_STEPS", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("LOG_JSON", "false")
    root_logger = logging.getLogger()
    level = root_logger.level

    yield CliRunner()

    # The CLI installs a handler on the runner's (now closed) stdout
    for handler in list(root_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


class TestValidate:
    """Tests for lbctl validate."""

    def test_valid_spec(self, runner: CliRunner, tmp_path: Path) -> None:
        spec = tmp_path / "lb.yaml"
        spec.write_text(
            yaml.safe_dump(
                {"name": "api.k8s.local", "subnet": "subnet-a", "securityGroup": {"name": "sg"}}
            )
        )

        result = runner.invoke(cli, ["validate", str(spec)])

        assert result.exit_code == 0, result.output
        assert "api.k8s.local" in result.output
        assert "security group: sg" in result.output
        assert "SecurityGroup, Subnet" in result.output

    def test_missing_name(self, runner: CliRunner, tmp_path: Path) -> None:
        spec = tmp_path / "lb.yaml"
        spec.write_text(yaml.safe_dump({"subnet": "subnet-a"}))

        result = runner.invoke(cli, ["validate", str(spec)])

        assert result.exit_code != 0
        assert "Field is required: name" in result.output

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["validate", str(tmp_path / "absent.yaml")])

        assert result.exit_code != 0
        assert "not found" in result.output


class TestBackoff:
    """Tests for lbctl backoff."""

    def test_schedule(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LB_ACTIVE_INIT_DELAY", "1")
        monkeypatch.setenv("LB_ACTIVE_FACTOR", "2")
        monkeypatch.setenv("LB_ACTIVE_STEPS", "4")

        result = runner.invoke(cli, ["backoff"])

        assert result.exit_code == 0, result.output
        assert "4 attempts" in result.output
        assert "total wait bound: 7.0s" in result.output

    def test_bad_configuration(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LB_ACTIVE_STEPS", "0")

        result = runner.invoke(cli, ["backoff"])

        assert result.exit_code != 0
        assert "LB_ACTIVE_STEPS" in result.output
