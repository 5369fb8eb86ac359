"""
Tests for appvms.cli module.

Tests the command-line entry point through main() with patched argv.
"""

from __future__ import annotations

import sys

import pytest

from appvms import cli


def run_cli(monkeypatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["appvms", *argv])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    return exc_info.value.code


class TestValidateCommand:
    """Tests for 'appvms validate'."""

    def test_valid_plan(self, monkeypatch, capsys, create_yaml_file, sample_plan_data):
        """Test that a valid plan exits 0 with a success banner."""
        plan = create_yaml_file("plan.yaml", sample_plan_data)

        assert run_cli(monkeypatch, "validate", str(plan)) == 0

        out = capsys.readouterr().out
        assert "VALIDATION RESULTS" in out
        assert "Status:      VALID" in out
        assert "[SUCCESS] Plan is valid!" in out

    def test_invalid_plan(self, monkeypatch, capsys, create_yaml_file, sample_plan_data):
        """Test that an invalid plan exits 1 and lists errors."""
        sample_plan_data["apps"] = []
        plan = create_yaml_file("plan.yaml", sample_plan_data)

        assert run_cli(monkeypatch, "validate", str(plan)) == 1

        out = capsys.readouterr().out
        assert "[X] Field 'apps' must be a non-empty list" in out
        assert "[FAILED]" in out


class TestRunCommand:
    """Tests for 'appvms run'."""

    def test_successful_run(self, monkeypatch, capsys, create_yaml_file, sample_plan_data):
        """Test that a clean run prints outcomes and assignments."""
        plan = create_yaml_file("plan.yaml", sample_plan_data)

        assert run_cli(monkeypatch, "run", str(plan)) == 0

        out = capsys.readouterr().out
        assert "PLAN RESULTS" in out
        assert "Uploaded:        2 version(s)" in out
        assert "Assignments (6):" in out
        assert "[SUCCESS] Plan completed successfully!" in out

    def test_failed_step_exit_code(self, monkeypatch, capsys, create_yaml_file, sample_plan_data):
        """Test that a failed step makes the run exit 1."""
        sample_plan_data["steps"] = [
            {"action": "patch", "app": "PhonePe", "from": "v1.0", "to": "v9.0"},
        ]
        plan = create_yaml_file("plan.yaml", sample_plan_data)

        assert run_cli(monkeypatch, "run", str(plan)) == 1
        assert "[FAILED] 1 step(s) failed." in capsys.readouterr().out

    def test_invalid_plan_not_run(self, monkeypatch, capsys, create_yaml_file, sample_plan_data):
        """Test that run refuses a plan that fails validation."""
        sample_plan_data["steps"][1]["strategy"] = "canary"
        plan = create_yaml_file("plan.yaml", sample_plan_data)

        assert run_cli(monkeypatch, "run", str(plan)) == 1

        out = capsys.readouterr().out
        assert "Plan is invalid" in out
        assert "PLAN RESULTS" not in out

    def test_run_with_org_default_devices(
        self, monkeypatch, capsys, create_yaml_file, sample_plan_data
    ):
        """Test that run accepts a plan whose devices come from org defaults."""
        create_yaml_file("defaults/org.yaml", {"devices": ["device1", "device2"]})
        del sample_plan_data["devices"]
        plan = create_yaml_file("plans/phonepe.yaml", sample_plan_data)

        assert run_cli(monkeypatch, "run", str(plan)) == 0

        out = capsys.readouterr().out
        assert "percentage rollout of v2.0 reached 1/2 devices" in out
        assert "[SUCCESS] Plan completed successfully!" in out

    def test_non_integer_beta_percentage_rejected(
        self, monkeypatch, capsys, create_yaml_file, sample_plan_data
    ):
        """Test that run reports a bad percentage instead of crashing."""
        sample_plan_data["steps"][2]["percentage"] = "x"
        plan = create_yaml_file("plan.yaml", sample_plan_data)

        assert run_cli(monkeypatch, "run", str(plan)) == 1
        assert "'percentage' must be an integer" in capsys.readouterr().out

    def test_missing_plan(self, monkeypatch, capsys, tmp_test_dir):
        """Test that a missing plan file exits 1."""
        assert run_cli(monkeypatch, "run", str(tmp_test_dir / "nope.yaml")) == 1
        assert "Plan file not found" in capsys.readouterr().out

    def test_debug_prints_rollout_progress(
        self, monkeypatch, capsys, create_yaml_file, sample_plan_data
    ):
        """Test that --debug shows per-device rollout lines."""
        plan = create_yaml_file("plan.yaml", sample_plan_data)

        assert run_cli(monkeypatch, "run", str(plan), "--debug") == 0

        out = capsys.readouterr().out
        assert "[ROLLOUT] Rolling out v2.0 (beta)" in out
        assert "Device: device3" in out


class TestParser:
    """Tests for argument parsing."""

    def test_version_flag(self, monkeypatch, capsys):
        """Test that --version prints the program version."""
        assert run_cli(monkeypatch, "--version") == 0
        assert capsys.readouterr().out.startswith("appvms ")

    def test_command_required(self, monkeypatch):
        """Test that running without a command is a usage error."""
        assert run_cli(monkeypatch) == 2
