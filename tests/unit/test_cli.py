"""Unit tests for the skill-harness CLI."""

import json
import shlex

import pytest

from skill_harness.cli import main

_SUCCESS = '{"status": "SUCCESSFUL", "caption": "Hello World!"}'


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (
        "SKILL_HARNESS_SKILL_ID",
        "SKILL_HARNESS_TIMEOUT",
        "SKILL_HARNESS_SIMULATOR_COMMAND",
        "SKILL_HARNESS_FIXTURES_DIR",
        "SKILL_HARNESS_QUOTE_TEXT",
    ):
        monkeypatch.delenv(key, raising=False)


def _write_suite(suites_dir, expected="Hello World!"):
    (suites_dir / "greetings.yaml").write_text(
        f"name: greetings\ntestCases:\n  - input: say hello\n    output: {expected}\n",
        encoding="utf-8",
    )


def _run(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


def _sim_args(command):
    return ["--skill-id", "skill-123", "--simulator", shlex.join(command)]


def test_cli_help():
    assert _run(["--help"]) == 0


def test_cli_requires_command():
    assert _run([]) == 2


def test_invalid_environment_setting_is_error(suites_dir, monkeypatch, capsys):
    monkeypatch.setenv("SKILL_HARNESS_TIMEOUT", "abc")
    assert _run(["list", "--fixtures", str(suites_dir)]) == 2
    err = capsys.readouterr().err
    assert err.startswith("ERROR: invalid SKILL_HARNESS_* settings")
    assert "timeout" in err
    assert "Traceback" not in err


def test_list_suites(suites_dir, capsys):
    _write_suite(suites_dir)
    assert _run(["list", "--fixtures", str(suites_dir)]) == 0
    assert "greetings  (1 cases)" in capsys.readouterr().out


def test_list_missing_directory_is_error(tmp_path, capsys):
    assert _run(["list", "--fixtures", str(tmp_path / "missing")]) == 2
    assert "Fixtures directory not found" in capsys.readouterr().err


def test_run_passing_suite(suites_dir, fake_simulator, tmp_path, capsys):
    _write_suite(suites_dir)
    command = fake_simulator(stdout=_SUCCESS)
    report_path = tmp_path / "out" / "report.json"

    code = _run(
        ["run", "--fixtures", str(suites_dir), "--report", str(report_path)]
        + _sim_args(command)
    )

    assert code == 0
    assert "[PASS]" in capsys.readouterr().out
    assert json.loads(report_path.read_text(encoding="utf-8"))["passed"] == 1


def test_run_failing_suite(suites_dir, fake_simulator):
    _write_suite(suites_dir, expected="Goodbye")
    command = fake_simulator(stdout=_SUCCESS)
    code = _run(["run", "--fixtures", str(suites_dir)] + _sim_args(command))
    assert code == 1


def test_run_without_skill_id_is_error(suites_dir, capsys):
    _write_suite(suites_dir)
    assert _run(["run", "--fixtures", str(suites_dir)]) == 2
    assert "skill_id" in capsys.readouterr().err


def test_skill_id_from_environment(suites_dir, fake_simulator, monkeypatch):
    _write_suite(suites_dir)
    command = fake_simulator(stdout=_SUCCESS)
    monkeypatch.setenv("SKILL_HARNESS_SKILL_ID", "skill-from-env")
    monkeypatch.setenv("SKILL_HARNESS_SIMULATOR_COMMAND", shlex.join(command))
    assert _run(["run", "--fixtures", str(suites_dir)]) == 0


def test_simulate_prints_caption(fake_simulator, capsys):
    command = fake_simulator(stdout=_SUCCESS)
    assert _run(["simulate", "say hello"] + _sim_args(command)) == 0
    out = capsys.readouterr().out
    assert "Status  : SUCCESSFUL" in out
    assert "Caption : Hello World!" in out


def test_simulate_with_expected_mismatch(fake_simulator, capsys):
    command = fake_simulator(stdout=_SUCCESS)
    code = _run(
        ["simulate", "say hello", "--expected", "Goodbye"] + _sim_args(command)
    )
    assert code == 1
    assert "[FAIL]" in capsys.readouterr().out


def test_simulate_process_failure(fake_simulator, capsys):
    command = fake_simulator(stderr="bad profile", exit_code=3)
    assert _run(["simulate", "say hello"] + _sim_args(command)) == 2
    err = capsys.readouterr().err
    assert "exit code: 3" in err
    assert "bad profile" in err
