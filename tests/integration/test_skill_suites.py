"""Integration tests that run every fixture suite against the live skill.

One parametrized test per suite: each case is simulated through the real
``ask simulate`` command and its caption checked against the fixture.  A
caption or status mismatch fails the test with an assertion; a simulator
error fails it with the harness exception.

Run integration tests (needs an authenticated ask cli):
    SKILL_HARNESS_SKILL_ID=amzn1.ask.skill.... pytest tests/integration -v

Skip integration tests (unit-only CI):
    pytest -m "not integration"
"""

import logging
import shlex
import shutil
from pathlib import Path

import pytest

from skill_harness.config import get_settings
from skill_harness.simulator import SkillSimulator
from skill_harness.suites import SuiteLoader
from skill_harness.validator import ResponseValidator

logger = logging.getLogger(__name__)

_REPO_ROOT = Path(__file__).parents[2]
_SETTINGS = get_settings()


def _suites_dir(fixtures_dir: Path) -> Path:
    # Relative SKILL_HARNESS_FIXTURES_DIR values are taken from the repo root
    return fixtures_dir if fixtures_dir.is_absolute() else _REPO_ROOT / fixtures_dir


_SUITES_DIR = _suites_dir(_SETTINGS.fixtures_dir)
_SUITES = SuiteLoader(_SUITES_DIR, on_duplicate=_SETTINGS.duplicate_policy).load_all()


def _simulator_available() -> bool:
    command = shlex.split(_SETTINGS.simulator_command)
    return bool(command) and shutil.which(command[0]) is not None


_needs_skill_id = pytest.mark.skipif(
    not _SETTINGS.skill_id, reason="SKILL_HARNESS_SKILL_ID is not set"
)
_needs_simulator = pytest.mark.skipif(
    not _simulator_available(), reason="simulator command not found on PATH"
)

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def simulator() -> SkillSimulator:
    return SkillSimulator.from_settings(_SETTINGS)


def test_relative_fixtures_dir_resolves_from_repo_root():
    expected = _REPO_ROOT / "tests" / "fixtures" / "suites"
    assert _suites_dir(Path("tests/fixtures/suites")) == expected
    assert expected.is_dir()


def test_absolute_fixtures_dir_used_as_is(tmp_path):
    assert _suites_dir(tmp_path) == tmp_path


@_needs_skill_id
@_needs_simulator
@pytest.mark.parametrize("suite", list(_SUITES.values()), ids=list(_SUITES))
def test_skill_suite(suite, simulator):
    logger.info("Preparing to run test suite: %s", suite.name)
    validator = ResponseValidator()
    for case in suite.test_cases:
        response = simulator.simulate(case.input)
        validator.check(case, response)
