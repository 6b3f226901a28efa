"""Skill harness: integration tests for a voice-assistant skill.

Loads declarative YAML test suites, runs each utterance through the skill
simulator CLI, and checks the spoken caption against the expected output.
"""

from .config import Settings, get_settings
from .errors import (
    DuplicateSuiteError,
    FixtureError,
    FixtureIOError,
    FixtureParseError,
    HarnessError,
    MalformedResponseError,
    SimulationError,
    SimulatorConfigError,
    SimulatorLaunchError,
    SimulatorProcessError,
    SimulatorTimeoutError,
    SuiteNotFoundError,
)
from .models import SimulateSkillResponse, TestCase, TestSuite
from .runner import EntryReport, SuiteRunner, TestReport
from .simulator import SkillSimulator, parse_simulation_output
from .suites import SuiteLoader
from .validator import ResponseValidator, ValidationResult

__all__ = [
    "Settings",
    "get_settings",
    "HarnessError",
    "FixtureError",
    "FixtureIOError",
    "FixtureParseError",
    "DuplicateSuiteError",
    "SuiteNotFoundError",
    "SimulationError",
    "SimulatorConfigError",
    "SimulatorLaunchError",
    "SimulatorProcessError",
    "SimulatorTimeoutError",
    "MalformedResponseError",
    "TestCase",
    "TestSuite",
    "SimulateSkillResponse",
    "SuiteLoader",
    "SkillSimulator",
    "parse_simulation_output",
    "ResponseValidator",
    "ValidationResult",
    "SuiteRunner",
    "TestReport",
    "EntryReport",
]
