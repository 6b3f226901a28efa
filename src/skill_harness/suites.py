"""Suite loader: reads YAML test suite fixtures from a directory."""

import logging
from pathlib import Path
from typing import Dict, Iterator, Tuple

import yaml
from pydantic import ValidationError

from .errors import (
    DuplicateSuiteError,
    FixtureIOError,
    FixtureParseError,
    SuiteNotFoundError,
)
from .models import TestCase, TestSuite

logger = logging.getLogger(__name__)

DUPLICATE_POLICIES = ("error", "replace")


class SuiteLoader:
    """Loads every test suite fixture found directly inside a directory.

    Each regular file (hidden dot-files excepted) holds one YAML document of
    the following shape::

        name: greetings
        testCases:
          - input: "open hello world"
            output: "Welcome, you can say Hello or Help."
          - input: "say hello"
            output: "Hello World!"

    Suites are keyed by ``name``.  Two files declaring the same name either
    raise :class:`DuplicateSuiteError` (``on_duplicate="error"``, the default)
    or the later file, in file name order, wins (``on_duplicate="replace"``).
    """

    def __init__(self, fixtures_dir: Path, on_duplicate: str = "error") -> None:
        if on_duplicate not in DUPLICATE_POLICIES:
            raise ValueError(
                f"on_duplicate must be one of {DUPLICATE_POLICIES}, got {on_duplicate!r}"
            )
        self.fixtures_dir = Path(fixtures_dir)
        self.on_duplicate = on_duplicate

    def load_all(self) -> Dict[str, TestSuite]:
        """Return all suites keyed by name, in file name order.

        Raises:
            FixtureIOError: If the directory or a fixture file cannot be read.
            FixtureParseError: If a fixture is not valid YAML or has the wrong shape.
            DuplicateSuiteError: If two files share a suite name and the
                policy is ``"error"``.
        """
        suites: Dict[str, TestSuite] = {}
        sources: Dict[str, Path] = {}

        for path in self._fixture_paths():
            suite = self.load_file(path)
            if suite.name in suites:
                if self.on_duplicate == "error":
                    raise DuplicateSuiteError(
                        f"Suite {suite.name!r} defined in both "
                        f"{sources[suite.name]} and {path}"
                    )
                logger.warning(
                    "Suite %r from %s replaces the one from %s",
                    suite.name,
                    path,
                    sources[suite.name],
                )
            suites[suite.name] = suite
            sources[suite.name] = path

        logger.info("Loaded %d test suites from %s", len(suites), self.fixtures_dir)
        return suites

    def load_suite(self, name: str) -> TestSuite:
        """Load a single suite by name.

        Raises:
            SuiteNotFoundError: If no fixture declares that name.
        """
        suites = self.load_all()
        try:
            return suites[name]
        except KeyError:
            raise SuiteNotFoundError(f"Test suite not found: {name}") from None

    def iter_cases(self) -> Iterator[Tuple[TestSuite, TestCase]]:
        """Yield ``(suite, case)`` pairs for every loaded case."""
        for suite in self.load_all().values():
            for case in suite.test_cases:
                yield suite, case

    def load_file(self, path: Path) -> TestSuite:
        """Parse one fixture file into a :class:`TestSuite`."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FixtureIOError(f"Failed to read fixture {path}: {exc}") from exc

        try:
            # BaseLoader keeps every scalar as its literal text (yes, 3, null)
            raw = yaml.load(text, Loader=yaml.BaseLoader)
        except yaml.YAMLError as exc:
            raise FixtureParseError(f"Malformed YAML in fixture {path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise FixtureParseError(
                f"Fixture {path} must contain a mapping with 'name' and 'testCases'"
            )

        try:
            suite = TestSuite.model_validate(raw)
        except ValidationError as exc:
            raise FixtureParseError(f"Invalid test suite in {path}: {exc}") from exc

        logger.debug(
            "Parsed suite %r (%d cases) from %s", suite.name, len(suite.test_cases), path
        )
        return suite

    def _fixture_paths(self):
        try:
            if not self.fixtures_dir.is_dir():
                raise FixtureIOError(
                    f"Fixtures directory not found: {self.fixtures_dir}"
                )
            entries = sorted(self.fixtures_dir.iterdir())
            return [p for p in entries if p.is_file() and not p.name.startswith(".")]
        except OSError as exc:
            raise FixtureIOError(
                f"Failed while listing fixtures in {self.fixtures_dir}: {exc}"
            ) from exc
