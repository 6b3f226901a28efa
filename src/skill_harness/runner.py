"""SuiteRunner: iterates test suites, aggregates results, and reports."""

import json
import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .errors import SimulationError, SuiteNotFoundError
from .models import SimulateSkillResponse, TestSuite
from .simulator import SkillSimulator
from .suites import SuiteLoader
from .validator import ResponseValidator

logger = logging.getLogger(__name__)


@dataclass
class EntryReport:
    """Result for a single test case."""

    suite: str
    input: str
    expected: str
    actual: str
    status: str
    passed: bool
    latency_ms: float
    skipped: bool = False
    error: Optional[str] = None


@dataclass
class TestReport:
    """Aggregated results for a full run."""

    __test__ = False

    total: int
    passed: int
    failed: int
    skipped: int
    entries: List[EntryReport]
    avg_latency_ms: float
    min_latency_ms: float
    max_latency_ms: float
    generated_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class SuiteRunner:
    """Runs test suites through the simulator one case at a time.

    A caption or status mismatch fails only its own case.  A simulator error
    fails its case and skips the remaining cases of the same suite; other
    suites still run.

    Usage::

        simulator = SkillSimulator.from_settings(settings)
        loader = SuiteLoader(Path("tests/fixtures/suites"))
        runner = SuiteRunner(simulator, loader, ResponseValidator())
        report = runner.run_all()
        runner.print_report(report)
    """

    def __init__(
        self,
        simulator: SkillSimulator,
        loader: SuiteLoader,
        validator: ResponseValidator,
    ) -> None:
        self.simulator = simulator
        self.loader = loader
        self.validator = validator

    # ------------------------------------------------------------------
    # Suite runners
    # ------------------------------------------------------------------

    def run_all(self, names: Optional[Iterable[str]] = None) -> TestReport:
        """Run every loaded suite, or only those in *names*.

        Fixture errors propagate before any case runs.

        Raises:
            SuiteNotFoundError: If a requested name was not loaded.
        """
        suites = self._select(self.loader.load_all(), names)
        reports: List[EntryReport] = []
        for suite in suites:
            reports.extend(self.run_suite(suite))
        return _build_report(reports)

    def run_suite(self, suite: TestSuite) -> List[EntryReport]:
        """Run every case of *suite* in order."""
        logger.info("Preparing to run test suite: %s", suite.name)
        reports: List[EntryReport] = []
        aborted: Optional[str] = None

        for case in suite.test_cases:
            if aborted is not None:
                reports.append(
                    EntryReport(
                        suite=suite.name,
                        input=case.input,
                        expected=case.output,
                        actual="",
                        status="",
                        passed=False,
                        latency_ms=0.0,
                        skipped=True,
                        error=f"Skipped after earlier error: {aborted}",
                    )
                )
                continue

            logger.info("Simulating: %r", case.input)
            t0 = time.monotonic()
            try:
                response = self.simulator.simulate(case.input)
            except SimulationError as exc:
                logger.error("Simulation failed for %r: %s", case.input, exc)
                aborted = (str(exc).splitlines() or [type(exc).__name__])[0]
                reports.append(
                    EntryReport(
                        suite=suite.name,
                        input=case.input,
                        expected=case.output,
                        actual="",
                        status="",
                        passed=False,
                        latency_ms=(time.monotonic() - t0) * 1000.0,
                        error=str(exc),
                    )
                )
                continue
            latency_ms = (time.monotonic() - t0) * 1000.0

            vr = self.validator.validate(case, response)
            reports.append(
                EntryReport(
                    suite=suite.name,
                    input=case.input,
                    expected=case.output,
                    actual=response.result,
                    status=response.status,
                    passed=vr.passed,
                    latency_ms=latency_ms,
                    error=None if vr.passed else vr.details,
                )
            )

        return reports

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def print_report(self, report: TestReport) -> None:
        """Print a human-readable summary to stdout."""
        print(
            f"\n{'='*60}\n"
            f"Test Report: {report.generated_at}\n"
            f"{'='*60}"
        )
        print(
            f"  Total   : {report.total}\n"
            f"  Passed  : {report.passed}\n"
            f"  Failed  : {report.failed}\n"
            f"  Skipped : {report.skipped}\n"
            f"  Latency : avg={report.avg_latency_ms:.0f}ms  "
            f"min={report.min_latency_ms:.0f}ms  max={report.max_latency_ms:.0f}ms"
        )
        print(f"\n{'─'*60}")
        for e in report.entries:
            if e.skipped:
                label = "SKIP"
            else:
                label = "PASS" if e.passed else "FAIL"
            print(f"  [{label}]  {e.suite}: {e.input}")
            if not e.passed and not e.skipped:
                if e.status and e.status != SimulateSkillResponse.SUCCESSFUL:
                    print(f"          status   : {e.status}")
                elif e.status:
                    print(f"          expected : {e.expected}")
                    print(f"          actual   : {e.actual}")
                else:
                    print(f"          error    : {e.error}")
        print(f"{'='*60}\n")

    def save_report(self, report: TestReport, output_path: Path) -> None:
        """Save the report as JSON for automated processing."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            json.dumps(asdict(report), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info("Report saved to %s", output_path)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _select(
        suites: Dict[str, TestSuite], names: Optional[Iterable[str]]
    ) -> List[TestSuite]:
        if names is None:
            return list(suites.values())
        selected = []
        for name in names:
            if name not in suites:
                raise SuiteNotFoundError(f"Test suite not found: {name}")
            selected.append(suites[name])
        return selected


def _build_report(reports: List[EntryReport]) -> TestReport:
    latencies = [r.latency_ms for r in reports if r.latency_ms > 0]
    skipped = sum(1 for r in reports if r.skipped)
    passed = sum(1 for r in reports if r.passed)
    return TestReport(
        total=len(reports),
        passed=passed,
        failed=len(reports) - passed - skipped,
        skipped=skipped,
        entries=reports,
        avg_latency_ms=sum(latencies) / len(latencies) if latencies else 0.0,
        min_latency_ms=min(latencies) if latencies else 0.0,
        max_latency_ms=max(latencies) if latencies else 0.0,
    )
