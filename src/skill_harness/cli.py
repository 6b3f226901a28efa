"""skill-harness CLI: run skill test suites from the command line."""

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .config import Settings, get_settings
from .errors import HarnessError
from .models import TestCase
from .runner import SuiteRunner
from .simulator import SkillSimulator
from .suites import SuiteLoader
from .validator import ResponseValidator

logger = logging.getLogger(__name__)


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skill-harness",
        description="Skill integration test harness driving the ask simulator",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    # Shared simulator options
    sim = argparse.ArgumentParser(add_help=False)
    sim.add_argument(
        "--skill-id",
        default=settings.skill_id,
        help="Skill identifier (default: $SKILL_HARNESS_SKILL_ID)",
    )
    sim.add_argument(
        "--stage",
        default=settings.stage,
        help=f"Skill stage (default: {settings.stage})",
    )
    sim.add_argument(
        "--locale",
        default=settings.locale,
        help=f"Locale (default: {settings.locale})",
    )
    sim.add_argument(
        "--profile",
        default=settings.profile,
        help=f"ask cli profile (default: {settings.profile})",
    )
    sim.add_argument(
        "--simulator",
        default=settings.simulator_command,
        help=f"Simulator command (default: {settings.simulator_command!r})",
    )
    sim.add_argument(
        "--timeout",
        type=float,
        default=settings.timeout,
        help=f"Per-utterance timeout in seconds, 0 disables (default: {settings.timeout})",
    )
    sim.add_argument(
        "--no-quote-text",
        dest="quote_text",
        action="store_false",
        default=settings.quote_text,
        help="Pass the utterance without surrounding quote characters",
    )

    # Shared fixture options
    fix = argparse.ArgumentParser(add_help=False)
    fix.add_argument(
        "--fixtures",
        type=Path,
        default=settings.fixtures_dir,
        help=f"Path to suites directory (default: {settings.fixtures_dir})",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # ---- run -------------------------------------------------------------
    p_run = sub.add_parser(
        "run",
        parents=[sim, fix],
        help="Run test suites against the skill",
    )
    p_run.add_argument(
        "--suite",
        action="append",
        default=None,
        help="Run only this suite (repeatable)",
    )
    p_run.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Save JSON report to this path",
    )

    # ---- list ------------------------------------------------------------
    sub.add_parser(
        "list",
        parents=[fix],
        help="List test suites found in the fixtures directory",
    )

    # ---- simulate --------------------------------------------------------
    p_sim = sub.add_parser(
        "simulate",
        parents=[sim],
        help="Simulate a single utterance",
    )
    p_sim.add_argument("text", help="Utterance to simulate")
    p_sim.add_argument(
        "--expected",
        default=None,
        help="Expected caption for validation",
    )

    return parser


def _make_simulator(args) -> SkillSimulator:
    return SkillSimulator(
        locale=args.locale,
        stage=args.stage,
        profile=args.profile,
        skill_id=args.skill_id,
        command=shlex.split(args.simulator),
        timeout=args.timeout,
        quote_text=args.quote_text,
    )


def _run_suites(args, settings: Settings) -> int:
    simulator = _make_simulator(args)
    loader = SuiteLoader(args.fixtures, on_duplicate=settings.duplicate_policy)
    runner = SuiteRunner(simulator, loader, ResponseValidator())

    report = runner.run_all(args.suite)
    runner.print_report(report)

    if args.report:
        runner.save_report(report, args.report)

    return 0 if report.failed == 0 and report.skipped == 0 else 1


def _list_suites(args, settings: Settings) -> int:
    loader = SuiteLoader(args.fixtures, on_duplicate=settings.duplicate_policy)
    for name, suite in loader.load_all().items():
        print(f"{name}  ({len(suite.test_cases)} cases)")
    return 0


def _simulate(args, settings: Settings) -> int:
    simulator = _make_simulator(args)
    response = simulator.simulate(args.text)

    print(f"Status  : {response.status}")
    print(f"Caption : {response.result}")

    if args.expected is not None:
        vr = ResponseValidator().validate(
            TestCase(input=args.text, output=args.expected), response
        )
        status = "PASS" if vr.passed else "FAIL"
        print(f"Validation : [{status}]  {vr.details}")
        return 0 if vr.passed else 1

    return 0 if response.successful else 1


def main(argv: Optional[list] = None) -> None:
    """Entry point for the skill-harness CLI."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"ERROR: invalid SKILL_HARNESS_* settings: {exc}", file=sys.stderr)
        sys.exit(2)
    parser = _build_parser(settings)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else settings.log_level,
        format="%(name)s - %(levelname)s - %(message)s",
    )

    handlers = {
        "run": _run_suites,
        "list": _list_suites,
        "simulate": _simulate,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = handler(args, settings)
    except HarnessError as exc:
        logger.debug("Harness error", exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        exit_code = 2
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
