"""
Pytest configuration for the skill harness test suite.

Provides a factory for fake simulator executables so the subprocess path can
be exercised without the real ask cli.
"""

import sys
import textwrap
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "suites"

_FAKE_SIMULATOR = textwrap.dedent(
    """
    import sys

    args = sys.argv[1:]
    text = args[args.index("--text") + 1] if "--text" in args else ""
    sys.stdout.write({stdout!r}.replace("{{text}}", text))
    sys.stderr.write({stderr!r})
    sys.exit({exit_code!r})
    """
)


@pytest.fixture()
def fake_simulator(tmp_path):
    """Return a factory building a fake simulator command.

    The fake prints *stdout* (with ``{text}`` replaced by the ``--text``
    argument it received), prints *stderr*, and exits with *exit_code*.
    """

    def _factory(stdout: str = "", stderr: str = "", exit_code: int = 0):
        script = tmp_path / "fake_simulate.py"
        script.write_text(
            _FAKE_SIMULATOR.format(stdout=stdout, stderr=stderr, exit_code=exit_code),
            encoding="utf-8",
        )
        return [sys.executable, str(script)]

    return _factory


@pytest.fixture()
def suites_dir(tmp_path):
    """Empty directory for writing suite fixtures."""
    path = tmp_path / "suites"
    path.mkdir()
    return path


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: runs suites against the real ask simulator",
    )
