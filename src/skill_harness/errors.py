"""Exception hierarchy for the skill harness."""

from typing import Optional


class HarnessError(Exception):
    """Base exception for all skill harness errors."""


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------


class FixtureError(HarnessError):
    """Base exception for fixture discovery and parsing errors."""


class FixtureIOError(FixtureError):
    """Raised when the fixtures directory or a fixture file cannot be read."""


class FixtureParseError(FixtureError):
    """Raised when a fixture file is not a valid test suite document."""


class DuplicateSuiteError(FixtureError):
    """Raised when two fixture files declare the same suite name."""


class SuiteNotFoundError(FixtureError, KeyError):
    """Raised when a suite is requested by a name that was not loaded."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""


# ----------------------------------------------------------------------
# Simulation
# ----------------------------------------------------------------------


class SimulatorConfigError(HarnessError, ValueError):
    """Raised when a simulator is constructed with missing configuration."""


class SimulationError(HarnessError):
    """Base exception for a failed simulator invocation."""


class SimulatorLaunchError(SimulationError):
    """Raised when the simulator process cannot be started."""


class SimulatorTimeoutError(SimulationError):
    """Raised when the simulator does not exit within the configured timeout."""


class SimulatorProcessError(SimulationError):
    """Raised when the simulator exits with a non-zero status.

    Attributes:
        exit_code: Process exit status.
        stderr: Captured standard error of the process.
    """

    def __init__(self, exit_code: int, stderr: Optional[str] = "") -> None:
        self.exit_code = exit_code
        self.stderr = stderr or ""
        super().__init__(
            f"Failed while simulating skill with exit code: {exit_code}\n{self.stderr}"
        )


class MalformedResponseError(SimulationError):
    """Raised when simulator output lacks the status or caption field.

    Attributes:
        output: Raw standard output of the simulator.
    """

    def __init__(self, output: str) -> None:
        self.output = output
        super().__init__(
            "Missing required fields in response. Expected (status, caption).\n"
            f"{output}"
        )
