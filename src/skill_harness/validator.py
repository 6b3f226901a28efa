"""Result validator: compares simulator responses with expected captions."""

import logging
from dataclasses import dataclass

from .models import SimulateSkillResponse, TestCase

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of a single validation check."""

    passed: bool
    details: str  # Human-readable reason


class ResponseValidator:
    """Checks a simulator response against a test case.

    A response passes only when its status is ``SUCCESSFUL`` and its caption
    equals the expected output exactly.  Any other status fails the case
    whatever the caption says.
    """

    def validate(
        self, case: TestCase, response: SimulateSkillResponse
    ) -> ValidationResult:
        """Return whether *response* satisfies *case*."""
        if not response.successful:
            details = f"Test case failed with status: {response.status}"
            logger.debug("Validation of %r: %s", case.input, details)
            return ValidationResult(passed=False, details=details)

        if response.result != case.output:
            details = (
                f"Caption mismatch for {case.input!r}: "
                f"expected={case.output!r}  actual={response.result!r}"
            )
            logger.debug("Validation of %r: %s", case.input, details)
            return ValidationResult(passed=False, details=details)

        return ValidationResult(passed=True, details="OK")

    def check(self, case: TestCase, response: SimulateSkillResponse) -> None:
        """Assert that *response* satisfies *case*.

        Raises:
            AssertionError: With the validation details when the case fails.
        """
        result = self.validate(case, response)
        if not result.passed:
            raise AssertionError(result.details)
