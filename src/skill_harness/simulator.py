"""SkillSimulator: runs utterances through the ``ask simulate`` command."""

import json
import logging
import re
import shlex
import subprocess
from typing import Any, List, Optional, Sequence

from .config import Settings
from .errors import (
    MalformedResponseError,
    SimulatorConfigError,
    SimulatorLaunchError,
    SimulatorProcessError,
    SimulatorTimeoutError,
)
from .models import SimulateSkillResponse

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ("ask", "simulate")

# Fallback grammar for non-JSON output.  Each pattern is searched on its own
# and the first match wins; ``.`` stops at line ends, so a caption extends to
# the last quote on its line.  Status words may contain underscores
# (``IN_PROGRESS``).
STATUS_PATTERN = re.compile(r'"status": "([A-Z_]*)"')
CAPTION_PATTERN = re.compile(r'"caption": "(.*)"')


class SkillSimulator:
    """Runs one utterance at a time through the skill simulator CLI.

    Every call starts a fresh child process and blocks until it exits; there
    is no retry and no state shared between calls.

    Usage::

        simulator = SkillSimulator("en-US", "development", "default", skill_id)
        response = simulator.simulate("open hello world")
        print(response.status, response.result)
    """

    def __init__(
        self,
        locale: str,
        stage: str,
        profile: str,
        skill_id: str,
        command: Sequence[str] = DEFAULT_COMMAND,
        timeout: Optional[float] = None,
        quote_text: bool = True,
    ) -> None:
        for name, value in (
            ("locale", locale),
            ("stage", stage),
            ("profile", profile),
            ("skill_id", skill_id),
        ):
            if not value or not str(value).strip():
                raise SimulatorConfigError(f"{name} must be a non-empty string")
        if not command:
            raise SimulatorConfigError("command must not be empty")

        self.locale = locale
        self.stage = stage
        self.profile = profile
        self.skill_id = skill_id
        self.command = list(command)
        self.timeout = timeout if timeout else None
        self.quote_text = quote_text

        logger.info(
            "Creating skill simulator using locale %s, stage %s, profile %s, and skill-id %s",
            locale,
            stage,
            profile,
            skill_id,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SkillSimulator":
        """Build a simulator from harness settings."""
        return cls(
            locale=settings.locale,
            stage=settings.stage,
            profile=settings.profile,
            skill_id=settings.skill_id,
            command=shlex.split(settings.simulator_command),
            timeout=settings.timeout,
            quote_text=settings.quote_text,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_command(self, text: str) -> List[str]:
        """Return the argument vector for simulating *text*."""
        text_arg = f'"{text}"' if self.quote_text else text
        return self.command + [
            "--locale",
            self.locale,
            "--stage",
            self.stage,
            "--profile",
            self.profile,
            "--skill-id",
            self.skill_id,
            "--text",
            text_arg,
        ]

    def simulate(self, text: str) -> SimulateSkillResponse:
        """Simulate *text* against the skill and return its status and caption.

        Raises:
            SimulatorLaunchError: If the process could not be started.
            SimulatorTimeoutError: If the process outlived ``timeout``.
            SimulatorProcessError: If the process exited non-zero.
            MalformedResponseError: If the output lacks status or caption.
        """
        cmd = self.build_command(text)
        logger.debug("Running command: %s", shlex.join(cmd))

        try:
            # run() drains both pipes and reaps the child, killing it on timeout
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise SimulatorTimeoutError(
                f"Simulator did not finish within {self.timeout} seconds"
            ) from exc
        except OSError as exc:
            raise SimulatorLaunchError(
                f"Failed while simulating skill with exception: {exc}"
            ) from exc

        if completed.returncode != 0:
            raise SimulatorProcessError(completed.returncode, completed.stderr)

        logger.debug("Simulator output:\n%s", completed.stdout)
        return parse_simulation_output(completed.stdout)


# ------------------------------------------------------------------
# Output parsing
# ------------------------------------------------------------------


def parse_simulation_output(output: str) -> SimulateSkillResponse:
    """Extract status and caption from simulator standard output.

    The JSON document embedded in the output is decoded first.  When that
    fails, or lacks either field, ``STATUS_PATTERN`` and ``CAPTION_PATTERN``
    are applied to the raw text.

    Raises:
        MalformedResponseError: If status or caption cannot be found.
    """
    document = _decode_json(output)
    if document is not None:
        status = _find_string(document, "status")
        caption = _find_string(document, "caption")
        if status is not None and caption is not None:
            return SimulateSkillResponse(status=status, result=caption, raw_output=output)

    status_match = STATUS_PATTERN.search(output)
    caption_match = CAPTION_PATTERN.search(output)
    if status_match and caption_match:
        return SimulateSkillResponse(
            status=status_match.group(1),
            result=caption_match.group(1),
            raw_output=output,
        )

    raise MalformedResponseError(output)


def _decode_json(output: str) -> Any:
    """Decode the span between the first ``{`` and the last ``}``, if any."""
    start = output.find("{")
    end = output.rfind("}")
    if start == -1 or end < start:
        return None
    try:
        return json.loads(output[start : end + 1])
    except json.JSONDecodeError:
        return None


def _find_string(node: Any, key: str) -> Optional[str]:
    """Depth-first search for the first string value stored under *key*."""
    if isinstance(node, dict):
        value = node.get(key)
        if isinstance(value, str):
            return value
        for child in node.values():
            found = _find_string(child, key)
            if found is not None:
                return found
    elif isinstance(node, list):
        for child in node:
            found = _find_string(child, key)
            if found is not None:
                return found
    return None
