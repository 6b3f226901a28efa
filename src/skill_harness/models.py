"""Data models for test fixtures and simulation results."""

from dataclasses import dataclass, field
from typing import ClassVar, Tuple

from pydantic import BaseModel, ConfigDict, Field


class TestCase(BaseModel):
    """One utterance and the caption the skill is expected to answer with."""

    __test__: ClassVar[bool] = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    input: str = Field(..., description="Utterance sent to the simulator.")
    output: str = Field(..., description="Expected response caption.")


class TestSuite(BaseModel):
    """A named, ordered collection of test cases loaded from one fixture file.

    The fixture key is ``testCases``; the Python attribute is ``test_cases``.
    """

    __test__: ClassVar[bool] = False

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: str = Field(..., min_length=1, description="Suite name, unique per run.")
    test_cases: Tuple[TestCase, ...] = Field(..., alias="testCases")


@dataclass(frozen=True)
class SimulateSkillResponse:
    """Outcome of one simulator invocation."""

    SUCCESSFUL: ClassVar[str] = "SUCCESSFUL"

    status: str
    result: str  # response caption
    raw_output: str = field(default="", compare=False, repr=False)

    @property
    def successful(self) -> bool:
        return self.status == self.SUCCESSFUL
