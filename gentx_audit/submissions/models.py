"""Records passed between the submission pipeline stages."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from ..transactions.messages import MsgCreateValidator


class SkipReason(str, Enum):
    """Why a labelled candidate did not contribute to the report."""

    FILE_COUNT = "file_count"
    MESSAGE_COUNT = "message_count"
    INVALID_MESSAGE = "invalid_message"
    NOT_CREATE_VALIDATOR = "not_create_validator"


@dataclass(frozen=True)
class ExcludedCandidate:
    """A candidate removed by a filtering rule, not by a fault."""

    pull_number: int
    reason: SkipReason
    detail: str = ""


@dataclass(frozen=True)
class AcceptedSubmission:
    """A validated validator-creation message and the pull request it came from."""

    pull_number: int
    message: MsgCreateValidator

    @property
    def moniker(self) -> str:
        return self.message.moniker


CandidateOutcome = AcceptedSubmission | ExcludedCandidate


@dataclass
class SubmissionCollection:
    """Accepted submissions in discovery order, plus what was filtered out.

    Only ever appended to while the pipeline runs.
    """

    submissions: list[AcceptedSubmission] = field(default_factory=list)
    excluded: list[ExcludedCandidate] = field(default_factory=list)
    pulls_seen: int = 0
    candidates_seen: int = 0

    def add(self, outcome: CandidateOutcome) -> None:
        if isinstance(outcome, AcceptedSubmission):
            self.submissions.append(outcome)
        else:
            self.excluded.append(outcome)

    def __len__(self) -> int:
        return len(self.submissions)

    def __iter__(self) -> Iterator[AcceptedSubmission]:
        return iter(self.submissions)
