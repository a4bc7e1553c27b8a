"""Genesis submission discovery, validation and reporting."""

from .decoder import SubmissionDecoder
from .filters import GENTX_LABEL, DiffValidator, is_genesis_submission
from .models import (
    AcceptedSubmission,
    CandidateOutcome,
    ExcludedCandidate,
    SkipReason,
    SubmissionCollection,
)
from .pipeline import GenesisSubmissionPipeline
from .report import (
    Allocation,
    GenesisReport,
    build_report,
    render_json,
    render_text,
)

__all__ = [
    "GENTX_LABEL",
    "AcceptedSubmission",
    "Allocation",
    "CandidateOutcome",
    "DiffValidator",
    "ExcludedCandidate",
    "GenesisReport",
    "GenesisSubmissionPipeline",
    "SkipReason",
    "SubmissionCollection",
    "SubmissionDecoder",
    "build_report",
    "is_genesis_submission",
    "render_json",
    "render_text",
]
