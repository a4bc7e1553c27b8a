"""Label filter and single-file diff check for submission candidates."""

import logging

from ..github.client import GitHubClient
from ..github.models import ChangedFile, PullRequestSummary
from .models import ExcludedCandidate, SkipReason

logger = logging.getLogger(__name__)

GENTX_LABEL = "gentx"


def is_genesis_submission(pull: PullRequestSummary, label: str = GENTX_LABEL) -> bool:
    """Check whether a pull request carries the submission label.

    The comparison is exact and case-sensitive.
    """
    return any(existing.name == label for existing in pull.labels)


class DiffValidator:
    """Accepts a candidate only if its pull request changes exactly one file."""

    def __init__(self, client: GitHubClient, repository: str):
        self.client = client
        self.repository = repository

    async def check(self, pull_number: int) -> ChangedFile | ExcludedCandidate:
        """Fetch the changed files of a pull request.

        Transport and decoding failures propagate; a file count other than one
        is a filtering outcome.

        Args:
            pull_number: Pull request number

        Returns:
            The single changed file, or the exclusion record
        """
        files = await self.client.list_pull_files(self.repository, pull_number)
        if len(files) == 1:
            return files[0]

        names = ", ".join(changed.filename for changed in files) or "<none>"
        logger.info(
            f"PR #{pull_number} excluded: expected 1 changed file, "
            f"found {len(files)} ({names})"
        )
        return ExcludedCandidate(
            pull_number=pull_number,
            reason=SkipReason.FILE_COUNT,
            detail=f"{len(files)} files changed: {names}",
        )
