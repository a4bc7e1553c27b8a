"""Genesis submission pipeline.

listing -> label filter -> diff validator -> submission decoder -> report

Any fault that is not a filtering outcome propagates out of :meth:`run`, so a
report is only produced from a run that saw the complete submission set.
"""

import asyncio
import logging
import time

from ..config.models import Config
from ..github.client import GitHubClient
from ..github.models import PullRequestSummary
from ..transactions.codec import TransactionCodec
from .decoder import SubmissionDecoder
from .filters import DiffValidator, is_genesis_submission
from .models import CandidateOutcome, ExcludedCandidate, SubmissionCollection
from .report import GenesisReport, build_report

logger = logging.getLogger(__name__)


class GenesisSubmissionPipeline:
    """Collects, validates and aggregates genesis submissions for one run."""

    def __init__(self, client: GitHubClient, codec: TransactionCodec, config: Config):
        """Initialize pipeline.

        Args:
            client: Open GitHub client
            codec: Transaction codec used to decode submissions
            config: Run configuration
        """
        self.client = client
        self.config = config
        self.diff_validator = DiffValidator(client, config.github.repository)
        self.decoder = SubmissionDecoder(client, codec)

    async def fetch_pulls(self) -> list[PullRequestSummary]:
        """Walk every page of the pull request listing."""
        github = self.config.github
        paginator = self.client.list_pulls(
            github.repository,
            state=github.pull_state,
            per_page=github.per_page,
            max_pages=github.max_pages,
        )
        pulls = await paginator.collect_all()
        logger.info(
            f"Fetched {len(pulls)} pull requests from {github.repository} "
            f"in {paginator.pages_fetched} page(s)"
        )
        return pulls

    def select_candidates(
        self, pulls: list[PullRequestSummary]
    ) -> list[PullRequestSummary]:
        label = self.config.submissions.label
        candidates = [pull for pull in pulls if is_genesis_submission(pull, label)]
        logger.info(f"{len(candidates)} of {len(pulls)} pull requests labelled {label!r}")
        return candidates

    async def process_candidate(self, pull: PullRequestSummary) -> CandidateOutcome:
        """Run the diff check and decoder for one labelled pull request."""
        checked = await self.diff_validator.check(pull.number)
        if isinstance(checked, ExcludedCandidate):
            return checked
        outcome = await self.decoder.decode(pull.number, checked.raw_url)
        logger.debug(f"PR #{pull.number} ({checked.filename}): {type(outcome).__name__}")
        return outcome

    async def _process_all(
        self, candidates: list[PullRequestSummary]
    ) -> list[CandidateOutcome]:
        limit = self.config.submissions.max_concurrency
        if limit <= 1:
            return [await self.process_candidate(pull) for pull in candidates]

        semaphore = asyncio.Semaphore(limit)

        async def bounded(pull: PullRequestSummary) -> CandidateOutcome:
            async with semaphore:
                return await self.process_candidate(pull)

        # A fault in one candidate cancels the rest before the client closes
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(bounded(pull)) for pull in candidates]
        except ExceptionGroup as failures:
            if len(failures.exceptions) > 1:
                logger.debug(f"{len(failures.exceptions)} candidates failed concurrently")
            raise failures.exceptions[0]
        # tasks keep the input order, so the report keeps discovery order
        return [task.result() for task in tasks]

    async def collect(self) -> SubmissionCollection:
        """Gather every accepted submission in discovery order."""
        start_time = time.time()
        pulls = await self.fetch_pulls()
        candidates = self.select_candidates(pulls)

        collection = SubmissionCollection(
            pulls_seen=len(pulls), candidates_seen=len(candidates)
        )
        for outcome in await self._process_all(candidates):
            collection.add(outcome)

        logger.info(
            f"Accepted {len(collection)} submissions, excluded "
            f"{len(collection.excluded)} in {time.time() - start_time:.2f}s"
        )
        return collection

    def report(self, collection: SubmissionCollection) -> GenesisReport:
        denomination = self.config.denomination
        for submission in collection:
            if submission.message.value.denom != denomination.minor:
                logger.warning(
                    f"PR #{submission.pull_number} stakes "
                    f"{submission.message.value.denom}, expected {denomination.minor}"
                )
        return build_report(
            collection.submissions,
            scale=denomination.scale,
            major_denom=denomination.major,
            excluded=collection.excluded,
        )

    async def run(self) -> GenesisReport:
        """Collect submissions and build the aggregate report."""
        return self.report(await self.collect())
