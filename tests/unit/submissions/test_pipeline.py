"""
Unit tests for the genesis submission pipeline.

Why: The pipeline ties listing, filtering, decoding and aggregation together;
     it must keep discovery order, skip unlabelled pull requests without
     touching their files, and produce the same report on every run over the
     same repository state.

What: Tests GenesisSubmissionPipeline with sequential and concurrent
      candidate processing.

How: Drives the pipeline with a mocked GitHubClient serving pull request
     summaries, changed files and raw gentx content.
"""

import asyncio
import logging
from unittest.mock import AsyncMock, Mock

import pytest

from gentx_audit.config.models import Config
from gentx_audit.github.exceptions import GitHubRateLimitError
from gentx_audit.github.models import ChangedFile, PullRequestSummary
from gentx_audit.submissions.models import SkipReason
from gentx_audit.submissions.pipeline import GenesisSubmissionPipeline
from gentx_audit.submissions.report import render_text
from gentx_audit.transactions.codec import AminoJSONCodec
from gentx_audit.transactions.exceptions import TransactionDecodeError
from tests.fixtures.gentx import (
    RAW_BASE,
    REPOSITORY,
    create_validator_msg,
    file_payload,
    gentx_bytes,
    pull_payload,
)


class FakeRepository:
    """Serves a fixed repository state through a mocked client."""

    def __init__(self) -> None:
        self.pulls: list[PullRequestSummary] = []
        self.files: dict[int, list[ChangedFile]] = {}
        self.raw: dict[str, bytes] = {}
        self.delays: dict[int, float] = {}
        self.failures: dict[int, Exception] = {}

    def add(
        self,
        number: int,
        content: bytes | None = None,
        labels: tuple[str, ...] = ("gentx",),
        filenames: tuple[str, ...] = ("gentx.json",),
    ) -> None:
        self.pulls.append(PullRequestSummary.model_validate(pull_payload(number, labels)))
        self.files[number] = [
            ChangedFile.model_validate(file_payload(name, number)) for name in filenames
        ]
        if content is not None:
            self.raw[f"{RAW_BASE}/{number}/{filenames[0]}"] = content

    def client(self) -> Mock:
        client = Mock()
        paginator = Mock()
        paginator.collect_all = AsyncMock(side_effect=lambda: list(self.pulls))
        paginator.pages_fetched = 1
        client.list_pulls = Mock(return_value=paginator)

        async def list_pull_files(repository: str, number: int) -> list[ChangedFile]:
            await asyncio.sleep(self.delays.get(number, 0))
            if number in self.failures:
                raise self.failures[number]
            return self.files[number]

        async def get_raw(url: str) -> bytes:
            return self.raw[url]

        client.list_pull_files = AsyncMock(side_effect=list_pull_files)
        client.get_raw = AsyncMock(side_effect=get_raw)
        return client


def gentx(moniker: str, amount: int, seed: int) -> bytes:
    return gentx_bytes(create_validator_msg(moniker=moniker, amount=amount, seed=seed))


def make_pipeline(client: Mock, max_concurrency: int = 1) -> GenesisSubmissionPipeline:
    config = Config(
        github={"repository": REPOSITORY},
        submissions={"max_concurrency": max_concurrency},
    )
    return GenesisSubmissionPipeline(client, AminoJSONCodec(), config)


@pytest.fixture
def repository() -> FakeRepository:
    repo = FakeRepository()
    repo.add(12, gentx("Validator A", 3_000_000, seed=1))
    repo.add(11, labels=("docs",))
    repo.add(10, gentx("Validator B", 25_000_000, seed=2))
    repo.add(9, labels=("gentx",), filenames=("a.json", "b.json"))
    repo.add(8, gentx_bytes(), labels=("gentx",))
    repo.add(7, gentx("Validator C", 4_999_999, seed=3))
    return repo


class TestGenesisSubmissionPipeline:
    """Test end-to-end processing over a mocked client."""

    @pytest.mark.asyncio
    async def test_run_builds_report(self, repository: FakeRepository) -> None:
        report = await make_pipeline(repository.client()).run()

        assert [a.moniker for a in report.allocations] == [
            "Validator A",
            "Validator B",
            "Validator C",
        ]
        assert [a.amount.amount for a in report.allocations] == [3, 25, 4]
        assert report.total.amount == 32
        assert report.count == 3
        assert {(c.pull_number, c.reason) for c in report.excluded} == {
            (9, SkipReason.FILE_COUNT),
            (8, SkipReason.MESSAGE_COUNT),
        }

    @pytest.mark.asyncio
    async def test_unlabelled_pulls_never_fetch_files(
        self, repository: FakeRepository
    ) -> None:
        """
        Why: Pull requests without the label are not candidates and must not
             cost any API calls.
        What: Tests that list_pull_files is never called for PR #11.
        How: Inspects the awaited arguments of the mocked client.
        """
        client = repository.client()

        await make_pipeline(client).run()

        fetched = [call.args[1] for call in client.list_pull_files.await_args_list]
        assert fetched == [12, 10, 9, 8, 7]
        assert 11 not in fetched

    @pytest.mark.asyncio
    async def test_listing_uses_config(self, repository: FakeRepository) -> None:
        client = repository.client()

        await make_pipeline(client).run()

        client.list_pulls.assert_called_once_with(
            REPOSITORY, state="open", per_page=None, max_pages=None
        )

    @pytest.mark.asyncio
    async def test_runs_are_idempotent(self, repository: FakeRepository) -> None:
        client = repository.client()

        first = render_text(await make_pipeline(client).run())
        second = render_text(await make_pipeline(client).run())

        assert first == second

    @pytest.mark.asyncio
    async def test_concurrent_processing_keeps_discovery_order(
        self, repository: FakeRepository
    ) -> None:
        """
        Why: Concurrent validation must not reorder the report.
        What: Tests max_concurrency > 1 when earlier candidates finish last.
        How: Delays the file listing of the first candidates.
        """
        repository.delays = {12: 0.03, 10: 0.02}

        report = await make_pipeline(repository.client(), max_concurrency=4).run()

        assert [a.pull_number for a in report.allocations] == [12, 10, 7]

    @pytest.mark.asyncio
    async def test_concurrent_fault_cancels_pending_candidates(
        self, repository: FakeRepository
    ) -> None:
        """
        Why: Once one candidate aborts the run, the others must stop before
             the client session is closed underneath them.
        What: Tests max_concurrency > 1 when one candidate hits the rate limit
              while another is still waiting on its file listing.
        How: Delays PR #12, fails PR #10, then checks the error surfaces
             unwrapped and PR #12 never reaches the raw fetch.
        """
        repository.delays = {12: 0.05}
        repository.failures = {
            10: GitHubRateLimitError("API rate limit exceeded", seconds_until_reset=120)
        }
        client = repository.client()

        with pytest.raises(GitHubRateLimitError):
            await make_pipeline(client, max_concurrency=4).run()
        await asyncio.sleep(0.1)

        fetched = [call.args[0] for call in client.get_raw.await_args_list]
        assert f"{RAW_BASE}/12/gentx.json" not in fetched

    @pytest.mark.asyncio
    async def test_collect_counts(self, repository: FakeRepository) -> None:
        collection = await make_pipeline(repository.client()).collect()

        assert collection.pulls_seen == 6
        assert collection.candidates_seen == 5
        assert len(collection) == 3
        assert [s.moniker for s in collection] == [
            "Validator A",
            "Validator B",
            "Validator C",
        ]

    @pytest.mark.asyncio
    async def test_empty_repository(self) -> None:
        report = await make_pipeline(FakeRepository().client()).run()

        assert report.count == 0
        assert report.total.amount == 0

    @pytest.mark.asyncio
    async def test_undecodable_submission_aborts(
        self, repository: FakeRepository
    ) -> None:
        repository.add(6, b"garbage")

        with pytest.raises(TransactionDecodeError):
            await make_pipeline(repository.client()).run()

    @pytest.mark.asyncio
    async def test_rate_limit_aborts(self, repository: FakeRepository) -> None:
        client = repository.client()
        client.list_pull_files.side_effect = GitHubRateLimitError(
            "API rate limit exceeded", seconds_until_reset=120
        )

        with pytest.raises(GitHubRateLimitError):
            await make_pipeline(client).run()

    @pytest.mark.asyncio
    async def test_unexpected_denomination_warns(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        repo = FakeRepository()
        repo.add(1, gentx_bytes(create_validator_msg(denom="stake", amount=2_000_000)))

        with caplog.at_level(logging.WARNING):
            report = await make_pipeline(repo.client()).run()

        assert report.total.amount == 2
        assert "stakes stake, expected uatom" in caplog.text
