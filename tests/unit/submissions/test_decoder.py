"""
Unit tests for the submission decoder.

Why: The changed file of a candidate becomes a counted submission only if it
     decodes as an envelope holding exactly one valid create-validator
     message; an undecodable file stops the whole run.

What: Tests SubmissionDecoder.decode and decode_bytes.

How: Uses the real AminoJSONCodec with a mocked client for raw fetches.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from gentx_audit.github.exceptions import GitHubNotFoundError
from gentx_audit.submissions.decoder import SubmissionDecoder
from gentx_audit.submissions.models import (
    AcceptedSubmission,
    ExcludedCandidate,
    SkipReason,
)
from gentx_audit.transactions.codec import AminoJSONCodec
from gentx_audit.transactions.exceptions import TransactionDecodeError
from tests.fixtures.gentx import (
    RAW_BASE,
    create_validator_msg,
    delegate_msg,
    gentx_bytes,
)


@pytest.fixture
def mock_client() -> Mock:
    client = Mock()
    client.get_raw = AsyncMock()
    return client


@pytest.fixture
def decoder(mock_client: Mock) -> SubmissionDecoder:
    return SubmissionDecoder(mock_client, AminoJSONCodec())


class TestSubmissionDecoder:
    """Test SubmissionDecoder outcomes."""

    @pytest.mark.asyncio
    async def test_accepts_valid_gentx(
        self, decoder: SubmissionDecoder, mock_client: Mock
    ) -> None:
        url = f"{RAW_BASE}/3/gentx.json"
        mock_client.get_raw.return_value = gentx_bytes(
            create_validator_msg(moniker="Validator A", amount=3_000_000)
        )

        outcome = await decoder.decode(3, url)

        assert isinstance(outcome, AcceptedSubmission)
        assert outcome.pull_number == 3
        assert outcome.moniker == "Validator A"
        assert outcome.message.value.amount == 3_000_000
        mock_client.get_raw.assert_awaited_once_with(url)

    @pytest.mark.parametrize("count", [0, 2])
    def test_message_count_excluded(
        self, decoder: SubmissionDecoder, count: int
    ) -> None:
        data = gentx_bytes(*[create_validator_msg(seed=i + 1) for i in range(count)])

        outcome = decoder.decode_bytes(5, data)

        assert isinstance(outcome, ExcludedCandidate)
        assert outcome.reason is SkipReason.MESSAGE_COUNT

    def test_invalid_message_excluded(self, decoder: SubmissionDecoder) -> None:
        outcome = decoder.decode_bytes(5, gentx_bytes(create_validator_msg(amount=0)))

        assert isinstance(outcome, ExcludedCandidate)
        assert outcome.reason is SkipReason.INVALID_MESSAGE
        assert "self delegation amount must be positive" in outcome.detail

    def test_uppercase_denomination_excluded_not_fatal(
        self, decoder: SubmissionDecoder
    ) -> None:
        """
        Why: A denomination the chain rejects in message validation must skip
             the one submission, not abort the run as a decode failure would.
        What: Tests decode_bytes with an upper-case self-delegation denom.
        How: Builds a create-validator message staking UATOM.
        """
        data = gentx_bytes(create_validator_msg(denom="UATOM"))

        outcome = decoder.decode_bytes(5, data)

        assert isinstance(outcome, ExcludedCandidate)
        assert outcome.reason is SkipReason.INVALID_MESSAGE
        assert "UATOM" in outcome.detail

    def test_plus_signed_amount_accepted(self, decoder: SubmissionDecoder) -> None:
        data = gentx_bytes(create_validator_msg(amount="+3000000"))

        outcome = decoder.decode_bytes(5, data)

        assert isinstance(outcome, AcceptedSubmission)
        assert outcome.message.value.amount == 3_000_000

    def test_non_create_validator_excluded(self, decoder: SubmissionDecoder) -> None:
        """
        Why: A valid message of another type says nothing about a genesis
             allocation, so it is dropped rather than counted.
        What: Tests decode_bytes with a single MsgDelegate.
        How: Builds a one-message envelope holding a delegation.
        """
        outcome = decoder.decode_bytes(5, gentx_bytes(delegate_msg()))

        assert isinstance(outcome, ExcludedCandidate)
        assert outcome.reason is SkipReason.NOT_CREATE_VALIDATOR

    def test_undecodable_file_is_fatal(self, decoder: SubmissionDecoder) -> None:
        with pytest.raises(TransactionDecodeError):
            decoder.decode_bytes(5, b"this is not a transaction")

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(
        self, decoder: SubmissionDecoder, mock_client: Mock
    ) -> None:
        mock_client.get_raw.side_effect = GitHubNotFoundError("gone", 404)

        with pytest.raises(GitHubNotFoundError):
            await decoder.decode(5, f"{RAW_BASE}/5/gentx.json")

    def test_codec_is_replaceable(self, mock_client: Mock) -> None:
        codec = Mock(wraps=AminoJSONCodec())
        decoder = SubmissionDecoder(mock_client, codec)

        outcome = decoder.decode_bytes(1, gentx_bytes(create_validator_msg()))

        assert isinstance(outcome, AcceptedSubmission)
        codec.decode.assert_called_once()
        codec.validate.assert_called_once()
        codec.encode.assert_called_once()
        codec.decode_message.assert_called_once()
