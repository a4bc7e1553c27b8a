"""Decode the changed file of a submission into a validator-creation message.

Steps for one candidate:

1. Fetch the raw file content.
2. Decode it as a signed transaction envelope. A decode failure is fatal:
   a malformed submission is a data-integrity problem for the whole run.
3. Require exactly one enclosed message.
4. Structurally validate that message.
5. Re-encode it and decode the result as :class:`MsgCreateValidator`, so the
   report only depends on that one message type.

Steps 3 to 5 exclude the candidate on failure and never abort the run.
"""

import logging

from ..github.client import GitHubClient
from ..transactions.codec import TransactionCodec
from ..transactions.exceptions import MessageValidationError, TransactionDecodeError
from ..transactions.messages import MsgCreateValidator
from .models import AcceptedSubmission, CandidateOutcome, ExcludedCandidate, SkipReason

logger = logging.getLogger(__name__)


class SubmissionDecoder:
    """Turns a raw-content URL into an accepted submission or an exclusion."""

    def __init__(self, client: GitHubClient, codec: TransactionCodec):
        self.client = client
        self.codec = codec

    async def decode(self, pull_number: int, raw_url: str) -> CandidateOutcome:
        """Fetch and decode the submission behind ``raw_url``.

        Args:
            pull_number: Pull request the file belongs to
            raw_url: Raw-content URL of the single changed file

        Returns:
            AcceptedSubmission or ExcludedCandidate

        Raises:
            GitHubError: The raw content could not be fetched
            TransactionDecodeError: The content is not a transaction envelope
        """
        data = await self.client.get_raw(raw_url)
        return self.decode_bytes(pull_number, data)

    def decode_bytes(self, pull_number: int, data: bytes) -> CandidateOutcome:
        try:
            envelope = self.codec.decode(data)
        except TransactionDecodeError as e:
            logger.error(f"PR #{pull_number}: submission is not a valid transaction: {e}")
            raise

        if len(envelope.messages) != 1:
            logger.info(
                f"PR #{pull_number} excluded: envelope holds "
                f"{len(envelope.messages)} messages"
            )
            return ExcludedCandidate(
                pull_number,
                SkipReason.MESSAGE_COUNT,
                f"{len(envelope.messages)} messages in envelope",
            )

        message = envelope.messages[0]
        try:
            self.codec.validate(message)
        except MessageValidationError as e:
            logger.info(f"PR #{pull_number} excluded: {e.code}: {e}")
            return ExcludedCandidate(pull_number, SkipReason.INVALID_MESSAGE, str(e))

        try:
            normalized = self.codec.decode_message(
                self.codec.encode(message), MsgCreateValidator
            )
        except TransactionDecodeError as e:
            logger.info(f"PR #{pull_number} excluded: {e}")
            return ExcludedCandidate(
                pull_number, SkipReason.NOT_CREATE_VALIDATOR, str(e)
            )

        return AcceptedSubmission(pull_number=pull_number, message=normalized)
