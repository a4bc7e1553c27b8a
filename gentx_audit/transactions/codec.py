"""Transaction codec interface and the amino JSON implementation.

The pipeline only depends on :class:`TransactionCodec`; any decoder that
honours the same contract can be supplied instead of :class:`AminoJSONCodec`.
"""

import json
import logging
from collections.abc import Iterable
from typing import Any, Protocol, TypeVar

from pydantic import ValidationError

from .exceptions import TransactionDecodeError
from .messages import Msg, MsgCreateValidator, MsgDelegate, MsgSend, StdTx

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Msg)

STD_TX_TYPES = ("auth/StdTx", "cosmos-sdk/StdTx")
DEFAULT_MESSAGE_TYPES: tuple[type[Msg], ...] = (MsgCreateValidator, MsgDelegate, MsgSend)


class TransactionCodec(Protocol):
    """Decode, validate and re-encode signed transactions."""

    def decode(self, data: bytes) -> StdTx:
        """Decode a signed transaction envelope.

        Raises:
            TransactionDecodeError: The bytes are not a valid envelope
        """
        ...

    def validate(self, message: Msg) -> None:
        """Structurally validate one message.

        Raises:
            MessageValidationError: The message is invalid
        """
        ...

    def encode(self, message: Msg) -> bytes:
        """Encode one message to its canonical representation."""
        ...

    def decode_message(self, data: bytes, message_type: type[M]) -> M:
        """Decode an encoded message as ``message_type``.

        Raises:
            TransactionDecodeError: Wrong type or malformed message
        """
        ...


def _load_json(data: bytes) -> Any:
    try:
        return json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TransactionDecodeError(f"not valid JSON: {e}") from e


def _unwrap(document: Any, accepted: Iterable[str]) -> tuple[str, dict[str, Any]]:
    """Split an amino ``{"type": ..., "value": {...}}`` wrapper."""
    if not isinstance(document, dict):
        raise TransactionDecodeError("expected an amino JSON object")
    type_name = document.get("type")
    value = document.get("value")
    if not isinstance(type_name, str) or type_name not in accepted:
        raise TransactionDecodeError(
            f"unregistered amino type: {type_name!r}", {"type": type_name}
        )
    if not isinstance(value, dict):
        raise TransactionDecodeError(f"missing value object for {type_name}")
    return type_name, value


class AminoJSONCodec:
    """Cosmos SDK amino JSON codec for ``auth/StdTx`` envelopes."""

    def __init__(self, message_types: Iterable[type[Msg]] = DEFAULT_MESSAGE_TYPES):
        self.registry: dict[str, type[Msg]] = {
            message_type.amino_type: message_type for message_type in message_types
        }

    def _decode_registered(self, document: Any) -> Msg:
        type_name, value = _unwrap(document, self.registry)
        try:
            return self.registry[type_name].model_validate(value)
        except ValidationError as e:
            raise TransactionDecodeError(
                f"malformed {type_name}: {e.error_count()} error(s)",
                {"type": type_name, "errors": e.errors(include_url=False)},
            ) from e

    def decode(self, data: bytes) -> StdTx:
        _, value = _unwrap(_load_json(data), STD_TX_TYPES)

        raw_messages = value.get("msg")
        if raw_messages is not None and not isinstance(raw_messages, list):
            raise TransactionDecodeError("envelope msg field must be a list")
        messages = [self._decode_registered(item) for item in raw_messages or []]

        try:
            return StdTx.model_validate({**value, "msg": messages})
        except ValidationError as e:
            raise TransactionDecodeError(
                f"malformed transaction envelope: {e.error_count()} error(s)",
                {"errors": e.errors(include_url=False)},
            ) from e

    def validate(self, message: Msg) -> None:
        message.validate_basic()

    def encode(self, message: Msg) -> bytes:
        document = {
            "type": message.amino_type,
            "value": message.model_dump(mode="json", by_alias=True),
        }
        return json.dumps(document, sort_keys=True, separators=(",", ":")).encode()

    def decode_message(self, data: bytes, message_type: type[M]) -> M:
        message = self._decode_registered(_load_json(data))
        if not isinstance(message, message_type):
            raise TransactionDecodeError(
                f"expected {message_type.amino_type}, got {message.amino_type}"
            )
        return message
