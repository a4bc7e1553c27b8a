"""
Unit tests for the amino JSON transaction codec.

Why: Submitted files are decoded into a signed envelope, and each message
     must survive a re-encode into the create-validator shape before it is
     counted.

What: Tests AminoJSONCodec decode, validate, encode and decode_message.

How: Feeds gentx documents built by the test fixtures plus malformed bytes.
"""

import json

import pytest

from gentx_audit.transactions.codec import AminoJSONCodec, TransactionCodec
from gentx_audit.transactions.exceptions import (
    MessageValidationError,
    TransactionDecodeError,
)
from gentx_audit.transactions.messages import MsgCreateValidator, MsgDelegate
from tests.fixtures.gentx import (
    create_validator_msg,
    delegate_msg,
    gentx_bytes,
    std_tx,
)


@pytest.fixture
def codec() -> AminoJSONCodec:
    return AminoJSONCodec()


class TestDecode:
    """Test envelope decoding."""

    def test_decode_gentx(self, codec: AminoJSONCodec) -> None:
        tx = codec.decode(gentx_bytes(create_validator_msg(), memo="node@10.0.0.1:26656"))

        assert len(tx.messages) == 1
        assert isinstance(tx.messages[0], MsgCreateValidator)
        assert tx.messages[0].moniker == "Validator A"
        assert tx.memo == "node@10.0.0.1:26656"
        assert tx.fee.gas == 200000
        assert len(tx.signatures) == 1

    def test_decode_preserves_message_order(self, codec: AminoJSONCodec) -> None:
        tx = codec.decode(gentx_bytes(delegate_msg(), create_validator_msg()))

        assert [type(m) for m in tx.messages] == [MsgDelegate, MsgCreateValidator]

    def test_decode_accepts_legacy_envelope_type(self, codec: AminoJSONCodec) -> None:
        document = std_tx([create_validator_msg()])
        document["type"] = "cosmos-sdk/StdTx"

        tx = codec.decode(json.dumps(document).encode())

        assert len(tx.messages) == 1

    def test_decode_empty_message_list(self, codec: AminoJSONCodec) -> None:
        assert codec.decode(gentx_bytes()).messages == []

    @pytest.mark.parametrize(
        "data",
        [
            b"",
            b"not json",
            b"\xff\xfe",
            b"[]",
            b'{"type": "auth/StdTx"}',
            b'{"type": ["auth/StdTx"], "value": {}}',
            b'{"type": "cosmos-sdk/MsgSend", "value": {}}',
            b'{"type": "auth/StdTx", "value": {"msg": {}}}',
        ],
    )
    def test_decode_malformed(self, codec: AminoJSONCodec, data: bytes) -> None:
        with pytest.raises(TransactionDecodeError):
            codec.decode(data)

    def test_decode_unregistered_message_type(self, codec: AminoJSONCodec) -> None:
        """
        Why: An envelope holding a message the codec does not know cannot be
             interpreted at all.
        What: Tests decode with an unknown amino message type.
        How: Wraps a made-up message in a valid envelope.
        """
        data = gentx_bytes({"type": "cosmos-sdk/MsgUnjail", "value": {}})

        with pytest.raises(TransactionDecodeError) as exc_info:
            codec.decode(data)

        assert exc_info.value.details["type"] == "cosmos-sdk/MsgUnjail"

    def test_decode_malformed_message_value(self, codec: AminoJSONCodec) -> None:
        data = gentx_bytes(create_validator_msg(amount="1.5"))

        with pytest.raises(TransactionDecodeError) as exc_info:
            codec.decode(data)

        assert exc_info.value.details["type"] == "cosmos-sdk/MsgCreateValidator"

    def test_custom_registry(self) -> None:
        codec = AminoJSONCodec(message_types=[MsgCreateValidator])

        with pytest.raises(TransactionDecodeError):
            codec.decode(gentx_bytes(delegate_msg()))


class TestValidate:
    def test_valid(self, codec: AminoJSONCodec) -> None:
        (message,) = codec.decode(gentx_bytes(create_validator_msg())).messages

        codec.validate(message)

    def test_invalid(self, codec: AminoJSONCodec) -> None:
        (message,) = codec.decode(gentx_bytes(create_validator_msg(amount=0))).messages

        with pytest.raises(MessageValidationError):
            codec.validate(message)


class TestEncodeRoundTrip:
    """Test canonical encoding and typed re-decoding."""

    def test_encode_is_canonical(self, codec: AminoJSONCodec) -> None:
        (message,) = codec.decode(gentx_bytes(create_validator_msg())).messages

        encoded = codec.encode(message)
        document = json.loads(encoded)

        assert document["type"] == "cosmos-sdk/MsgCreateValidator"
        assert document["value"]["value"] == {"denom": "uatom", "amount": "3000000"}
        assert document["value"]["commission"]["rate"] == "0.100000000000000000"
        assert encoded == json.dumps(document, sort_keys=True, separators=(",", ":")).encode()

    def test_create_validator_round_trip(self, codec: AminoJSONCodec) -> None:
        (message,) = codec.decode(gentx_bytes(create_validator_msg())).messages

        restored = codec.decode_message(codec.encode(message), MsgCreateValidator)

        assert restored == message

    def test_other_message_does_not_normalize(self, codec: AminoJSONCodec) -> None:
        """
        Why: Only create-validator messages describe a genesis allocation.
        What: Tests decode_message with a delegate message.
        How: Re-encodes a MsgDelegate and asks for a MsgCreateValidator.
        """
        (message,) = codec.decode(gentx_bytes(delegate_msg())).messages

        with pytest.raises(TransactionDecodeError):
            codec.decode_message(codec.encode(message), MsgCreateValidator)

    def test_satisfies_protocol(self, codec: AminoJSONCodec) -> None:
        def accepts(codec: TransactionCodec) -> TransactionCodec:
            return codec

        assert accepts(codec) is codec
