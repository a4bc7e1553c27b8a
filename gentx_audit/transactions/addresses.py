"""Bech32 account, validator and consensus key strings."""

import bech32

ACCOUNT_PREFIX = "cosmos"
VALIDATOR_PREFIX = "cosmosvaloper"
CONSENSUS_PUBKEY_PREFIX = "cosmosvalconspub"
ADDRESS_LENGTH = 20


def decode_bech32(value: str, prefix: str) -> bytes:
    """Decode a bech32 string and check its human-readable prefix.

    Raises:
        ValueError: Bad checksum, wrong prefix or bad padding
    """
    result = bech32.bech32_decode(value)
    hrp, data = result[0], result[1]
    if hrp is None or data is None:
        raise ValueError(f"invalid bech32 string: {value!r}")
    if hrp != prefix:
        raise ValueError(f"expected prefix {prefix!r}, got {hrp!r}")
    payload = bech32.convertbits(data, 5, 8, False)
    if payload is None:
        raise ValueError(f"invalid bech32 payload: {value!r}")
    return bytes(payload)


def encode_bech32(prefix: str, payload: bytes) -> str:
    data = bech32.convertbits(payload, 8, 5)
    if data is None:
        raise ValueError("cannot convert payload to 5-bit groups")
    return bech32.bech32_encode(prefix, data)


def decode_address(value: str, prefix: str) -> bytes:
    payload = decode_bech32(value, prefix)
    if len(payload) != ADDRESS_LENGTH:
        raise ValueError(
            f"address must be {ADDRESS_LENGTH} bytes, got {len(payload)}"
        )
    return payload
