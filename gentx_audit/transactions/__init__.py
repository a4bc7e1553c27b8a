"""Signed transaction decoding and validation for genesis submissions."""

from .codec import AminoJSONCodec, TransactionCodec
from .coins import MAJOR_DENOM, MINOR_DENOM, MINOR_PER_MAJOR, Coin, convert_denomination
from .exceptions import MessageValidationError, TransactionDecodeError, TransactionError
from .messages import (
    CommissionRates,
    Description,
    Msg,
    MsgCreateValidator,
    MsgDelegate,
    MsgSend,
    StdFee,
    StdSignature,
    StdTx,
)

__all__ = [
    "MAJOR_DENOM",
    "MINOR_DENOM",
    "MINOR_PER_MAJOR",
    "AminoJSONCodec",
    "Coin",
    "CommissionRates",
    "Description",
    "MessageValidationError",
    "Msg",
    "MsgCreateValidator",
    "MsgDelegate",
    "MsgSend",
    "StdFee",
    "StdSignature",
    "StdTx",
    "TransactionCodec",
    "TransactionDecodeError",
    "TransactionError",
    "convert_denomination",
]
