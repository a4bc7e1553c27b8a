"""Staking and bank messages and the signed transaction envelope.

The models mirror the amino JSON form used by Cosmos SDK gentx files. Field
shapes (integers, decimals, bech32 strings) are enforced while decoding;
:meth:`Msg.validate_basic` holds the stateless structural checks.
"""

from decimal import Decimal
from typing import Annotated, Any, ClassVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from .addresses import (
    ACCOUNT_PREFIX,
    CONSENSUS_PUBKEY_PREFIX,
    VALIDATOR_PREFIX,
    decode_address,
    decode_bech32,
)
from .coins import Coin, Dec, Int
from .exceptions import MessageValidationError


def _bech32(prefix: str, is_address: bool = True) -> AfterValidator:
    decode = decode_address if is_address else decode_bech32

    def check(value: str) -> str:
        # empty is a valid encoding; validate_basic rejects it where required
        if value:
            decode(value, prefix)
        return value

    return AfterValidator(check)


AccAddress = Annotated[str, _bech32(ACCOUNT_PREFIX)]
ValAddress = Annotated[str, _bech32(VALIDATOR_PREFIX)]
ConsPubKey = Annotated[str, _bech32(CONSENSUS_PUBKEY_PREFIX, is_address=False)]

ZERO = Decimal(0)
ONE = Decimal(1)


class AminoModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Msg(AminoModel):
    """Base for registered message types."""

    amino_type: ClassVar[str]

    def validate_basic(self) -> None:
        """Run stateless checks.

        Raises:
            MessageValidationError: The message is structurally invalid
        """
        raise NotImplementedError


class Description(AminoModel):
    moniker: str = ""
    identity: str = ""
    website: str = ""
    details: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.moniker or self.identity or self.website or self.details)


class CommissionRates(AminoModel):
    """Initial commission parameters of a validator."""

    rate: Dec = ZERO
    max_rate: Dec = ZERO
    max_change_rate: Dec = ZERO

    @property
    def is_empty(self) -> bool:
        return self.rate == ZERO and self.max_rate == ZERO and self.max_change_rate == ZERO

    def check_rates(self) -> None:
        """Check the rates against each other and the [0, 1] bounds."""
        if self.max_rate < ZERO or self.max_rate > ONE:
            raise MessageValidationError(
                "commission max rate must be between 0 and 1", "invalid_commission_rate"
            )
        if self.rate < ZERO:
            raise MessageValidationError(
                "commission rate must be non-negative", "invalid_commission_rate"
            )
        if self.rate > self.max_rate:
            raise MessageValidationError(
                "commission rate cannot exceed the max rate", "invalid_commission_rate"
            )
        if self.max_change_rate < ZERO:
            raise MessageValidationError(
                "commission max change rate must be non-negative",
                "invalid_commission_rate",
            )
        if self.max_change_rate > self.max_rate:
            raise MessageValidationError(
                "commission max change rate cannot exceed the max rate",
                "invalid_commission_rate",
            )


class MsgCreateValidator(Msg):
    """Registers a validator with a self-delegation."""

    amino_type: ClassVar[str] = "cosmos-sdk/MsgCreateValidator"

    description: Description = Field(default_factory=Description)
    commission: CommissionRates = Field(default_factory=CommissionRates)
    min_self_delegation: Int = 0
    delegator_address: AccAddress = ""
    validator_address: ValAddress = ""
    pubkey: ConsPubKey = ""
    value: Coin = Field(default_factory=lambda: Coin(denom="", amount=0))

    @property
    def moniker(self) -> str:
        return self.description.moniker

    def validate_basic(self) -> None:
        if not self.delegator_address:
            raise MessageValidationError(
                "delegator address is empty", "nil_delegator_address"
            )
        if not self.validator_address:
            raise MessageValidationError(
                "validator address is empty", "nil_validator_address"
            )
        if decode_address(self.validator_address, VALIDATOR_PREFIX) != decode_address(
            self.delegator_address, ACCOUNT_PREFIX
        ):
            raise MessageValidationError(
                "validator address does not match the delegator address",
                "bad_validator_address",
            )
        if not self.value.is_positive:
            raise MessageValidationError(
                f"self delegation amount must be positive, got {self.value}",
                "bad_delegation_amount",
            )
        if not self.value.has_valid_denom:
            raise MessageValidationError(
                f"invalid self delegation denomination: {self.value.denom!r}",
                "invalid_coins",
            )
        if self.description.is_empty:
            raise MessageValidationError("description is empty", "empty_description")
        if not self.pubkey:
            raise MessageValidationError("public key is empty", "empty_pubkey")
        if self.commission.is_empty:
            raise MessageValidationError("commission is empty", "empty_commission")
        self.commission.check_rates()
        if self.min_self_delegation <= 0:
            raise MessageValidationError(
                "minimum self delegation must be positive",
                "invalid_min_self_delegation",
            )
        if self.value.amount < self.min_self_delegation:
            raise MessageValidationError(
                "self delegation is below the minimum self delegation",
                "self_delegation_below_minimum",
            )


class MsgDelegate(Msg):
    amino_type: ClassVar[str] = "cosmos-sdk/MsgDelegate"

    delegator_address: AccAddress = ""
    validator_address: ValAddress = ""
    amount: Coin = Field(default_factory=lambda: Coin(denom="", amount=0))

    def validate_basic(self) -> None:
        if not self.delegator_address:
            raise MessageValidationError(
                "delegator address is empty", "nil_delegator_address"
            )
        if not self.validator_address:
            raise MessageValidationError(
                "validator address is empty", "nil_validator_address"
            )
        if not self.amount.is_positive:
            raise MessageValidationError(
                "delegation amount must be positive", "bad_delegation_amount"
            )
        if not self.amount.has_valid_denom:
            raise MessageValidationError(
                f"invalid delegation denomination: {self.amount.denom!r}",
                "invalid_coins",
            )


class MsgSend(Msg):
    amino_type: ClassVar[str] = "cosmos-sdk/MsgSend"

    from_address: AccAddress = ""
    to_address: AccAddress = ""
    amount: list[Coin] = Field(default_factory=list)

    def validate_basic(self) -> None:
        if not self.from_address:
            raise MessageValidationError("sender address is empty", "invalid_address")
        if not self.to_address:
            raise MessageValidationError("recipient address is empty", "invalid_address")
        if not self.amount or not all(
            coin.is_positive and coin.has_valid_denom for coin in self.amount
        ):
            raise MessageValidationError("send amount must be positive", "invalid_coins")


class PubKey(AminoModel):
    type: str = ""
    value: str = ""


class StdSignature(AminoModel):
    pub_key: PubKey | None = None
    signature: str = ""


class StdFee(AminoModel):
    amount: list[Coin] | None = None
    gas: Int = 0


class StdTx(AminoModel):
    """Signed transaction envelope."""

    messages: list[Msg] = Field(default_factory=list, alias="msg")
    fee: StdFee = Field(default_factory=StdFee)
    signatures: list[StdSignature] = Field(default_factory=list)
    memo: str = ""

    @field_validator("messages", "signatures", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v
