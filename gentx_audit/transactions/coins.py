"""Coin amounts and minor/major unit conversion.

Amounts are arbitrary-precision integers. On the wire they are decimal
strings (``{"denom": "uatom", "amount": "3000000"}``).
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer

MINOR_DENOM = "uatom"
MAJOR_DENOM = "atom"
MINOR_PER_MAJOR = 1_000_000


def _parse_integer(value: object) -> object:
    if isinstance(value, float):
        raise ValueError("integer amounts must not be encoded as floats")
    if isinstance(value, str):
        value = value.strip()
        digits = value[1:] if value.startswith(("+", "-")) else value
        if not (digits.isascii() and digits.isdigit()):
            raise ValueError(f"invalid integer string: {value!r}")
        return int(value)
    return value


def _reject_float(value: object) -> object:
    if isinstance(value, float):
        raise ValueError("decimal amounts must not be encoded as floats")
    return value


Int = Annotated[
    int,
    BeforeValidator(_parse_integer),
    PlainSerializer(str, return_type=str, when_used="json"),
]
Dec = Annotated[
    Decimal,
    BeforeValidator(_reject_float),
    PlainSerializer(lambda v: f"{v:.18f}", return_type=str, when_used="json"),
]


class Coin(BaseModel):
    """An amount of one denomination."""

    model_config = ConfigDict(frozen=True)

    denom: str
    amount: Int

    @property
    def has_valid_denom(self) -> bool:
        """Denominations are lower-case alphanumeric and start with a letter.

        Checked by message validation rather than on decode, so a gentx with
        an odd denomination is skipped instead of failing the run.
        """
        denom = self.denom
        return bool(
            denom
            and denom.isascii()
            and denom[0].isalpha()
            and denom.isalnum()
            and denom.islower()
        )

    @classmethod
    def zero(cls, denom: str) -> "Coin":
        return cls(denom=denom, amount=0)

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    def __add__(self, other: "Coin") -> "Coin":
        if not isinstance(other, Coin):
            return NotImplemented
        if other.denom != self.denom:
            raise ValueError(
                f"cannot add {other.denom} to {self.denom}: denominations differ"
            )
        return Coin(denom=self.denom, amount=self.amount + other.amount)

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


def convert_denomination(
    coin: Coin,
    scale: int = MINOR_PER_MAJOR,
    target_denom: str = MAJOR_DENOM,
) -> Coin:
    """Convert a minor-unit coin to the major unit.

    The amount is divided by ``scale`` with truncation toward zero, so
    4,999,999 uatom becomes 4 atom.

    Args:
        coin: Amount in the minor unit
        scale: Minor units per major unit
        target_denom: Denomination of the result

    Returns:
        Coin in the major unit
    """
    if scale <= 0:
        raise ValueError("conversion scale must be positive")
    quotient = abs(coin.amount) // scale
    return Coin(denom=target_denom, amount=quotient if coin.amount >= 0 else -quotient)
