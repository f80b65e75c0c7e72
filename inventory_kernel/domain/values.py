"""
Values -- Currency and Money, the types stock values are reported in.

Responsibility:
    Pair every amount the valuation engine produces with the currency it
    is stated in.  Amounts are Decimal-only; a float never enters a Money.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Depends only on inventory_kernel.domain.currency.

Failure modes:
    - InvalidCurrencyError for an unknown currency code
    - ValueError for a non-numeric amount
    - ValueError when adding Money in different currencies
    - TypeError when dividing by anything but Decimal or int
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from inventory_kernel.domain.currency import CurrencyRegistry

_ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class Currency:
    """ISO 4217 code, normalized to upper case and validated on construction."""

    code: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", CurrencyRegistry.validate(self.code))

    @property
    def decimal_places(self) -> int:
        return CurrencyRegistry.get_decimal_places(self.code)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


def _as_decimal(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid amount: {value}") from e


@dataclass(frozen=True, slots=True)
class Money:
    """
    An amount in a currency.

    Contract:
        ``amount`` is always a Decimal (other numbers are converted through
        ``str``); ``currency`` is always a Currency (a code string is
        accepted and validated).

    Guarantees:
        - Immutable and hashable.
        - Adding two Money values requires the same currency.

    Non-goals:
        - No implicit rounding; ``round()`` is explicit.
        - No formatting or localization.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _as_decimal(self.amount))
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str | Currency) -> Money:
        return cls(amount=_as_decimal(amount), currency=currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        return cls(amount=_ZERO, currency=currency)

    @classmethod
    def total(cls, amounts: Iterable[Money], currency: str | Currency) -> Money:
        """Sum Money values; nothing to sum gives zero in ``currency``."""
        result = cls.zero(currency)
        for amount in amounts:
            result = result + amount
        return result

    @property
    def is_zero(self) -> bool:
        return self.amount == _ZERO

    def round(self, rounding: str = ROUND_HALF_UP) -> Money:
        """Round to the currency's minor unit (two places for USD, none for JPY)."""
        places = self.currency.decimal_places
        exponent = Decimal(1).scaleb(-places)
        return Money(self.amount.quantize(exponent, rounding=rounding), self.currency)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot add Money with different currencies: "
                f"{self.currency} and {other.currency}"
            )
        return Money(self.amount + other.amount, self.currency)

    def __truediv__(self, divisor: Decimal | int) -> Money:
        if isinstance(divisor, bool) or not isinstance(divisor, (int, Decimal)):
            return NotImplemented
        return Money(self.amount / divisor, self.currency)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"
