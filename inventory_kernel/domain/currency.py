"""Currency -- ISO 4217 registry and precision-derived rounding."""

from dataclasses import dataclass
from typing import ClassVar

from inventory_kernel.exceptions import InvalidCurrencyError


@dataclass(frozen=True)
class CurrencyInfo:
    """One ISO 4217 currency and its minor-unit precision."""

    code: str
    decimal_places: int
    name: str


# (code, minor-unit digits, name)
_ISO_4217 = (
    ("USD", 2, "US Dollar"),
    ("EUR", 2, "Euro"),
    ("GBP", 2, "Pound Sterling"),
    ("AUD", 2, "Australian Dollar"),
    ("CAD", 2, "Canadian Dollar"),
    ("CHF", 2, "Swiss Franc"),
    ("CNY", 2, "Chinese Yuan"),
    ("HKD", 2, "Hong Kong Dollar"),
    ("INR", 2, "Indian Rupee"),
    ("IDR", 2, "Indonesian Rupiah"),
    ("MYR", 2, "Malaysian Ringgit"),
    ("PHP", 2, "Philippine Peso"),
    ("SGD", 2, "Singapore Dollar"),
    ("THB", 2, "Thai Baht"),
    ("AED", 2, "UAE Dirham"),
    ("JPY", 0, "Japanese Yen"),
    ("KRW", 0, "South Korean Won"),
    ("VND", 0, "Vietnamese Dong"),
    ("BHD", 3, "Bahraini Dinar"),
    ("KWD", 3, "Kuwaiti Dinar"),
    ("OMR", 3, "Omani Rial"),
)


class CurrencyRegistry:
    """Currencies a valuation report may be stated in."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        code: CurrencyInfo(code, places, name) for code, places, name in _ISO_4217
    }

    DEFAULT_DECIMAL_PLACES: ClassVar[int] = 2

    @staticmethod
    def _normalize(code: object) -> str | None:
        if not isinstance(code, str) or not code.strip():
            return None
        return code.strip().upper()

    @classmethod
    def is_valid(cls, code: str) -> bool:
        return cls._normalize(code) in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        normalized = cls._normalize(code)
        return cls._CURRENCIES.get(normalized) if normalized else None

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Minor-unit digits; unknown codes get DEFAULT_DECIMAL_PLACES."""
        info = cls.get_info(code)
        return cls.DEFAULT_DECIMAL_PLACES if info is None else info.decimal_places

    @classmethod
    def validate(cls, code: str) -> str:
        """Return the normalized (stripped, upper-case) code.

        Raises:
            InvalidCurrencyError: If the code is not in the registry.
        """
        normalized = cls._normalize(code)
        if normalized not in cls._CURRENCIES:
            raise InvalidCurrencyError(code)
        return normalized
