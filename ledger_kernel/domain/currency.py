"""Currency -- ISO 4217 registry used by the currency-existence check."""

from dataclasses import dataclass
from typing import ClassVar

from ledger_kernel.exceptions import InvalidCurrencyError


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str


class CurrencyRegistry:
    """Registry of the ISO 4217 currencies the platform operates in."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        info.code: info
        for info in (
            # Reserve and reporting currencies
            CurrencyInfo("USD", 2, "US Dollar"),
            CurrencyInfo("EUR", 2, "Euro"),
            CurrencyInfo("GBP", 2, "Pound Sterling"),
            CurrencyInfo("JPY", 0, "Japanese Yen"),
            CurrencyInfo("CHF", 2, "Swiss Franc"),
            # Africa
            CurrencyInfo("KES", 2, "Kenyan Shilling"),
            CurrencyInfo("UGX", 0, "Ugandan Shilling"),
            CurrencyInfo("TZS", 2, "Tanzanian Shilling"),
            CurrencyInfo("RWF", 0, "Rwandan Franc"),
            CurrencyInfo("BIF", 0, "Burundian Franc"),
            CurrencyInfo("ETB", 2, "Ethiopian Birr"),
            CurrencyInfo("GHS", 2, "Ghanaian Cedi"),
            CurrencyInfo("NGN", 2, "Nigerian Naira"),
            CurrencyInfo("XOF", 0, "West African CFA Franc"),
            CurrencyInfo("XAF", 0, "Central African CFA Franc"),
            CurrencyInfo("ZMW", 2, "Zambian Kwacha"),
            CurrencyInfo("MWK", 2, "Malawian Kwacha"),
            CurrencyInfo("MZN", 2, "Mozambican Metical"),
            CurrencyInfo("ZAR", 2, "South African Rand"),
            CurrencyInfo("EGP", 2, "Egyptian Pound"),
            CurrencyInfo("MAD", 2, "Moroccan Dirham"),
            CurrencyInfo("TND", 3, "Tunisian Dinar"),
            # Asia and Middle East
            CurrencyInfo("INR", 2, "Indian Rupee"),
            CurrencyInfo("BDT", 2, "Bangladeshi Taka"),
            CurrencyInfo("PKR", 2, "Pakistani Rupee"),
            CurrencyInfo("NPR", 2, "Nepalese Rupee"),
            CurrencyInfo("LKR", 2, "Sri Lankan Rupee"),
            CurrencyInfo("PHP", 2, "Philippine Peso"),
            CurrencyInfo("IDR", 2, "Indonesian Rupiah"),
            CurrencyInfo("KHR", 2, "Cambodian Riel"),
            CurrencyInfo("MMK", 2, "Myanmar Kyat"),
            CurrencyInfo("VND", 0, "Vietnamese Dong"),
            CurrencyInfo("MNT", 2, "Mongolian Tugrik"),
            CurrencyInfo("JOD", 3, "Jordanian Dinar"),
            CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
            # Americas
            CurrencyInfo("MXN", 2, "Mexican Peso"),
            CurrencyInfo("GTQ", 2, "Guatemalan Quetzal"),
            CurrencyInfo("HNL", 2, "Honduran Lempira"),
            CurrencyInfo("NIO", 2, "Nicaraguan Cordoba"),
            CurrencyInfo("HTG", 2, "Haitian Gourde"),
            CurrencyInfo("BOB", 2, "Bolivian Boliviano"),
            CurrencyInfo("PEN", 2, "Peruvian Sol"),
            CurrencyInfo("COP", 2, "Colombian Peso"),
            CurrencyInfo("BRL", 2, "Brazilian Real"),
        )
    }

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is known."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def validate(cls, code: str) -> str:
        """Normalize a currency code; raise InvalidCurrencyError if unknown."""
        if not cls.is_valid(code):
            raise InvalidCurrencyError(str(code))
        return code.upper().strip()

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        return frozenset(cls._CURRENCIES)
