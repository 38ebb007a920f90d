"""Money conversion between backend decimal strings and UCP minor units.

Backend records carry amounts as decimal strings ("25.00") alongside a
currency code. UCP wire payloads carry integer minor units (2500).
"""
from __future__ import annotations

import logging
from decimal import Decimal, DecimalException, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Dict, Union

from .models.common import UCPMoney

logger = logging.getLogger(__name__)


DEFAULT_DECIMAL_PLACES = 2

# ISO-4217 currencies whose minor unit is not 1/100
CURRENCY_DECIMALS: Dict[str, int] = {
    "BHD": 3,  # Bahraini dinar
    "BIF": 0,  # Burundian franc
    "CLF": 4,  # Chilean UF
    "CLP": 0,  # Chilean peso
    "DJF": 0,  # Djiboutian franc
    "GNF": 0,  # Guinean franc
    "IQD": 3,  # Iraqi dinar
    "ISK": 0,  # Icelandic krona
    "JOD": 3,  # Jordanian dinar
    "JPY": 0,  # Japanese yen
    "KMF": 0,  # Comorian franc
    "KRW": 0,  # South Korean won
    "KWD": 3,  # Kuwaiti dinar
    "LYD": 3,  # Libyan dinar
    "OMR": 3,  # Omani rial
    "PYG": 0,  # Paraguayan guarani
    "RWF": 0,  # Rwandan franc
    "TND": 3,  # Tunisian dinar
    "UGX": 0,  # Ugandan shilling
    "VND": 0,  # Vietnamese dong
    "VUV": 0,  # Vanuatu vatu
    "XAF": 0,  # Central African CFA franc
    "XOF": 0,  # West African CFA franc
    "XPF": 0,  # CFP franc
}

Amount = Union[str, int, float, Decimal]


def currency_decimals(currency_code: str) -> int:
    """Number of fractional digits in the currency's minor unit."""
    return CURRENCY_DECIMALS.get((currency_code or "").upper(), DEFAULT_DECIMAL_PLACES)


def _parse_amount(amount: Amount) -> Decimal | None:
    if isinstance(amount, bool):
        return None
    if isinstance(amount, float):
        amount = repr(amount)
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def to_minor_units(amount: Amount, currency_code: str) -> int:
    """
    Convert a decimal amount to integer minor units.

    "25.00" USD -> 2500, "25" JPY -> 25. Rounds half away from zero.
    A non-numeric amount converts to 0 instead of raising.
    """
    value = _parse_amount(amount)
    if value is None:
        logger.debug(f"Non-numeric amount {amount!r} ({currency_code}) converted to 0")
        return 0

    decimals = currency_decimals(currency_code)
    with localcontext() as ctx:
        # enough digits for the integral result of any finite amount
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        try:
            scaled = value.scaleb(decimals)
            return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        except DecimalException:
            logger.warning(f"Amount {amount!r} ({currency_code}) out of range, converted to 0")
            return 0


def from_minor_units(units: int, currency_code: str) -> str:
    """
    Convert integer minor units to a fixed-point decimal string.

    2500 USD -> "25.00", 25 JPY -> "25", 1234 BHD -> "1.234".
    """
    decimals = currency_decimals(currency_code)
    value = Decimal(int(units))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        value = value.scaleb(-decimals)
    return f"{value:.{decimals}f}"


def money_to_ucp(money: UCPMoney) -> int:
    """Wire amount (minor units) for an internal money value."""
    return to_minor_units(money.amount, money.currency_code)


def money_from_ucp(units: int, currency_code: str) -> UCPMoney:
    """Internal money value for a wire amount (minor units)."""
    return UCPMoney(amount=from_minor_units(units, currency_code), currency_code=currency_code)


__all__ = [
    "DEFAULT_DECIMAL_PLACES",
    "CURRENCY_DECIMALS",
    "currency_decimals",
    "to_minor_units",
    "from_minor_units",
    "money_to_ucp",
    "money_from_ucp",
]
