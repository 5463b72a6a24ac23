"""Trading arithmetic helpers: asset detection, sizing, P&L and growth.

Every calculation rejects invalid input with TradingCalculationError rather
than returning a silently wrong number.
"""

import math
import re
from enum import Enum

from core.models.signal import SignalKind


class TradingCalculationError(ValueError):
    """Invalid input to a trading calculation."""


class AssetType(str, Enum):
    FOREX = "forex"
    CRYPTO = "crypto"
    STOCK = "stock"


class TradeSide(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


CURRENCIES = frozenset({
    "USD", "EUR", "GBP", "JPY", "AUD", "CAD", "CHF", "CNY", "NZD",
    "SEK", "NOK", "DKK", "PLN", "HUF", "CZK", "RUB", "TRY", "ZAR",
    "SGD", "HKD", "KRW", "INR", "MXN", "BRL", "ARS", "CLP",
})

# Precious metals quote like currencies (gold, silver, platinum, palladium)
METALS = frozenset({"XAU", "XAG", "XPT", "XPD"})

_FOREX_PATTERN = re.compile(r"^[A-Z]{6}$")
_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9_\-]+$")

_CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def get_asset_type(symbol: str) -> AssetType:
    """
    Detect the asset type from a trading symbol.

    - Forex: 6-letter pairs of currencies, or a metal against a currency
      (EURUSD, XAUUSD)
    - Crypto: contains a hyphen (BTC-USD)
    - Stock: everything else
    """
    normalized = symbol.strip().upper()

    if _FOREX_PATTERN.match(normalized):
        base, quote = normalized[:3], normalized[3:]
        if (
            (base in CURRENCIES and quote in CURRENCIES)
            or (base in METALS and quote in CURRENCIES)
            or (base in CURRENCIES and quote in METALS)
        ):
            return AssetType.FOREX

    if "-" in normalized:
        return AssetType.CRYPTO

    return AssetType.STOCK


def calculate_position_size(
    account_balance: float,
    risk_percentage: float,
    entry_price: float,
    stop_loss: float,
) -> int:
    """
    Calculate how many units to buy so a stop-out loses risk_percentage.

    Args:
        account_balance: Account equity
        risk_percentage: Percent of equity to risk, in (0, 100]
        entry_price: Planned entry price (> 0)
        stop_loss: Stop loss price (> 0)

    Returns:
        Whole number of units (rounded down)
    """
    if entry_price <= 0 or stop_loss <= 0:
        raise TradingCalculationError("Entry price and stop loss must be positive")
    if risk_percentage <= 0 or risk_percentage > 100:
        raise TradingCalculationError("Risk percentage must be between 0 and 100")

    risk_per_unit = abs(entry_price - stop_loss)
    if risk_per_unit == 0:
        raise TradingCalculationError("Entry price and stop loss must differ")

    risk_amount = account_balance * (risk_percentage / 100)
    return math.floor(risk_amount / risk_per_unit)


def calculate_profit_loss_percentage(
    entry_price: float,
    exit_price: float,
    side: TradeSide | str = TradeSide.LONG,
) -> float:
    """Profit or loss as a percentage of entry; SHORT inverts the sign."""
    if entry_price <= 0 or exit_price <= 0:
        raise TradingCalculationError("Prices must be positive")

    try:
        side = TradeSide(side)
    except ValueError as e:
        raise TradingCalculationError(f"Unknown trade side: {side!r}") from e

    pct = (exit_price - entry_price) / entry_price * 100
    return -pct if side == TradeSide.SHORT else pct


def calculate_risk_reward_ratio(
    entry_price: float,
    stop_loss: float,
    take_profit: float,
) -> float:
    """Reward distance divided by risk distance."""
    if entry_price <= 0 or stop_loss <= 0 or take_profit <= 0:
        raise TradingCalculationError("All prices must be positive")

    risk = abs(entry_price - stop_loss)
    reward = abs(take_profit - entry_price)

    if risk == 0:
        raise TradingCalculationError("Risk cannot be zero")

    return reward / risk


def calculate_compound_growth_rate(
    initial_value: float,
    final_value: float,
    years: float,
) -> float:
    """Compound annual growth rate as a fraction (0.1 == 10%)."""
    if initial_value <= 0 or final_value <= 0 or years <= 0:
        raise TradingCalculationError("All values must be positive")

    return (final_value / initial_value) ** (1 / years) - 1


def validate_symbol(symbol: str) -> bool:
    """Letters, digits, hyphens and underscores only; empty is invalid."""
    normalized = symbol.strip().upper()
    if not normalized:
        return False
    return bool(_SYMBOL_PATTERN.match(normalized))


def format_currency(amount: float, currency: str = "USD", decimals: int = 2) -> str:
    """
    Format an amount for display, e.g. ``-$1,234.50``.

    Currencies without a known sign are suffixed with their code.
    """
    if decimals < 0:
        raise TradingCalculationError("decimals must be >= 0")

    code = currency.upper()
    number = f"{abs(amount):,.{decimals}f}"
    sign = "-" if amount < 0 else ""

    prefix = _CURRENCY_SYMBOLS.get(code)
    if prefix is None:
        return f"{sign}{number} {code}"
    return f"{sign}{prefix}{number}"


def side_for_signal(kind: SignalKind) -> TradeSide | None:
    """Trade side implied by a classified signal (None for neutral)."""
    if kind == SignalKind.BULLISH:
        return TradeSide.LONG
    if kind == SignalKind.BEARISH:
        return TradeSide.SHORT
    return None
