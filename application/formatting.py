from typing import Any
from core.entities import DEFAULT_CURRENCY

# Símbolos como los muestra es-GT
CURRENCY_SYMBOLS = {
    "GTQ": "Q",
    "USD": "US$",
    "EUR": "€",
    "MXN": "MX$",
}


def _amount(n: Any) -> float:
    try:
        return float(n or 0)
    except (TypeError, ValueError):
        return 0.0


def format_price(n: Any, currency: str = DEFAULT_CURRENCY) -> str:
    """Formatea un precio al estilo es-GT: Q1,234.50"""
    code = (currency or DEFAULT_CURRENCY).strip().upper()
    amount = _amount(n)
    if len(code) != 3 or not code.isalpha():
        return f"Q {amount:.2f}"
    sign = "-" if amount < 0 else ""
    number = f"{abs(amount):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{number}"
    return f"{sign}{code} {number}"
