from __future__ import annotations

_PT_BR_SEPARATORS = str.maketrans({",": ".", ".": ","})


def format_currency(value: float) -> str:
    """Brazilian real with pt-BR separators, e.g. ``R$ 1.234,56``."""
    amount = round(value, 2)
    sign = "-" if amount < 0 else ""
    return f"{sign}R$ {abs(amount):,.2f}".translate(_PT_BR_SEPARATORS)


def format_amount(value: float) -> str:
    """Whole amount with pt-BR thousands separators, e.g. ``55.000``."""
    return f"{round(value):,}".replace(",", ".")


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"
