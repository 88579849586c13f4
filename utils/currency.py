import math


def format_currency(amount: float, symbol: str = "$") -> str:
    """Format a float as currency string, e.g. '$1,234.56'."""
    if amount < 0:
        return f"-{symbol}{abs(amount):,.2f}"
    return f"{symbol}{amount:,.2f}"


def format_compact(number: float) -> str:
    """Short axis label: 950 -> '950', 1500 -> '1.5K', 2_300_000 -> '2.3M'."""
    if number < 1000:
        return f"{number:.0f}"
    exp = min(int(math.log(number) / math.log(1000)), 6)
    return f"{number / 1000 ** exp:.1f}{'KMGTPE'[exp - 1]}"
