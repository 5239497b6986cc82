from datetime import date, datetime

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

MONTH_ABBREVIATIONS = tuple(name[:3] for name in MONTH_NAMES)

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


def month_number(name: str) -> int | None:
    """1-based month for a full English month name, case-insensitive."""
    lowered = name.strip().lower()
    for index, candidate in enumerate(MONTH_NAMES, start=1):
        if candidate.lower() == lowered:
            return index
    return None


def month_label(year: int, month: int) -> str:
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def trailing_months(now: date | datetime, count: int) -> list[tuple[int, int]]:
    """(year, month) pairs for the ``count`` months ending at ``now``, oldest first."""
    return [shift_month(now.year, now.month, -offset) for offset in range(count - 1, -1, -1)]


def format_date(value: date | datetime) -> str:
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.day}, {value.year}"


def format_currency(amount: float, currency: str = "INR") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
