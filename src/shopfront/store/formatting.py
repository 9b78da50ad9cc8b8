"""Display helpers shared by records, cart and dashboard."""

import re
from decimal import Decimal, InvalidOperation

LOW_STOCK_THRESHOLD = 10

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[0-9]{9,10}$")


def to_decimal(value, default=None) -> Decimal | None:
    """Coerce a JSON scalar to Decimal, or return ``default``."""
    if value is None or isinstance(value, bool) or value == "":
        return default
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    return result if result.is_finite() else default


def to_int(value, default: int = 0) -> int:
    if value is None or isinstance(value, bool) or value == "":
        return default
    try:
        return int(Decimal(str(value)))
    except (InvalidOperation, ValueError, OverflowError):
        return default


def json_number(value: Decimal | int | float | None):
    """Render a Decimal as an int when whole, else a float, for JSON bodies."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    return value


def format_thb(amount) -> str:
    """Format an amount as Thai baht, at most two decimals: ``฿1,234.5``."""
    value = to_decimal(amount, Decimal("0")).quantize(Decimal("0.01"))
    text = f"{value:,.2f}".rstrip("0").rstrip(".")
    if text.startswith("-"):
        return f"-฿{text[1:]}"
    return f"฿{text}"


def is_low_stock(stock, threshold: int = LOW_STOCK_THRESHOLD) -> bool:
    return (stock or 0) < threshold


def stock_status(stock, threshold: int = LOW_STOCK_THRESHOLD) -> str:
    """One of ``out-of-stock``, ``low-stock`` or ``in-stock``."""
    amount = stock or 0
    if amount <= 0:
        return "out-of-stock"
    if amount < threshold:
        return "low-stock"
    return "in-stock"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def is_valid_phone(phone: str) -> bool:
    """Thai phone numbers: 9 or 10 digits, dashes and spaces ignored."""
    return bool(PHONE_RE.match(re.sub(r"[-\s]", "", phone or "")))
