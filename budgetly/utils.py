"""
utils.py — Money and time helpers shared by services and routes.
Amounts are parsed into Decimal and always rendered with two places.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from budgetly.errors import ValidationError

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")
# Numeric(10, 2) columns
MAX_AMOUNT = Decimal("99999999.99")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_amount(value, field: str = "amount", allow_zero: bool = False) -> Decimal:
    """Parse a user-supplied amount into a 2-place Decimal.

    Raises ValidationError for non-numeric, non-finite, negative, too large
    or (unless allow_zero) zero values.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required", field)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a decimal number", field)
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a decimal number", field)

    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount < 0 or (amount == 0 and not allow_zero):
        qualifier = "non-negative" if allow_zero else "positive"
        raise ValidationError(f"{field} must be {qualifier}", field)
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field} must not exceed {MAX_AMOUNT}", field)
    return amount


def to_decimal(value) -> Decimal:
    """Coerce a stored value (Decimal, str, int, None) into a 2-place Decimal."""
    if value is None:
        return ZERO
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(value) -> str:
    return f"{to_decimal(value):.2f}"


def round_percent(value: Decimal) -> int:
    """Round half up to a whole percent."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
