from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Money columns are Decimal(18, 2): at most 16 digits before the point
MAX_INTEGER_DIGITS = 16


def to_decimal(value, field="amount"):
    """Parse user input (str/int/float/Decimal) into a Decimal."""
    if value is None or value == "":
        raise ValidationError(f"{field} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, float):
        # go through str() so 19.99 stays 19.99 and not its binary expansion
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not result.is_finite():
        raise ValidationError(f"{field} must be a number")
    # "1e30" parses fine but can't be stored or rounded to cents
    if result and result.adjusted() >= MAX_INTEGER_DIGITS:
        raise ValidationError(f"{field} is too large")
    return result


def round2(value):
    """Round half-up to whole cents."""
    try:
        return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError("Amount is too large")


def format_money(value):
    """Render a money value with exactly two fractional digits."""
    if value is None:
        return None
    return str(round2(value))
