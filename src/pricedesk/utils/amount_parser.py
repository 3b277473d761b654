"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

# Arabic-Indic and Eastern Arabic-Indic digits
_DIGITS = str.maketrans("٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹", "01234567890123456789")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "1250000"
    - "1,250,000.50"
    - "EGP 1,250,000"
    - "1250000 ج.م" or "1250000 جنيه"
    - "١٬٢٥٠٬٠٠٠٫٥٠" (Arabic-Indic digits and separators)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip().translate(_DIGITS)

    # Arabic thousands and decimal separators
    amount_str = amount_str.replace("٬", ",").replace("٫", ".")

    # Remove currency markers
    amount_str = re.sub(r"(EGP|LE|ج\.م\.?|جنيه|\$|€|£)", "", amount_str, flags=re.IGNORECASE)

    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'") from None

    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number (got '{amount_str}')")
    return amount
