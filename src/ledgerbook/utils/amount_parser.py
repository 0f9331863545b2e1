"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

CENTS = Decimal("0.01")


def parse_amount(amount_str: str, allow_zero: bool = False) -> Decimal:
    """Parse an amount string into a Decimal rounded to cents.

    Handles "123.45", "$123.45", "₹1,234.56" and "1,234.56". Double-entry
    amounts are always positive; the debit/credit legs carry the direction,
    so signs and parentheses are rejected. Zero is accepted only with
    ``allow_zero`` (opening balances).

    Raises:
        ValueError: If amount string cannot be parsed or is not positive
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"[$€£¥₹,\s]", "", amount_str.strip())
    if cleaned.startswith(("-", "(")):
        raise ValueError(
            f"Amount '{amount_str}' must be positive; "
            "use the debit and credit accounts to express direction"
        )

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite() or amount < 0 or (amount == 0 and not allow_zero):
        raise ValueError(f"Amount '{amount_str}' must be greater than 0")
    return amount.quantize(CENTS)


def format_amount(amount: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{amount:,.2f}"
