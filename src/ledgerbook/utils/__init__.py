"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import parse_date, parse_datetime
from ledgerbook.utils.amount_parser import format_amount, parse_amount

__all__ = ["parse_date", "parse_datetime", "parse_amount", "format_amount"]
