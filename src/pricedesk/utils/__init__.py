"""Utility functions for pricedesk."""

from pricedesk.utils.amount_parser import parse_amount
from pricedesk.utils.date_parser import parse_date

__all__ = ["parse_date", "parse_amount"]
