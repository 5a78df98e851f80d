"""Utility functions for zenledger."""

from zenledger.utils.date_parser import parse_date, get_date_range
from zenledger.utils.amount_parser import parse_amount, parse_positive_amount, to_decimal

__all__ = ["parse_date", "get_date_range", "parse_amount", "parse_positive_amount", "to_decimal"]
