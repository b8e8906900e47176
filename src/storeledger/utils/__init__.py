"""Utility functions for storeledger."""

from storeledger.utils.date_parser import parse_date
from storeledger.utils.amount_parser import parse_amount, format_brl

__all__ = ["parse_date", "parse_amount", "format_brl"]
