"""Utility functions."""

from .dates import DateRange, create_date_range, days_back, format_date, format_date_range

__all__ = ["DateRange", "create_date_range", "days_back", "format_date", "format_date_range"]
