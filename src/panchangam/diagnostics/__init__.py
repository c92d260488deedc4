"""Diagnostics package.

- leap_months: Adhika masa listing over a range of years, with an optional
  barcode plot (requires the diagnostics extra for matplotlib)
"""

__all__ = ["leap_months"]
