"""
Errors raised by stock sources. The availability evaluator itself never raises.
"""

from typing import Optional


class StockSourceError(Exception):
    """Backing data for a stock source could not be read or parsed."""


class StockSourceUnavailable(StockSourceError):
    """A remote stock source could not be reached or answered unexpectedly."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
