"""Domain models and types for spendlog.

This package contains the aggregation engine:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from storage and presentation
"""

from spendlog.domain.models import Amount, CategoryId, MonthIndex, SortDirection, SortKey, Year

__all__ = ["Amount", "CategoryId", "MonthIndex", "SortDirection", "SortKey", "Year"]
