"""Domain type definitions for spendlog.

These NewTypes provide semantic clarity and help with type checking:
- Amount: Expense amount in rupees (major units, may carry decimals)
- CategoryId: Stable key of a category (e.g. "food")
- Year: Calendar year (e.g. 2024)
- MonthIndex: 0-based month index (0 = January, 11 = December)
"""

from typing import Literal, NewType

# Amounts are plain floats; minor-unit precision is not enforced
Amount = NewType("Amount", float)

# Category ids are joined against the category catalog but never validated
CategoryId = NewType("CategoryId", str)

Year = NewType("Year", int)

# Months are 0-based everywhere in the engine
MonthIndex = NewType("MonthIndex", int)

SortKey = Literal["date", "amount", "category"]

SortDirection = Literal["asc", "desc"]
