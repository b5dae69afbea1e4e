"""Calendar month identifiers used to key ledgers and tag transactions"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Union

from zero_budget.domain.exceptions import InvalidDate
from zero_budget.utils.date_utils import add_months

MIN_YEAR = 1
MAX_YEAR = 9999

_MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class MonthKey:
    """
    Canonical (year, month) identifier for a budgeting period.

    Keys order by year, then month, and render as "YYYY-MM" so the string
    form sorts the same way as the keys themselves.
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not isinstance(self.year, int) or not isinstance(self.month, int):
            raise InvalidDate(f"Year and month must be integers, got {self.year!r}-{self.month!r}")
        if not 1 <= self.month <= 12:
            raise InvalidDate(f"Month must be between 1 and 12, got {self.month}")
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise InvalidDate(f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {self.year}")

    @classmethod
    def of(cls, year: int, month: int) -> "MonthKey":
        return cls(year, month)

    @classmethod
    def parse(cls, text: str) -> "MonthKey":
        """Parse the canonical "YYYY-MM" form"""
        match = _MONTH_KEY_PATTERN.match(text.strip()) if isinstance(text, str) else None
        if match is None:
            raise InvalidDate(f"Expected a month in YYYY-MM form, got {text!r}")
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def from_date(cls, value: date) -> "MonthKey":
        return cls(value.year, value.month)

    def shift(self, months: int) -> "MonthKey":
        """
        Key `months` calendar months away (negative moves backwards).

        Example:
            2025-01 shifted by -1 -> 2024-12
        """
        year, month = add_months(self.year, self.month, months)
        return MonthKey(year, month)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


MonthLike = Union[MonthKey, str]


def shift(key: MonthKey, months: int) -> MonthKey:
    return key.shift(months)


def to_month_key(value: MonthLike) -> MonthKey:
    """Accept either a MonthKey or its "YYYY-MM" text"""
    if isinstance(value, MonthKey):
        return value
    return MonthKey.parse(value)
