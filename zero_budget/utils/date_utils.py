"""Date manipulation utilities"""

from datetime import datetime, timezone
from typing import Tuple


def add_months(year: int, month: int, months: int) -> Tuple[int, int]:
    """Move (year, month) by a signed number of calendar months"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def utc_now() -> datetime:
    """Timezone-aware current time in UTC"""
    return datetime.now(timezone.utc)
