from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Final


class _Unset:
    """Marker for "argument not given", distinct from an explicit None."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final[Any] = _Unset()


def period_bounds(year: int, month: int | None = None) -> tuple[datetime, datetime]:
    """Return the half-open UTC range [start, end) covering a year or a month."""
    if month is None:
        return (
            datetime(year, 1, 1, tzinfo=timezone.utc),
            datetime(year + 1, 1, 1, tzinfo=timezone.utc),
        )
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end
