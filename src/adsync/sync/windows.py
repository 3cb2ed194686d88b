"""
Rolling lookback windows synced for every project.

Each window ends on the reference instant's calendar date and starts
`days` earlier. The reference instant is always passed in so the catalog
stays a pure function of its inputs.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Sequence

DEFAULT_WINDOW_DAYS = (7, 14, 30, 60, 90)


@dataclass(frozen=True)
class Window:
    key: str
    since: date
    until: date

    def time_range(self) -> dict:
        """Wire form of the window: {"since": "YYYY-MM-DD", "until": "YYYY-MM-DD"}."""
        return {"since": self.since.isoformat(), "until": self.until.isoformat()}


def window_key(days: int) -> str:
    return f"last_{days}d"


def build_windows(
    reference: datetime,
    window_days: Sequence[int] = DEFAULT_WINDOW_DAYS,
) -> List[Window]:
    """
    Build the ordered window catalog anchored at `reference`.

    Args:
        reference: The run's start instant. Only its calendar date is used.
        window_days: Lookback lengths in days, in catalog order.

    Returns:
        One Window per entry of window_days, in the same order, all sharing
        the same `until`.

    Raises:
        ValueError: if a day-count is not positive or appears twice.
    """
    if len(set(window_days)) != len(window_days):
        raise ValueError(f"Duplicate window lengths: {list(window_days)}")

    until = reference.date()
    windows = []
    for days in window_days:
        if days <= 0:
            raise ValueError(f"Window length must be positive, got {days}")
        windows.append(
            Window(key=window_key(days), since=until - timedelta(days=days), until=until)
        )
    return windows
