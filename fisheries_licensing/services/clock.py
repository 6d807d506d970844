# SPDX-License-Identifier: Apache-2.0

"""
Reference-date providers.

Services ask a clock for the reference date so the domain logic never
reads the system clock itself.
"""

from datetime import date, datetime, timedelta, timezone


class SystemClock:
    """Clock backed by the current UTC date."""

    def today(self) -> date:
        return datetime.now(timezone.utc).date()


class FixedClock:
    """Clock pinned to a given date; can be moved forward."""

    def __init__(self, current: date):
        self.current = current

    def today(self) -> date:
        return self.current

    def advance(self, days: int) -> date:
        self.current = self.current + timedelta(days=days)
        return self.current
