"""Clock backed by the local system date."""

from __future__ import annotations

from datetime import date

from branchstock.domain.clock import Clock


class SystemClock(Clock):

    def today(self) -> date:
        return date.today()
