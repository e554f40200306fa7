"""Clock port: the single source of "today" for time-derived state."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date


class Clock(ABC):

    @abstractmethod
    def today(self) -> date:
        """Return the current calendar date."""
