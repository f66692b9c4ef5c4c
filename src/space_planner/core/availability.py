from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Set

from ..errors import UnavailableDateError


@dataclass
class AvailabilitySet:
    """Admin-blocked dates and proposer-selected dates, kept disjoint on every mutation."""

    unavailable: Set[str] = field(default_factory=set)
    selected: Set[str] = field(default_factory=set)

    @classmethod
    def from_iterables(cls, unavailable: Iterable[str], selected: Iterable[str]) -> "AvailabilitySet":
        instance = cls(unavailable=set(unavailable))
        # Stored blobs may predate eviction; unavailability wins.
        instance.selected = {day for day in selected if day not in instance.unavailable}
        return instance

    def is_unavailable(self, day: str) -> bool:
        return day in self.unavailable

    def is_selected(self, day: str) -> bool:
        return day in self.selected

    def mark_unavailable(self, day: str) -> None:
        self.unavailable.add(day)
        self.selected.discard(day)

    def mark_available(self, day: str) -> None:
        self.unavailable.discard(day)

    def toggle_unavailable(self, day: str) -> bool:
        """Flip ``day`` and return whether it is now unavailable."""
        if day in self.unavailable:
            self.mark_available(day)
            return False
        self.mark_unavailable(day)
        return True

    def select(self, day: str) -> bool:
        """Toggle the proposer's selection of ``day`` and return whether it is now selected."""
        if day in self.unavailable:
            raise UnavailableDateError([day])
        if day in self.selected:
            self.selected.discard(day)
            return False
        self.selected.add(day)
        return True

    def discard_selected(self, day: str) -> None:
        self.selected.discard(day)

    def clear_all_unavailable(self) -> None:
        self.unavailable.clear()

    def replace_unavailable(self, days: Iterable[str]) -> None:
        self.unavailable = set(days)
        self.selected -= self.unavailable

    def replace_selected(self, days: Iterable[str]) -> None:
        candidates = set(days)
        conflicts = candidates & self.unavailable
        if conflicts:
            raise UnavailableDateError(conflicts)
        self.selected = candidates

    def copy(self) -> "AvailabilitySet":
        return AvailabilitySet(unavailable=set(self.unavailable), selected=set(self.selected))


__all__ = ["AvailabilitySet"]
