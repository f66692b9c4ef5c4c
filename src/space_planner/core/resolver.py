from __future__ import annotations

from typing import AbstractSet, Iterable, List


def resolve_mutual_dates(
    selected: Iterable[str],
    unavailable: AbstractSet[str],
    reference_date: str,
) -> List[str]:
    """Selected days that are still open and not before ``reference_date``, oldest first.

    ``reference_date`` should be computed at call time; a cached cutoff lets past
    days resurface.
    """

    return sorted(day for day in set(selected) if day not in unavailable and day >= reference_date)


__all__ = ["resolve_mutual_dates"]
