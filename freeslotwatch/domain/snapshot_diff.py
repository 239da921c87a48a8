"""
Detection of free slots that were not present in the previous snapshot.
"""

from typing import Iterable, List, Set, Tuple

from .models import FreeSlot


def diff(current: Iterable[FreeSlot], previous: Iterable[FreeSlot]) -> List[FreeSlot]:
    """
    Return the slots of ``current`` that have no equal counterpart in ``previous``.

    Only additions are reported; slots that disappeared are ignored. Matching
    is exact on the start and end instants. The result is ordered by start
    time and contains each slot once.
    """
    seen: Set[Tuple[str, str]] = {slot.key for slot in previous}
    new_slots: List[FreeSlot] = []

    for slot in sorted(current, key=lambda s: (s.start, s.end)):
        if slot.key in seen:
            continue
        seen.add(slot.key)
        new_slots.append(slot)

    return new_slots
