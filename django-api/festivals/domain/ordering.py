"""Chronological ordering of sessions.

Sessions are ordered by a string key built from their day and start time,
then by display order for sessions that share a start slot. Every function
here is total over its inputs: missing fields are read as empty strings.
"""

from dataclasses import dataclass
from decimal import Decimal
from itertools import groupby
from typing import Any, Iterable, Protocol, TypeVar

from festivals.domain.value_objects import DisplayOrder


class Slotted(Protocol):
    day: Any
    start_time: Any
    display_order: Any


S = TypeVar("S", bound=Slotted)


def datetime_key(day: str | None, start_time: str | None) -> str:
    """Build a key that string-sorts in chronological order.

    Only sound when every session in the comparison set uses the same day
    representation: weekday names and ISO dates do not interleave correctly.
    The import path stores ISO dates to avoid that case.
    """
    day = day or ""
    start_time = start_time or ""

    if "T" in start_time:
        return start_time
    if day and start_time:
        return f"{day}T{start_time}:00"
    return day


def slot_key(session: Slotted) -> str:
    return datetime_key(session.day, session.start_time)


def sort_sessions(sessions: Iterable[S]) -> list[S]:
    """Return sessions in display order.

    The input position is the last element of the sort key, so sessions with
    equal slot and display order keep their relative input order.
    """
    indexed = list(enumerate(sessions))
    indexed.sort(
        key=lambda pair: (
            slot_key(pair[1]),
            DisplayOrder.coerce(pair[1].display_order),
            pair[0],
        )
    )
    return [session for _, session in indexed]


@dataclass(frozen=True)
class DisplayOrderChange:
    """The display order a normalization pass assigns to one session."""

    session: Any
    slot: str
    old: Decimal | None
    new: int

    @property
    def changed(self) -> bool:
        return self.old is None or self.old != self.new


def normalize_display_orders(sessions: Iterable[S]) -> list[DisplayOrderChange]:
    """Reassign display orders as 0, 1, 2, ... within each start slot.

    Slots are visited chronologically. Inside a slot the existing display
    order is kept as the ranking (unset last, ties in input order), so a
    second pass over the result assigns the same values again.
    """
    changes: list[DisplayOrderChange] = []
    for slot, group in groupby(sort_sessions(sessions), key=slot_key):
        for index, session in enumerate(group):
            old = session.display_order
            changes.append(
                DisplayOrderChange(
                    session=session,
                    slot=slot,
                    old=None if old is None else Decimal(str(old)),
                    new=index,
                )
            )
    return changes
