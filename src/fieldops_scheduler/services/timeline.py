"""Slotting helpers shared by the route builder and the optimizer."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Sequence

from fieldops_scheduler.services.domain import RouteSequence


def sort_key(sequence: RouteSequence) -> tuple[datetime, int, str]:
    return (sequence.arrival, sequence.sequence_index, sequence.id)


def stagger(sequences: Iterable[RouteSequence]) -> list[RouteSequence]:
    """Shift colliding stops back to back, keeping the earliest one in place."""

    placed: list[RouteSequence] = []
    for sequence in sorted(sequences, key=sort_key):
        if placed and sequence.arrival < placed[-1].end:
            sequence = sequence.with_arrival(placed[-1].end)
        placed.append(sequence)
    return placed


def first_free_slot(
    candidate: datetime,
    duration: timedelta,
    busy: Sequence[RouteSequence],
    buffer: timedelta,
) -> datetime:
    """Earliest start at or after *candidate* that clears every busy interval."""

    moved = True
    while moved:
        moved = False
        for block in busy:
            if candidate < block.end and block.arrival < candidate + duration + buffer:
                candidate = block.end + buffer
                moved = True
    return candidate


def lay_out(
    fixed: Iterable[RouteSequence],
    flexible: Iterable[RouteSequence],
    *,
    start: datetime,
    buffer: timedelta = timedelta(0),
    honour_nominal: bool = False,
) -> list[RouteSequence]:
    """
    Place *flexible* stops, in the order given, around the *fixed* ones.

    Fixed stops keep their arrival.  Each flexible stop starts at the running
    cursor (or at its planned arrival when *honour_nominal* is set and that is
    later) and is pushed past any fixed or already placed stop it would
    overlap.  The merged result is sorted by arrival.
    """

    busy = sorted(fixed, key=sort_key)
    placed: list[RouteSequence] = []
    cursor = start
    for sequence in flexible:
        candidate = cursor
        if honour_nominal and sequence.planned_arrival is not None:
            candidate = max(candidate, sequence.planned_arrival)
        duration = timedelta(minutes=sequence.duration_minutes)
        arrival = first_free_slot(candidate, duration, busy + placed, buffer)
        moved = sequence.with_arrival(arrival)
        placed.append(moved)
        cursor = moved.end + buffer
    return sorted(busy + placed, key=sort_key)


__all__ = ["first_free_slot", "lay_out", "sort_key", "stagger"]
