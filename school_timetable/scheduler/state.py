"""
Scheduling State - Occupancy bookkeeping for a single scheduler run.
Tracks filled class slots, busy staff slots and per-class subject counts.
"""
from collections import defaultdict
from typing import Iterable

from ..models.data_models import Staff, TimeSlot, TimetableEntry, TimetableConstraints


class SchedulingState:
    """
    Mutable tracking structure for one run. All queries are O(1) except
    available_staff_for, which scans the staff list once.
    """

    def __init__(self, staff: Iterable[Staff], constraints: TimetableConstraints):
        self.staff = list(staff)
        self.constraints = constraints

        # (class_id, day, period) -> entry occupying it
        self._class_slots: dict[tuple[str, int, int], TimetableEntry] = {}
        # (staff_id, day, period) for every busy staff slot
        self._staff_slots: set[tuple[str, int, int]] = set()
        # (class_id, subject_id) -> periods committed
        self._subject_counts: dict[tuple[str, str], int] = defaultdict(int)
        # staff_id -> periods committed
        self._staff_load: dict[str, int] = defaultdict(int)
        self._entries: list[TimetableEntry] = []

    def is_class_slot_free(self, class_id: str, slot: TimeSlot) -> bool:
        return (class_id, slot.day, slot.period) not in self._class_slots

    def is_staff_free(self, staff_id: str, slot: TimeSlot) -> bool:
        return (staff_id, slot.day, slot.period) not in self._staff_slots

    def violates_adjacency(self, class_id: str, subject_id: str, slot: TimeSlot) -> bool:
        """True if the same subject already sits directly before or after this slot on the same day."""
        if not self.constraints.no_consecutive_subjects:
            return False

        neighbours = []
        if slot.period > 0:
            neighbours.append(slot.period - 1)
        if slot.period < self.constraints.periods_per_day - 1:
            neighbours.append(slot.period + 1)

        for period in neighbours:
            entry = self._class_slots.get((class_id, slot.day, period))
            if entry is not None and entry.subject_id == subject_id:
                return True
        return False

    def available_staff_for(self, subject_id: str, slot: TimeSlot) -> list[Staff]:
        """Staff qualified for the subject and free at the slot, in input order."""
        return [
            member for member in self.staff
            if member.can_teach(subject_id) and self.is_staff_free(member.id, slot)
        ]

    def commit(self, entry: TimetableEntry) -> None:
        """Record an entry in every tracking structure."""
        slot = entry.time_slot
        class_key = (entry.class_id, slot.day, slot.period)
        staff_key = (entry.staff_id, slot.day, slot.period)

        if class_key in self._class_slots:
            raise ValueError(f"Class {entry.class_id} is already booked at {slot.display}")
        if staff_key in self._staff_slots:
            raise ValueError(f"Staff {entry.staff_id} is already booked at {slot.display}")

        self._class_slots[class_key] = entry
        self._staff_slots.add(staff_key)
        self._subject_counts[(entry.class_id, entry.subject_id)] += 1
        self._staff_load[entry.staff_id] += 1
        self._entries.append(entry)

    def subject_count(self, class_id: str, subject_id: str) -> int:
        return self._subject_counts.get((class_id, subject_id), 0)

    def staff_load(self, staff_id: str) -> int:
        return self._staff_load.get(staff_id, 0)

    @property
    def entries(self) -> list[TimetableEntry]:
        """Committed entries in commit order."""
        return list(self._entries)

    def remaining_periods(self, demand: dict[tuple[str, str], int]) -> dict[tuple[str, str], int]:
        """
        Periods still missing per (class_id, subject_id), given the required
        count for each pair. Fully satisfied pairs are omitted.
        """
        remaining = {}
        for key, needed in demand.items():
            missing = needed - self.subject_count(*key)
            if missing > 0:
                remaining[key] = missing
        return remaining
