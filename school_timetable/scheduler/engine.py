"""
Timetable Scheduler - Greedy randomized placement of weekly periods.
Scarcest-staffed subjects go first; every placement is final (no backtracking),
so shortfalls are reported as warnings instead of failing the run.
"""
import random
from dataclasses import dataclass
from typing import Optional, Sequence

from ..models.data_models import (
    SchoolClass, Subject, Staff, TimeSlot, TimetableEntry,
    TimetableConstraints, SchedulingResult
)
from ..utils.logging import get_logger
from .state import SchedulingState

log = get_logger(__name__)


@dataclass(frozen=True)
class DemandUnit:
    """A class that must receive a number of periods of one subject."""
    class_id: str
    subject_id: str
    periods_needed: int


class TimetableScheduler:
    """
    Best-effort scheduler:
    1. Validates inputs and collects every error
    2. Builds one demand unit per (class, subject) pair
    3. Orders units by how few staff can teach the subject
    4. Places periods into shuffled slots, one period per pass
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.seed = seed
        self.rng = rng or random.Random(seed)

    def schedule(
        self,
        classes: Sequence[SchoolClass],
        subjects: Sequence[Subject],
        staff: Sequence[Staff],
        constraints: Optional[TimetableConstraints] = None
    ) -> SchedulingResult:
        """Run one scheduling pass over the given inputs."""
        constraints = constraints or TimetableConstraints()
        errors: list[str] = []
        warnings: list[str] = []

        log.info(
            "schedule_started",
            classes=len(classes),
            subjects=len(subjects),
            staff=len(staff),
            slots=constraints.total_slots,
            seed=self.seed,
        )

        # Step 1: Validate
        self._validate(classes, subjects, staff, constraints, errors, warnings)
        if errors:
            log.warning("schedule_rejected", errors=errors)
            return SchedulingResult(success=False, entries=[], errors=errors, warnings=warnings)

        # Step 2: Enumerate and order demand
        demand = self._create_demand_units(classes, subjects, constraints)
        qualified_counts = {
            subject.id: sum(1 for member in staff if member.can_teach(subject.id))
            for subject in subjects
        }
        demand.sort(key=lambda unit: qualified_counts[unit.subject_id])

        # Step 3: Place periods
        state = SchedulingState(staff, constraints)
        time_slots = constraints.generate_all_time_slots()
        subject_names = {s.id: s.name for s in subjects}
        class_labels = {c.id: c.label for c in classes}

        for unit in demand:
            placed = self._place_unit(state, unit, time_slots)
            if placed < unit.periods_needed:
                warnings.append(
                    f"Could only schedule {placed}/{unit.periods_needed} periods for "
                    f"{subject_names[unit.subject_id]} in {class_labels[unit.class_id]}"
                )
                log.debug(
                    "demand_unit_short",
                    class_id=unit.class_id,
                    subject_id=unit.subject_id,
                    placed=placed,
                    needed=unit.periods_needed,
                )

        outstanding = state.remaining_periods(
            {(u.class_id, u.subject_id): u.periods_needed for u in demand}
        )
        log.info(
            "schedule_finished",
            entries=len(state.entries),
            demand_units=len(demand),
            short_units=len(outstanding),
            periods_outstanding=sum(outstanding.values()),
        )

        return SchedulingResult(success=True, entries=state.entries, errors=errors, warnings=warnings)

    def _validate(
        self,
        classes: Sequence[SchoolClass],
        subjects: Sequence[Subject],
        staff: Sequence[Staff],
        constraints: TimetableConstraints,
        errors: list[str],
        warnings: list[str]
    ) -> None:
        if not classes:
            errors.append("No classes defined")
        if not subjects:
            errors.append("No subjects defined")
        if not staff:
            errors.append("No staff members defined")

        for subject in subjects:
            if not any(member.can_teach(subject.id) for member in staff):
                errors.append(f"No staff member qualified to teach {subject.name}")

        # Capacity overflow is only a warning; placement still runs
        total_slots = constraints.total_slots
        for cls in classes:
            required = sum(
                subject.periods_per_week for subject in subjects
                if self._subject_applies(subject, cls.id, constraints)
            )
            if required > total_slots:
                warnings.append(
                    f"Class {cls.label} requires {required} periods but only {total_slots} slots available"
                )

    def _create_demand_units(
        self,
        classes: Sequence[SchoolClass],
        subjects: Sequence[Subject],
        constraints: TimetableConstraints
    ) -> list[DemandUnit]:
        units = []
        for cls in classes:
            for subject in subjects:
                if subject.periods_per_week <= 0:
                    continue
                if not self._subject_applies(subject, cls.id, constraints):
                    continue
                units.append(DemandUnit(
                    class_id=cls.id,
                    subject_id=subject.id,
                    periods_needed=subject.periods_per_week
                ))
        return units

    @staticmethod
    def _subject_applies(subject: Subject, class_id: str, constraints: TimetableConstraints) -> bool:
        if not constraints.enforce_assigned_classes:
            return True
        return subject.applies_to(class_id)

    def _place_unit(self, state: SchedulingState, unit: DemandUnit, time_slots: list[TimeSlot]) -> int:
        """Place as many periods of the unit as possible; returns the number placed."""
        placed = 0
        attempts = 0
        max_attempts = len(time_slots) * 2

        while placed < unit.periods_needed and attempts < max_attempts:
            attempts += 1

            shuffled = list(time_slots)
            self.rng.shuffle(shuffled)

            placed_this_pass = False
            for slot in shuffled:
                if self._try_place_at(state, unit, slot):
                    placed += 1
                    placed_this_pass = True
                    break

            # No slot accepted this subject; further passes cannot help
            if not placed_this_pass:
                break

        return placed

    def _try_place_at(self, state: SchedulingState, unit: DemandUnit, slot: TimeSlot) -> bool:
        if not state.is_class_slot_free(unit.class_id, slot):
            return False

        if state.violates_adjacency(unit.class_id, unit.subject_id, slot):
            return False

        candidates = state.available_staff_for(unit.subject_id, slot)
        if not candidates:
            return False

        staff_member = self._select_staff(state, candidates)
        state.commit(TimetableEntry(
            class_id=unit.class_id,
            subject_id=unit.subject_id,
            staff_id=staff_member.id,
            time_slot=slot
        ))
        return True

    @staticmethod
    def _select_staff(state: SchedulingState, candidates: list[Staff]) -> Staff:
        if not state.constraints.balance_staff_load:
            return candidates[0]
        # min() keeps the first candidate on ties, so input order breaks them
        return min(candidates, key=lambda member: state.staff_load(member.id))
