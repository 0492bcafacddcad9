"""
Timetable Generator - Runs the scheduler and packages its output.
Merges constraint overrides, snapshots the inputs into a GeneratedTimetable
and derives per-class and per-staff weekly grids.
"""
import uuid
from collections import defaultdict
from datetime import datetime
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from ..models.data_models import (
    SchoolClass, Subject, Staff, TimetableEntry, TimetableConstraints,
    GeneratedTimetable, ClassTimetable, StaffTimetable, GenerationResult
)
from ..utils.logging import get_logger
from .engine import TimetableScheduler

log = get_logger(__name__)

Grid = list[list[Optional[TimetableEntry]]]


class TimetableGenerator:
    """
    Orchestrates one generation run:
    1. Merge constraint overrides over the defaults
    2. Run the scheduler
    3. Snapshot inputs and entries into a GeneratedTimetable
    4. Build class and staff grids
    """

    def __init__(self, scheduler: Optional[TimetableScheduler] = None, seed: Optional[int] = None):
        self.scheduler = scheduler or TimetableScheduler(seed=seed)

    @staticmethod
    def merge_constraints(
        overrides: Optional[TimetableConstraints | dict[str, Any]] = None
    ) -> TimetableConstraints:
        """Overlay overrides on the default constraints. Raises ValidationError on out-of-range values."""
        merged = TimetableConstraints().model_dump()
        if isinstance(overrides, TimetableConstraints):
            merged.update(overrides.model_dump())
        elif overrides:
            merged.update(overrides)
        return TimetableConstraints.model_validate(merged)

    def generate(
        self,
        classes: Sequence[SchoolClass],
        subjects: Sequence[Subject],
        staff: Sequence[Staff],
        name: str,
        constraints: Optional[TimetableConstraints | dict[str, Any]] = None
    ) -> GenerationResult:
        """Generate a timetable. Problems are reported on the result, never raised."""
        try:
            merged = self.merge_constraints(constraints)
        except ValidationError as e:
            errors = [
                f"Invalid constraint {'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            log.warning("constraints_rejected", errors=errors)
            return GenerationResult(success=False, errors=errors)

        result = self.scheduler.schedule(classes, subjects, staff, merged)

        if not result.success:
            return GenerationResult(
                success=False,
                errors=result.errors,
                warnings=result.warnings
            )

        timetable = GeneratedTimetable(
            id=uuid.uuid4().hex,
            name=name,
            classes=[c.model_copy(deep=True) for c in classes],
            subjects=[s.model_copy(deep=True) for s in subjects],
            staff=[s.model_copy(deep=True) for s in staff],
            entries=list(result.entries),
            constraints=merged,
            created_at=datetime.now()
        )

        log.info(
            "timetable_generated",
            timetable_id=timetable.id,
            name=name,
            entries=len(timetable.entries),
            warnings=len(result.warnings),
        )

        return GenerationResult(
            success=True,
            timetable=timetable,
            class_timetables=self.build_class_timetables(timetable),
            staff_timetables=self.build_staff_timetables(timetable),
            errors=result.errors,
            warnings=result.warnings
        )

    @staticmethod
    def _empty_grid(constraints: TimetableConstraints) -> Grid:
        return [[None] * constraints.periods_per_day for _ in range(constraints.working_days)]

    @classmethod
    def _index_entries(cls, timetable: GeneratedTimetable, owner_of) -> dict[str, Grid]:
        """Single pass over the entries, filing each into its owner's grid."""
        grids: dict[str, Grid] = {}
        constraints = timetable.constraints

        for entry in timetable.entries:
            if not constraints.contains(entry.time_slot):
                log.warning("entry_out_of_bounds", timetable_id=timetable.id, slot=entry.time_slot.display)
                continue
            key = owner_of(entry)
            if key not in grids:
                grids[key] = cls._empty_grid(constraints)
            grids[key][entry.time_slot.day][entry.time_slot.period] = entry

        return grids

    @classmethod
    def build_class_timetables(cls, timetable: GeneratedTimetable) -> list[ClassTimetable]:
        """One grid per class in the snapshot, in snapshot order."""
        grids = cls._index_entries(timetable, lambda entry: entry.class_id)
        return [
            ClassTimetable(
                class_id=school_class.id,
                class_name=school_class.label,
                schedule=grids.get(school_class.id) or cls._empty_grid(timetable.constraints)
            )
            for school_class in timetable.classes
        ]

    @classmethod
    def build_staff_timetables(cls, timetable: GeneratedTimetable) -> list[StaffTimetable]:
        """One grid per staff member in the snapshot, in snapshot order."""
        grids = cls._index_entries(timetable, lambda entry: entry.staff_id)
        return [
            StaffTimetable(
                staff_id=member.id,
                staff_name=member.name,
                schedule=grids.get(member.id) or cls._empty_grid(timetable.constraints)
            )
            for member in timetable.staff
        ]

    @staticmethod
    def get_timetable_stats(timetable: GeneratedTimetable) -> dict:
        """Get statistics about a generated timetable."""
        constraints = timetable.constraints

        required: dict[tuple[str, str], int] = {}
        for school_class in timetable.classes:
            for subject in timetable.subjects:
                if constraints.enforce_assigned_classes and not subject.applies_to(school_class.id):
                    continue
                required[(school_class.id, subject.id)] = subject.periods_per_week

        scheduled_per_unit: dict[tuple[str, str], int] = defaultdict(int)
        subject_distribution: dict[str, int] = defaultdict(int)
        staff_workload: dict[str, int] = {member.id: 0 for member in timetable.staff}
        for entry in timetable.entries:
            scheduled_per_unit[(entry.class_id, entry.subject_id)] += 1
            subject_distribution[entry.subject_id] += 1
            staff_workload[entry.staff_id] = staff_workload.get(entry.staff_id, 0) + 1

        total_required = sum(required.values())
        scheduled = len(timetable.entries)
        total_slots = len(timetable.classes) * constraints.total_slots

        fully_scheduled = sum(
            1 for key, needed in required.items()
            if scheduled_per_unit[key] >= needed
        )

        return {
            "total_required_periods": total_required,
            "total_scheduled_periods": scheduled,
            "coverage_percentage": round(scheduled / total_required * 100, 2) if total_required > 0 else 0,
            "utilization_percentage": round(scheduled / total_slots * 100, 2) if total_slots > 0 else 0,
            "fully_scheduled_units": fully_scheduled,
            "partially_scheduled_units": len(required) - fully_scheduled,
            "subject_distribution": dict(subject_distribution),
            "staff_workload": staff_workload
        }
