from .data_models import (
    SchoolClass,
    Subject,
    Staff,
    TimeSlot,
    TimetableEntry,
    TimetableConstraints,
    SchedulingResult,
    GeneratedTimetable,
    ClassTimetable,
    StaffTimetable,
    GenerationResult,
    VerificationResult
)

__all__ = [
    "SchoolClass",
    "Subject",
    "Staff",
    "TimeSlot",
    "TimetableEntry",
    "TimetableConstraints",
    "SchedulingResult",
    "GeneratedTimetable",
    "ClassTimetable",
    "StaffTimetable",
    "GenerationResult",
    "VerificationResult"
]
