"""
Weekly school timetable generation: assigns class periods to subjects and
qualified staff without double-booking anyone.
"""
from .models import (
    SchoolClass,
    Subject,
    Staff,
    TimeSlot,
    TimetableEntry,
    TimetableConstraints,
    GeneratedTimetable,
    GenerationResult
)
from .scheduler import TimetableScheduler, TimetableGenerator, TimetableVerifier

__version__ = "0.1.0"

__all__ = [
    "SchoolClass",
    "Subject",
    "Staff",
    "TimeSlot",
    "TimetableEntry",
    "TimetableConstraints",
    "GeneratedTimetable",
    "GenerationResult",
    "TimetableScheduler",
    "TimetableGenerator",
    "TimetableVerifier"
]
