"""
Data models for the school timetable scheduling engine.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SchoolClass(BaseModel):
    """A class (grade + section) that receives periods"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    section: str = ""
    display_name: Optional[str] = Field(default=None, description="Label such as '10th A'")

    @property
    def label(self) -> str:
        if self.display_name:
            return self.display_name
        return f"{self.name} {self.section}".strip()


class Subject(BaseModel):
    """A subject taught a fixed number of periods per week"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    periods_per_week: int = Field(ge=1)
    assigned_classes: Optional[list[str]] = Field(
        default=None,
        description="Class ids this subject is restricted to (None means every class)"
    )

    def applies_to(self, class_id: str) -> bool:
        return not self.assigned_classes or class_id in self.assigned_classes


class Staff(BaseModel):
    """A staff member and the subjects they are qualified to teach"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: Optional[str] = None
    subjects: list[str] = Field(default_factory=list, description="Subject ids")

    def can_teach(self, subject_id: str) -> bool:
        return subject_id in self.subjects


class TimeSlot(BaseModel):
    """A (day, period) coordinate in the weekly grid"""
    model_config = ConfigDict(frozen=True)

    day: int = Field(ge=0)
    period: int = Field(ge=0)

    @property
    def display(self) -> str:
        return f"Day {self.day + 1} Period {self.period + 1}"


class TimetableEntry(BaseModel):
    """A single committed period: one class, one subject, one staff member, one slot"""
    model_config = ConfigDict(frozen=True)

    class_id: str
    subject_id: str
    staff_id: str
    time_slot: TimeSlot


class TimetableConstraints(BaseModel):
    """Configuration for one generation run"""
    working_days: int = Field(default=6, ge=1, le=7)
    periods_per_day: int = Field(default=7, ge=1, le=12)
    no_consecutive_subjects: bool = True
    include_free_periods: bool = Field(
        default=True,
        description="Render empty cells as free periods; has no effect on scheduling"
    )
    balance_staff_load: bool = Field(
        default=False,
        description="Pick the least-loaded qualified staff member instead of the first"
    )
    enforce_assigned_classes: bool = Field(
        default=False,
        description="Only schedule a subject into the classes it is assigned to"
    )

    @property
    def total_slots(self) -> int:
        return self.working_days * self.periods_per_day

    def generate_all_time_slots(self) -> list[TimeSlot]:
        """Generate every slot of the week, day by day"""
        slots = []
        for day in range(self.working_days):
            for period in range(self.periods_per_day):
                slots.append(TimeSlot(day=day, period=period))
        return slots

    def contains(self, slot: TimeSlot) -> bool:
        return slot.day < self.working_days and slot.period < self.periods_per_day


class SchedulingResult(BaseModel):
    """Outcome of a single scheduler run"""
    success: bool
    entries: list[TimetableEntry] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class GeneratedTimetable(BaseModel):
    """An immutable snapshot of one generation run"""
    id: str
    name: str
    classes: list[SchoolClass] = Field(default_factory=list)
    subjects: list[Subject] = Field(default_factory=list)
    staff: list[Staff] = Field(default_factory=list)
    entries: list[TimetableEntry] = Field(default_factory=list)
    constraints: TimetableConstraints = Field(default_factory=TimetableConstraints)
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def total_scheduled_periods(self) -> int:
        return len(self.entries)


class ClassTimetable(BaseModel):
    """Weekly grid for one class, indexed [day][period]"""
    class_id: str
    class_name: str
    schedule: list[list[Optional[TimetableEntry]]]


class StaffTimetable(BaseModel):
    """Weekly grid for one staff member, indexed [day][period]"""
    staff_id: str
    staff_name: str
    schedule: list[list[Optional[TimetableEntry]]]


class GenerationResult(BaseModel):
    """Result of the generator: a timetable and its grids, or errors"""
    success: bool
    timetable: Optional[GeneratedTimetable] = None
    class_timetables: list[ClassTimetable] = Field(default_factory=list)
    staff_timetables: list[StaffTimetable] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class VerificationResult(BaseModel):
    """Result of re-checking a generated timetable"""
    timetable_id: str
    is_valid: bool
    score: float = Field(ge=0.0, le=1.0, description="Quality score 0-1")
    coverage: float = Field(default=0.0, ge=0.0)
    conflicts: list[dict] = Field(default_factory=list)
    feedback: str = Field(default="")
    suggestions: list[str] = Field(default_factory=list)
