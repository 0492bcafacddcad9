"""
Timetable Verifier - Re-checks a generated timetable against the scheduling rules.
"""
from collections import defaultdict

from ..models.data_models import GeneratedTimetable, TimetableEntry, VerificationResult
from ..utils.logging import get_logger

log = get_logger(__name__)


class TimetableVerifier:
    """
    Validates a generated timetable and produces feedback.
    Hard conflicts make it invalid; incomplete coverage only lowers the score,
    since the scheduler is best-effort.
    """

    def verify(self, timetable: GeneratedTimetable) -> VerificationResult:
        """Verify a timetable against all rules. Returns score, conflicts and feedback."""
        conflicts = []

        # Hard rules
        conflicts.extend(self._check_class_conflicts(timetable))
        conflicts.extend(self._check_staff_conflicts(timetable))
        conflicts.extend(self._check_qualifications(timetable))
        conflicts.extend(self._check_time_bounds(timetable))
        conflicts.extend(self._check_consecutive_subjects(timetable))
        conflicts.extend(self._check_excess_periods(timetable))

        # Soft rules
        soft_issues = self._check_coverage(timetable)

        hard_conflict_count = len([c for c in conflicts if c["severity"] == "hard"])

        required = self._required_periods(timetable)
        total_required = sum(required.values())
        scheduled = sum(
            min(count, required.get(key, 0))
            for key, count in self._scheduled_periods(timetable).items()
        )
        coverage = scheduled / total_required if total_required > 0 else 1.0

        score = coverage - hard_conflict_count * 0.1
        score = max(0.0, min(1.0, score))

        result = VerificationResult(
            timetable_id=timetable.id,
            is_valid=hard_conflict_count == 0,
            score=round(score, 3),
            coverage=round(coverage, 3),
            conflicts=conflicts + soft_issues,
            feedback=self._generate_feedback(conflicts, soft_issues, coverage),
            suggestions=self._generate_suggestions(conflicts, soft_issues)
        )

        log.info(
            "timetable_verified",
            timetable_id=timetable.id,
            valid=result.is_valid,
            score=result.score,
            hard_conflicts=hard_conflict_count,
            soft_issues=len(soft_issues),
        )
        return result

    @staticmethod
    def _required_periods(timetable: GeneratedTimetable) -> dict[tuple[str, str], int]:
        enforce = timetable.constraints.enforce_assigned_classes
        return {
            (school_class.id, subject.id): subject.periods_per_week
            for school_class in timetable.classes
            for subject in timetable.subjects
            if not enforce or subject.applies_to(school_class.id)
        }

    @staticmethod
    def _scheduled_periods(timetable: GeneratedTimetable) -> dict[tuple[str, str], int]:
        scheduled: dict[tuple[str, str], int] = defaultdict(int)
        for entry in timetable.entries:
            scheduled[(entry.class_id, entry.subject_id)] += 1
        return scheduled

    @staticmethod
    def _describe(entry: TimetableEntry) -> str:
        return f"{entry.class_id}-{entry.subject_id}-{entry.staff_id}"

    def _check_class_conflicts(self, timetable: GeneratedTimetable) -> list[dict]:
        """Check if any class has two entries in the same slot."""
        conflicts = []

        slot_entries = defaultdict(list)
        for entry in timetable.entries:
            slot_entries[(entry.class_id, entry.time_slot.day, entry.time_slot.period)].append(entry)

        for (class_id, day, period), entries in slot_entries.items():
            if len(entries) > 1:
                conflicts.append({
                    "type": "class_conflict",
                    "severity": "hard",
                    "description": f"Class {class_id} has {len(entries)} periods on day {day + 1} period {period + 1}",
                    "entries": [self._describe(e) for e in entries]
                })

        return conflicts

    def _check_staff_conflicts(self, timetable: GeneratedTimetable) -> list[dict]:
        """Check if any staff member is double-booked."""
        conflicts = []

        slot_entries = defaultdict(list)
        for entry in timetable.entries:
            slot_entries[(entry.staff_id, entry.time_slot.day, entry.time_slot.period)].append(entry)

        for (staff_id, day, period), entries in slot_entries.items():
            if len(entries) > 1:
                conflicts.append({
                    "type": "staff_conflict",
                    "severity": "hard",
                    "description": f"{staff_id} is scheduled for {len(entries)} classes on day {day + 1} period {period + 1}",
                    "entries": [self._describe(e) for e in entries]
                })

        return conflicts

    def _check_qualifications(self, timetable: GeneratedTimetable) -> list[dict]:
        conflicts = []
        staff_by_id = {member.id: member for member in timetable.staff}

        for entry in timetable.entries:
            member = staff_by_id.get(entry.staff_id)
            if member is None or not member.can_teach(entry.subject_id):
                conflicts.append({
                    "type": "unqualified_staff",
                    "severity": "hard",
                    "description": f"{entry.staff_id} is not qualified to teach {entry.subject_id}",
                    "entries": [self._describe(entry)]
                })

        return conflicts

    def _check_time_bounds(self, timetable: GeneratedTimetable) -> list[dict]:
        conflicts = []

        for entry in timetable.entries:
            if not timetable.constraints.contains(entry.time_slot):
                conflicts.append({
                    "type": "invalid_slot",
                    "severity": "hard",
                    "description": f"{entry.class_id}-{entry.subject_id} scheduled outside the week at {entry.time_slot.display}",
                    "entries": [self._describe(entry)]
                })

        return conflicts

    def _check_consecutive_subjects(self, timetable: GeneratedTimetable) -> list[dict]:
        """Check the no-consecutive-subjects rule, when enabled."""
        if not timetable.constraints.no_consecutive_subjects:
            return []

        conflicts = []
        by_slot = {
            (e.class_id, e.time_slot.day, e.time_slot.period): e
            for e in timetable.entries
        }

        for (class_id, day, period), entry in by_slot.items():
            following = by_slot.get((class_id, day, period + 1))
            if following is not None and following.subject_id == entry.subject_id:
                conflicts.append({
                    "type": "consecutive_subject",
                    "severity": "hard",
                    "description": f"Class {class_id} has {entry.subject_id} in periods {period + 1} and {period + 2} on day {day + 1}",
                    "entries": [self._describe(entry), self._describe(following)]
                })

        return conflicts

    def _check_excess_periods(self, timetable: GeneratedTimetable) -> list[dict]:
        conflicts = []
        periods_per_week = {subject.id: subject.periods_per_week for subject in timetable.subjects}

        for (class_id, subject_id), count in self._scheduled_periods(timetable).items():
            allowed = periods_per_week.get(subject_id, 0)
            if count > allowed:
                conflicts.append({
                    "type": "excess_periods",
                    "severity": "hard",
                    "description": f"Class {class_id} has {count} periods of {subject_id}, more than the {allowed} required",
                    "entries": []
                })

        return conflicts

    def _check_coverage(self, timetable: GeneratedTimetable) -> list[dict]:
        """Check which classes did not receive all their periods."""
        issues = []
        scheduled = self._scheduled_periods(timetable)

        for (class_id, subject_id), needed in self._required_periods(timetable).items():
            missing = needed - scheduled.get((class_id, subject_id), 0)
            if missing > 0:
                issues.append({
                    "type": "incomplete_coverage",
                    "severity": "soft",
                    "description": f"Class {class_id} is missing {missing} period(s) of {subject_id}",
                    "entries": []
                })

        return issues

    def _generate_feedback(self, conflicts: list[dict], soft_issues: list[dict], coverage: float) -> str:
        """Generate human-readable feedback."""
        feedback = []

        if not conflicts and not soft_issues:
            feedback.append("Timetable is valid and every class received all its periods.")
        else:
            if conflicts:
                feedback.append(f"Found {len(conflicts)} hard rule violations:")
                for c in conflicts[:5]:
                    feedback.append(f"  - {c['description']}")
                if len(conflicts) > 5:
                    feedback.append(f"  ... and {len(conflicts) - 5} more")

            if soft_issues:
                feedback.append(f"Coverage is {coverage * 100:.1f}% of required periods:")
                for s in soft_issues[:3]:
                    feedback.append(f"  - {s['description']}")

        return "\n".join(feedback)

    def _generate_suggestions(self, conflicts: list[dict], soft_issues: list[dict]) -> list[str]:
        """Generate actionable suggestions."""
        suggestions = []

        conflict_types = set(c["type"] for c in conflicts)

        if "staff_conflict" in conflict_types or "class_conflict" in conflict_types:
            suggestions.append("Regenerate the timetable; stored entries are double-booked")

        if "unqualified_staff" in conflict_types:
            suggestions.append("Check staff qualifications against the subjects they were given")

        if soft_issues:
            suggestions.append("Add qualified staff, reduce periods per week or add periods per day")

        return suggestions
