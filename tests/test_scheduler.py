import random
from collections import Counter

import pytest

from school_timetable.models import SchoolClass, Subject, Staff, TimetableConstraints
from school_timetable.scheduler import TimetableScheduler


def assert_hard_rules(entries, subjects, staff, constraints):
    class_slots = Counter((e.class_id, e.time_slot.day, e.time_slot.period) for e in entries)
    staff_slots = Counter((e.staff_id, e.time_slot.day, e.time_slot.period) for e in entries)
    assert all(n == 1 for n in class_slots.values())
    assert all(n == 1 for n in staff_slots.values())

    qualified = {member.id: set(member.subjects) for member in staff}
    for e in entries:
        assert e.subject_id in qualified[e.staff_id]
        assert constraints.contains(e.time_slot)

    periods = {s.id: s.periods_per_week for s in subjects}
    for (class_id, subject_id), count in Counter((e.class_id, e.subject_id) for e in entries).items():
        assert count <= periods[subject_id]

    if constraints.no_consecutive_subjects:
        by_slot = {(e.class_id, e.time_slot.day, e.time_slot.period): e.subject_id for e in entries}
        for (class_id, day, period), subject_id in by_slot.items():
            assert by_slot.get((class_id, day, period + 1)) != subject_id


# --- Validation ---

def test_no_staff_fails_without_entries(single_class, math_english):
    result = TimetableScheduler(seed=1).schedule(single_class, math_english, [])

    assert result.success is False
    assert "No staff members defined" in result.errors
    assert result.entries == []


def test_validation_collects_every_error():
    result = TimetableScheduler(seed=1).schedule([], [], [])

    assert result.success is False
    assert result.errors == ["No classes defined", "No subjects defined", "No staff members defined"]


def test_unstaffed_subject_is_an_error(single_class, math_english):
    staff = [Staff(id="alice", name="Alice", subjects=["math"])]
    result = TimetableScheduler(seed=1).schedule(single_class, math_english, staff)

    assert result.success is False
    assert result.errors == ["No staff member qualified to teach English"]
    assert result.entries == []


def test_capacity_overflow_is_only_a_warning(single_class):
    subjects = [Subject(id="math", name="Math", periods_per_week=5)]
    staff = [Staff(id="alice", name="Alice", subjects=["math"])]
    constraints = TimetableConstraints(working_days=1, periods_per_day=3, no_consecutive_subjects=False)

    result = TimetableScheduler(seed=1).schedule(single_class, subjects, staff, constraints)

    assert result.success is True
    assert result.errors == []
    assert "Class 10th A requires 5 periods but only 3 slots available" in result.warnings
    assert len(result.entries) == 3


# --- Scenarios ---

def test_math_english_scenario(single_class, math_english, alice_bob):
    result = TimetableScheduler(seed=42).schedule(single_class, math_english, alice_bob, TimetableConstraints())

    assert result.success is True
    assert len(result.entries) == 3

    math = [e for e in result.entries if e.subject_id == "math"]
    english = [e for e in result.entries if e.subject_id == "eng"]
    assert len(math) == 2 and all(e.staff_id == "alice" for e in math)
    assert len(english) == 1 and english[0].staff_id == "bob"

    first, second = math
    if first.time_slot.day == second.time_slot.day:
        assert abs(first.time_slot.period - second.time_slot.period) > 1
    assert result.warnings == []


def test_partial_success_is_reported(single_class):
    subjects = [Subject(id="math", name="Math", periods_per_week=10)]
    staff = [Staff(id="alice", name="Alice", subjects=["math"])]
    # Two adjacent slots only fit two periods when consecutive periods are allowed
    constraints = TimetableConstraints(working_days=1, periods_per_day=2, no_consecutive_subjects=False)

    result = TimetableScheduler(seed=3).schedule(single_class, subjects, staff, constraints)

    assert result.success is True
    assert len(result.entries) == 2
    assert any(w.startswith("Could only schedule 2/10 periods for Math in 10th A") for w in result.warnings)


def test_adjacency_limits_placements(single_class):
    subjects = [Subject(id="math", name="Math", periods_per_week=3)]
    staff = [Staff(id="alice", name="Alice", subjects=["math"])]
    constraints = TimetableConstraints(working_days=1, periods_per_day=3)

    for seed in range(10):
        result = TimetableScheduler(seed=seed).schedule(single_class, subjects, staff, constraints)
        assert result.success is True
        assert 1 <= len(result.entries) <= 2
        assert_hard_rules(result.entries, subjects, staff, constraints)
        placed = len(result.entries)
        assert f"Could only schedule {placed}/3 periods for Math in 10th A" in result.warnings


def test_shared_staff_starves_later_class():
    classes = [SchoolClass(id="a", name="A"), SchoolClass(id="b", name="B")]
    subjects = [Subject(id="math", name="Math", periods_per_week=7)]
    staff = [Staff(id="alice", name="Alice", subjects=["math"])]
    constraints = TimetableConstraints(working_days=1, periods_per_day=7, no_consecutive_subjects=False)

    result = TimetableScheduler(seed=5).schedule(classes, subjects, staff, constraints)

    assert result.success is True
    assert len(result.entries) == 7
    assert all(e.class_id == "a" for e in result.entries)
    assert "Could only schedule 0/7 periods for Math in B" in result.warnings


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_hard_rules_hold_for_a_school(school, small_week, seed):
    classes, subjects, staff = school
    result = TimetableScheduler(seed=seed).schedule(classes, subjects, staff, small_week)

    assert result.success is True
    assert result.entries
    assert_hard_rules(result.entries, subjects, staff, small_week)


def test_hard_rules_hold_without_adjacency_rule(school):
    classes, subjects, staff = school
    constraints = TimetableConstraints(working_days=3, periods_per_day=5, no_consecutive_subjects=False)

    result = TimetableScheduler(seed=11).schedule(classes, subjects, staff, constraints)

    assert result.success is True
    assert_hard_rules(result.entries, subjects, staff, constraints)


# --- Ordering, selection and randomness ---

def test_scarcest_subject_is_scheduled_first(single_class):
    subjects = [
        Subject(id="eng", name="English", periods_per_week=2),
        Subject(id="math", name="Math", periods_per_week=2),
    ]
    staff = [
        Staff(id="alice", name="Alice", subjects=["eng", "math"]),
        Staff(id="bob", name="Bob", subjects=["eng"]),
    ]

    result = TimetableScheduler(seed=9).schedule(single_class, subjects, staff)

    assert [e.subject_id for e in result.entries] == ["math", "math", "eng", "eng"]


def test_first_available_staff_by_default(single_class):
    subjects = [Subject(id="math", name="Math", periods_per_week=4)]
    staff = [
        Staff(id="alice", name="Alice", subjects=["math"]),
        Staff(id="bob", name="Bob", subjects=["math"]),
    ]

    result = TimetableScheduler(seed=2).schedule(single_class, subjects, staff)

    assert {e.staff_id for e in result.entries} == {"alice"}


def test_balanced_staff_selection(single_class):
    subjects = [Subject(id="math", name="Math", periods_per_week=4)]
    staff = [
        Staff(id="alice", name="Alice", subjects=["math"]),
        Staff(id="bob", name="Bob", subjects=["math"]),
    ]
    constraints = TimetableConstraints(balance_staff_load=True)

    result = TimetableScheduler(seed=2).schedule(single_class, subjects, staff, constraints)

    assert [e.staff_id for e in result.entries] == ["alice", "bob", "alice", "bob"]


def test_assigned_classes_ignored_by_default():
    classes = [SchoolClass(id="a", name="A"), SchoolClass(id="b", name="B")]
    subjects = [Subject(id="lab", name="Lab", periods_per_week=2, assigned_classes=["a"])]
    staff = [Staff(id="alice", name="Alice", subjects=["lab"])]

    result = TimetableScheduler(seed=1).schedule(classes, subjects, staff)

    assert {e.class_id for e in result.entries} == {"a", "b"}


def test_assigned_classes_enforced_when_enabled():
    classes = [SchoolClass(id="a", name="A"), SchoolClass(id="b", name="B")]
    subjects = [
        Subject(id="lab", name="Lab", periods_per_week=2, assigned_classes=["a"]),
        Subject(id="math", name="Math", periods_per_week=1),
    ]
    staff = [Staff(id="alice", name="Alice", subjects=["lab", "math"])]
    constraints = TimetableConstraints(enforce_assigned_classes=True)

    result = TimetableScheduler(seed=1).schedule(classes, subjects, staff, constraints)

    lab_classes = {e.class_id for e in result.entries if e.subject_id == "lab"}
    math_classes = {e.class_id for e in result.entries if e.subject_id == "math"}
    assert lab_classes == {"a"}
    assert math_classes == {"a", "b"}
    assert result.warnings == []


def test_same_seed_gives_same_schedule(school, small_week):
    classes, subjects, staff = school
    first = TimetableScheduler(seed=123).schedule(classes, subjects, staff, small_week)
    second = TimetableScheduler(seed=123).schedule(classes, subjects, staff, small_week)

    assert first.entries == second.entries


def test_injected_rng_is_used(single_class, math_english, alice_bob):
    first = TimetableScheduler(rng=random.Random(8)).schedule(single_class, math_english, alice_bob)
    second = TimetableScheduler(rng=random.Random(8)).schedule(single_class, math_english, alice_bob)

    assert first.entries == second.entries


def test_each_call_starts_from_a_fresh_state(single_class, math_english, alice_bob):
    scheduler = TimetableScheduler(seed=4)
    scheduler.schedule(single_class, math_english, alice_bob)
    result = scheduler.schedule(single_class, math_english, alice_bob)

    assert len(result.entries) == 3
