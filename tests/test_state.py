import pytest

from school_timetable.models import Staff, TimeSlot, TimetableEntry, TimetableConstraints
from school_timetable.scheduler import SchedulingState


@pytest.fixture
def staff():
    return [
        Staff(id="alice", name="Alice", subjects=["math"]),
        Staff(id="bob", name="Bob", subjects=["math", "eng"]),
        Staff(id="carol", name="Carol", subjects=[]),
    ]


@pytest.fixture
def state(staff):
    return SchedulingState(staff, TimetableConstraints(working_days=2, periods_per_day=5))


def entry(class_id, subject_id, staff_id, day, period):
    return TimetableEntry(
        class_id=class_id,
        subject_id=subject_id,
        staff_id=staff_id,
        time_slot=TimeSlot(day=day, period=period)
    )


def test_fresh_state_is_empty(state):
    slot = TimeSlot(day=0, period=0)
    assert state.is_class_slot_free("c1", slot)
    assert state.is_staff_free("alice", slot)
    assert state.subject_count("c1", "math") == 0
    assert state.entries == []


def test_commit_updates_every_structure(state):
    state.commit(entry("c1", "math", "alice", 0, 3))
    slot = TimeSlot(day=0, period=3)

    assert not state.is_class_slot_free("c1", slot)
    assert not state.is_staff_free("alice", slot)
    assert state.subject_count("c1", "math") == 1
    assert state.staff_load("alice") == 1

    # Other classes, staff and slots are unaffected
    assert state.is_class_slot_free("c2", slot)
    assert state.is_staff_free("bob", slot)
    assert state.is_class_slot_free("c1", TimeSlot(day=1, period=3))


def test_commit_rejects_double_booking(state):
    state.commit(entry("c1", "math", "alice", 0, 0))
    with pytest.raises(ValueError):
        state.commit(entry("c1", "eng", "bob", 0, 0))
    with pytest.raises(ValueError):
        state.commit(entry("c2", "math", "alice", 0, 0))
    assert len(state.entries) == 1


def test_adjacency_checks_same_day_neighbours(state):
    state.commit(entry("c1", "math", "alice", 0, 2))

    assert state.violates_adjacency("c1", "math", TimeSlot(day=0, period=1))
    assert state.violates_adjacency("c1", "math", TimeSlot(day=0, period=3))
    assert not state.violates_adjacency("c1", "math", TimeSlot(day=0, period=4))
    assert not state.violates_adjacency("c1", "math", TimeSlot(day=1, period=1))
    assert not state.violates_adjacency("c1", "eng", TimeSlot(day=0, period=1))
    assert not state.violates_adjacency("c2", "math", TimeSlot(day=0, period=1))


def test_adjacency_does_not_cross_days(state):
    state.commit(entry("c1", "math", "alice", 0, 4))
    assert not state.violates_adjacency("c1", "math", TimeSlot(day=1, period=0))

    state.commit(entry("c1", "math", "bob", 1, 0))
    assert state.violates_adjacency("c1", "math", TimeSlot(day=1, period=1))


def test_adjacency_disabled(staff):
    state = SchedulingState(staff, TimetableConstraints(no_consecutive_subjects=False))
    state.commit(entry("c1", "math", "alice", 0, 2))
    assert not state.violates_adjacency("c1", "math", TimeSlot(day=0, period=3))


def test_available_staff_keeps_input_order(state):
    slot = TimeSlot(day=0, period=0)
    assert [s.id for s in state.available_staff_for("math", slot)] == ["alice", "bob"]
    assert [s.id for s in state.available_staff_for("eng", slot)] == ["bob"]
    assert state.available_staff_for("art", slot) == []

    state.commit(entry("c1", "math", "alice", 0, 0))
    assert [s.id for s in state.available_staff_for("math", slot)] == ["bob"]


def test_remaining_periods(state):
    state.commit(entry("c1", "math", "alice", 0, 0))
    state.commit(entry("c1", "math", "alice", 0, 2))
    state.commit(entry("c1", "eng", "bob", 0, 1))

    remaining = state.remaining_periods({("c1", "math"): 3, ("c1", "eng"): 1, ("c2", "math"): 2})
    assert remaining == {("c1", "math"): 1, ("c2", "math"): 2}
