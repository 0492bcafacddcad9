import pytest
import structlog

from school_timetable.models import SchoolClass, Subject, Staff, TimetableConstraints


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    structlog.reset_defaults()


@pytest.fixture
def single_class():
    return [SchoolClass(id="c10a", name="10th", section="A", display_name="10th A")]


@pytest.fixture
def math_english():
    """Math twice a week, English once."""
    return [
        Subject(id="math", name="Math", periods_per_week=2),
        Subject(id="eng", name="English", periods_per_week=1),
    ]


@pytest.fixture
def alice_bob():
    return [
        Staff(id="alice", name="Alice", subjects=["math"]),
        Staff(id="bob", name="Bob", subjects=["eng"]),
    ]


@pytest.fixture
def school():
    """Three classes, five subjects and staff with overlapping qualifications."""
    classes = [
        SchoolClass(id="c9", name="9th", section="A"),
        SchoolClass(id="c10", name="10th", section="A"),
        SchoolClass(id="c11", name="11th", section="Science", display_name="11th Science"),
    ]
    subjects = [
        Subject(id="math", name="Math", periods_per_week=6),
        Subject(id="eng", name="English", periods_per_week=5),
        Subject(id="sci", name="Science", periods_per_week=5),
        Subject(id="hist", name="History", periods_per_week=3),
        Subject(id="art", name="Art", periods_per_week=2),
    ]
    staff = [
        Staff(id="s1", name="Alice", email="alice@school.test", subjects=["math", "sci"]),
        Staff(id="s2", name="Bob", subjects=["eng", "hist"]),
        Staff(id="s3", name="Carol", subjects=["math"]),
        Staff(id="s4", name="Dan", subjects=["art", "sci", "eng"]),
    ]
    return classes, subjects, staff


@pytest.fixture
def small_week():
    return TimetableConstraints(working_days=5, periods_per_day=6)
