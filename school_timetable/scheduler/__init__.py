from .state import SchedulingState
from .engine import DemandUnit, TimetableScheduler
from .generator import TimetableGenerator
from .verification import TimetableVerifier

__all__ = [
    "SchedulingState",
    "DemandUnit",
    "TimetableScheduler",
    "TimetableGenerator",
    "TimetableVerifier"
]
