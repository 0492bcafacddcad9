from .timetable_store import TimetableStore

__all__ = ["TimetableStore"]
