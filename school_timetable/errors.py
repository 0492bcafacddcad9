"""Error hierarchy for the timetable engine's collaborators.

Scheduling problems (empty inputs, unstaffed subjects, shortfalls) are never
raised; they come back as errors and warnings on the result objects. These
exceptions cover the infrastructure around the engine: loading input data
and persisting generated timetables.
"""


class TimetableError(Exception):
    """Base exception for all timetable errors."""

    pass


class DataLoadError(TimetableError):
    """Input collections could not be read.

    Examples: missing CSV file, missing required column, malformed number.
    """

    pass


class StorageError(TimetableError):
    """The store could not be read or written."""

    pass


class TimetableNotFoundError(StorageError):
    """No generated timetable exists with the requested id."""

    def __init__(self, timetable_id: str):
        super().__init__(f"No timetable with id {timetable_id}")
        self.timetable_id = timetable_id
