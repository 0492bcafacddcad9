import pandas as pd

from ..models.data_models import GeneratedTimetable, TimetableEntry

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

FREE_PERIOD = "Free"


def grid_to_frame(
    schedule: list[list[TimetableEntry | None]],
    timetable: GeneratedTimetable,
    show: str = "staff"
) -> pd.DataFrame:
    """
    Turns a [day][period] grid into a table with one row per period and one
    column per day. `show` picks what goes next to the subject name: the
    staff member ("staff") for class grids, the class ("class") for staff grids.
    """
    subject_names = {s.id: s.name for s in timetable.subjects}
    staff_names = {s.id: s.name for s in timetable.staff}
    class_labels = {c.id: c.label for c in timetable.classes}
    empty = FREE_PERIOD if timetable.constraints.include_free_periods else ""

    columns = {}
    for day, periods in enumerate(schedule):
        cells = []
        for entry in periods:
            if entry is None:
                cells.append(empty)
                continue
            subject = subject_names.get(entry.subject_id, entry.subject_id)
            if show == "class":
                other = class_labels.get(entry.class_id, entry.class_id)
            else:
                other = staff_names.get(entry.staff_id, entry.staff_id)
            cells.append(f"{subject} ({other})")
        columns[DAY_NAMES[day]] = cells

    frame = pd.DataFrame(columns)
    frame.index = [f"Period {p + 1}" for p in range(len(frame))]
    return frame
