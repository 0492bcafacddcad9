"""
Data loader for CSV files.

Expected files in the data directory:
    classes.csv   id, name, section, display_name
    subjects.csv  id, name, periods_per_week, assigned_classes
    staff.csv     id, name, email, subjects

List columns hold comma-separated ids in one (quoted) cell.
"""
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from ..errors import DataLoadError
from ..models.data_models import SchoolClass, Subject, Staff
from .logging import get_logger

log = get_logger(__name__)

REQUIRED_COLUMNS = {
    "classes.csv": ["id", "name"],
    "subjects.csv": ["id", "name", "periods_per_week"],
    "staff.csv": ["id", "name", "subjects"],
}


def _cell(row: pd.Series, column: str) -> str:
    if column not in row.index:
        return ""
    value = row[column]
    if pd.isna(value):
        return ""
    return str(value).strip()


def _split_ids(value: str) -> list[str]:
    value = value.strip('"')
    return [x.strip() for x in value.split(",") if x.strip()]


class DataLoader:
    """Loads and parses CSV data into the generator's input collections."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self._classes: list[SchoolClass] = []
        self._subjects: list[Subject] = []
        self._staff: list[Staff] = []
        self._loaded = False

    def load_all(self) -> None:
        """Load all CSV files and build the collections."""
        self._load_classes()
        self._load_subjects()
        self._load_staff()
        self._loaded = True
        log.info("data_loaded", data_dir=str(self.data_dir), **self.get_stats())

    def _read(self, filename: str) -> pd.DataFrame:
        path = self.data_dir / filename
        if not path.exists():
            raise DataLoadError(f"Missing data file: {path}")

        df = pd.read_csv(path, dtype=str, skipinitialspace=True)
        df.columns = [str(c).strip() for c in df.columns]

        missing = [c for c in REQUIRED_COLUMNS[filename] if c not in df.columns]
        if missing:
            raise DataLoadError(f"{path} is missing column(s): {', '.join(missing)}")
        return df

    def _load_classes(self) -> None:
        """Load classes.csv"""
        df = self._read("classes.csv")
        self._classes = []

        for _, row in df.iterrows():
            class_id = _cell(row, "id")
            if not class_id:
                continue

            self._classes.append(SchoolClass(
                id=class_id,
                name=_cell(row, "name"),
                section=_cell(row, "section"),
                display_name=_cell(row, "display_name") or None
            ))

    def _load_subjects(self) -> None:
        """Load subjects.csv"""
        df = self._read("subjects.csv")
        self._subjects = []

        for _, row in df.iterrows():
            subject_id = _cell(row, "id")
            if not subject_id:
                continue

            assigned = _split_ids(_cell(row, "assigned_classes"))
            try:
                self._subjects.append(Subject(
                    id=subject_id,
                    name=_cell(row, "name"),
                    periods_per_week=int(_cell(row, "periods_per_week")),
                    assigned_classes=assigned or None
                ))
            except (ValueError, ValidationError) as e:
                raise DataLoadError(f"Invalid subject {subject_id}: {e}") from e

    def _load_staff(self) -> None:
        """Load staff.csv"""
        df = self._read("staff.csv")
        self._staff = []

        for _, row in df.iterrows():
            staff_id = _cell(row, "id")
            if not staff_id:
                continue

            self._staff.append(Staff(
                id=staff_id,
                name=_cell(row, "name"),
                email=_cell(row, "email") or None,
                subjects=_split_ids(_cell(row, "subjects"))
            ))

    @property
    def classes(self) -> list[SchoolClass]:
        if not self._loaded:
            self.load_all()
        return self._classes

    @property
    def subjects(self) -> list[Subject]:
        if not self._loaded:
            self.load_all()
        return self._subjects

    @property
    def staff(self) -> list[Staff]:
        if not self._loaded:
            self.load_all()
        return self._staff

    def get_stats(self) -> dict:
        """Get statistics about the loaded data."""
        periods_per_class = sum(s.periods_per_week for s in self._subjects)
        return {
            "total_classes": len(self._classes),
            "total_subjects": len(self._subjects),
            "total_staff": len(self._staff),
            "unqualified_staff": sum(1 for s in self._staff if not s.subjects),
            "periods_per_class": periods_per_class
        }
