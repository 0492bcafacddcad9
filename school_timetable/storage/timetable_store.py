"""
Timetable Store - JSON file persistence for input collections and generated timetables.
Each logical key is one whole-collection file, rewritten on every save.
"""
import json
from pathlib import Path
from typing import Optional, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..errors import StorageError, TimetableNotFoundError
from ..models.data_models import SchoolClass, Subject, Staff, GeneratedTimetable
from ..utils.logging import get_logger

log = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

STORAGE_KEYS = {
    "classes": "classes.json",
    "subjects": "subjects.json",
    "staff": "staff.json",
    "timetables": "timetables.json",
}


class TimetableStore:
    """
    Persistent key-value store backed by a directory of JSON files.
    Keeps:
    - Classes, subjects and staff (the generator's input collections)
    - Generated timetables, keyed by id
    """

    def __init__(self, store_dir: Optional[str | Path] = None):
        self.store_dir = Path(store_dir or "./data/store")
        self.store_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.store_dir / STORAGE_KEYS[key]

    def _load(self, key: str, model: type[ModelT]) -> list[ModelT]:
        """Load a collection from disk; a missing file is an empty collection."""
        path = self._path(key)
        if not path.exists():
            return []

        try:
            with open(path) as f:
                data = json.load(f)
            return TypeAdapter(list[model]).validate_python(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            log.error("store_load_failed", key=key, path=str(path), error=str(e))
            raise StorageError(f"Could not load {key} from {path}: {e}") from e

    def _save(self, key: str, items: list[BaseModel]) -> None:
        path = self._path(key)
        data = [item.model_dump(mode="json") for item in items]

        try:
            with open(path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise StorageError(f"Could not save {key} to {path}: {e}") from e

        log.debug("store_saved", key=key, items=len(items))

    # Classes
    def get_classes(self) -> list[SchoolClass]:
        return self._load("classes", SchoolClass)

    def save_classes(self, classes: list[SchoolClass]) -> None:
        self._save("classes", classes)

    # Subjects
    def get_subjects(self) -> list[Subject]:
        return self._load("subjects", Subject)

    def save_subjects(self, subjects: list[Subject]) -> None:
        self._save("subjects", subjects)

    # Staff
    def get_staff(self) -> list[Staff]:
        return self._load("staff", Staff)

    def save_staff(self, staff: list[Staff]) -> None:
        self._save("staff", staff)

    # Generated timetables
    def get_timetables(self) -> list[GeneratedTimetable]:
        return self._load("timetables", GeneratedTimetable)

    def get_timetable(self, timetable_id: str) -> GeneratedTimetable:
        for timetable in self.get_timetables():
            if timetable.id == timetable_id:
                return timetable
        raise TimetableNotFoundError(timetable_id)

    def save_timetable(self, timetable: GeneratedTimetable) -> None:
        """Save a timetable, replacing any stored record with the same id."""
        existing = [t for t in self.get_timetables() if t.id != timetable.id]
        self._save("timetables", existing + [timetable])
        log.info("timetable_saved", timetable_id=timetable.id, name=timetable.name)

    def delete_timetable(self, timetable_id: str) -> bool:
        """Delete a timetable. Returns False if nothing had that id."""
        existing = self.get_timetables()
        remaining = [t for t in existing if t.id != timetable_id]
        if len(remaining) == len(existing):
            return False
        self._save("timetables", remaining)
        log.info("timetable_deleted", timetable_id=timetable_id)
        return True

    def clear_all(self) -> None:
        """Remove every stored collection."""
        for key in STORAGE_KEYS:
            path = self._path(key)
            if path.exists():
                path.unlink()
