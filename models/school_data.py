"""SchoolData: Vollständiger Eingabedatensatz für den Optimierer (Pydantic v2)."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from models.assignment import Assignment, class_total_hours
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher


class SchoolData(BaseModel):
    """Vollständiger Datensatz: Lehrkräfte, Klassen, Fächer, Zuweisungen."""

    teachers: list[Teacher]
    classes: list[SchoolClass]
    subjects: list[Subject]
    assignments: list[Assignment] = []
    school_name: str = "Muster-Realschule"
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Lookups ───

    def teacher_map(self) -> dict[str, Teacher]:
        return {t.id: t for t in self.teachers}

    def class_map(self) -> dict[str, SchoolClass]:
        return {c.id: c for c in self.classes}

    def subject_map(self) -> dict[str, Subject]:
        return {s.id: s for s in self.subjects}

    def find_subject(self, key: str) -> Optional[Subject]:
        """Sucht ein Fach über ID, Namen oder Kürzel."""
        for s in self.subjects:
            if key in (s.id, s.name, s.short_name):
                return s
        return None

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        total_max = sum(t.max_hours for t in self.teachers)
        total_assigned = sum(a.hours_per_week for a in self.assignments)
        budgeted = [c for c in self.classes if c.has_hour_budget]
        lines = [
            f"Schule: {self.school_name}",
            f"Klassen: {len(self.classes)} "
            f"({len(set(c.grade for c in self.classes))} Jahrgänge, "
            f"{len(budgeted)} mit Stundenbudget)",
            f"Fächer: {len(self.subjects)}",
            f"Lehrkräfte: {len(self.teachers)}",
            f"Gesamtdeputat: {total_max:g}h/Woche",
            f"Zuweisungen: {len(self.assignments)} ({total_assigned:g}h/Woche)",
        ]
        if budgeted:
            over = [
                c.id for c in budgeted
                if class_total_hours(c.id, self.assignments) > c.target_hours_total
            ]
            if over:
                lines.append(f"Budget überschritten: {', '.join(over)}")
        return "\n".join(lines)

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "SchoolData":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
