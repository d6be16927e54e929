"""Stundentafel-Lookup: Soll-Wochenstunden pro (Jahrgang, Fach)."""

from types import MappingProxyType
from typing import Mapping, Optional

from models.subject import Subject


class CurriculumTable:
    """Unveränderliche Stundentafel.

    Parallel unterrichtete Fächergruppen müssen bereits zusammengefasst sein
    (z.B. "Religion" statt KR/ER/PP); die Tabelle prüft das nicht.
    """

    def __init__(self, hours: Mapping[int, Mapping[str, float]]) -> None:
        self._hours = MappingProxyType({
            int(grade): MappingProxyType({name: float(h) for name, h in row.items()})
            for grade, row in hours.items()
        })

    @classmethod
    def default(cls) -> "CurriculumTable":
        """Standard-Stundentafel Realschule NRW."""
        from config.defaults import STUNDENTAFEL_REALSCHULE_NRW
        return cls(STUNDENTAFEL_REALSCHULE_NRW)

    @classmethod
    def from_config(cls, curriculum: Optional[Mapping[int, Mapping[str, float]]]) -> "CurriculumTable":
        """Eigene Stundentafel aus der Config, sonst der Standard."""
        if curriculum is None:
            return cls.default()
        return cls(curriculum)

    @property
    def grades(self) -> list[int]:
        return sorted(self._hours)

    def hours_required(self, grade: int, subject_name: str) -> float:
        """Soll-Stunden; 0 für unbekannte Jahrgänge oder Fächer."""
        row = self._hours.get(grade)
        if row is None:
            return 0.0
        return row.get(subject_name, 0.0)

    def hours_for_subject(self, grade: int, subject: Subject) -> float:
        """Lookup über den kanonischen Namen, ersatzweise über das Kürzel."""
        row = self._hours.get(grade, {})
        if subject.name in row:
            return row[subject.name]
        return row.get(subject.short_name, 0.0)

    def grade_total(self, grade: int, subjects: list[Subject]) -> float:
        """Summe der Soll-Stunden eines Jahrgangs über die gegebenen Fächer."""
        return sum(self.hours_for_subject(grade, s) for s in subjects)

    def row(self, grade: int) -> Mapping[str, float]:
        return self._hours.get(grade, MappingProxyType({}))

    def __repr__(self) -> str:
        return f"CurriculumTable(Jahrgänge {self.grades})"
