"""Datenmodell für eine bestehende Unterrichtszuweisung (Pydantic v2)."""

from collections import defaultdict
from typing import Literal

from pydantic import BaseModel, Field


class Assignment(BaseModel):
    """Lehrkraft unterrichtet Klasse im Fach mit n Wochenstunden.

    Mehrere Einträge mit gleichem (Klasse, Fach, Halbjahr) stehen für
    Team-Teaching und werden beim Summieren nicht doppelt gezählt.
    """

    id: str
    teacher_id: str
    class_id: str
    subject_id: str
    hours_per_week: float = Field(ge=0)
    semester: Literal["1", "2"] = "1"
    is_optimized: bool = False


def dedup_by_key(assignments: list[Assignment], key) -> list[Assignment]:
    """Reduziert Einträge mit gleichem Schlüssel auf den mit den meisten Stunden.

    Reihenfolge bleibt erhalten (erstes Vorkommen eines Schlüssels).
    """
    best: dict[tuple, Assignment] = {}
    for a in assignments:
        k = key(a)
        current = best.get(k)
        if current is None or a.hours_per_week > current.hours_per_week:
            best[k] = a
    return list(best.values())


def class_subject_key(a: Assignment) -> tuple[str, str, str]:
    return (a.class_id, a.subject_id, a.semester)


def teacher_slot_key(a: Assignment) -> tuple[str, str, str, str]:
    return (a.teacher_id, a.class_id, a.subject_id, a.semester)


def hours_by_class_subject(assignments: list[Assignment]) -> dict[tuple[str, str], float]:
    """(class_id, subject_id) → Wochenstunden, Maximum über die Halbjahre."""
    result: dict[tuple[str, str], float] = defaultdict(float)
    for a in dedup_by_key(assignments, class_subject_key):
        k = (a.class_id, a.subject_id)
        result[k] = max(result[k], a.hours_per_week)
    return dict(result)


def class_total_hours(class_id: str, assignments: list[Assignment]) -> float:
    """Summe aller Stunden einer Klasse (alle Halbjahre, Team-Teaching einmal)."""
    return sum(
        a.hours_per_week
        for a in dedup_by_key(assignments, class_subject_key)
        if a.class_id == class_id
    )


def teacher_total_hours(teacher_id: str, assignments: list[Assignment]) -> float:
    """Summe aller Stunden einer Lehrkraft (alle Halbjahre, Dubletten einmal)."""
    return sum(
        a.hours_per_week
        for a in dedup_by_key(assignments, teacher_slot_key)
        if a.teacher_id == teacher_id
    )
