"""Konfliktanalyse für bestehende und geplante Zuweisungen.

Zwei Einstiegspunkte:
  - analyze_conflicts(): durchsucht den Ist-Stand nach Qualifikations-,
    Auslastungs- und Stundenbudget-Problemen.
  - detect_assignment_conflicts(): prüft eine einzelne vorgeschlagene
    Zuweisung, bevor sie gespeichert wird.
"""

import logging
from typing import Optional

from models.assignment import (
    Assignment, class_total_hours, dedup_by_key, teacher_slot_key, teacher_total_hours,
)
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher
from optimizer.curriculum import CurriculumTable
from optimizer.types import (
    ConflictCheckResult, ConflictKey, ConflictMatrix, RecommendedAssignment,
)

logger = logging.getLogger(__name__)

NEAR_OVERLOAD_RATIO = 0.95
ALMOST_FULL_HOURS = 2.0
UNDERUSED_RATIO = 0.8
MINIMAL_CAPACITY_HOURS = 2.0
TIGHT_BUDGET_HOURS = 1.0


# ─── Ist-Stand-Analyse ────────────────────────────────────────────────────────

def analyze_conflicts(
    teachers: list[Teacher],
    classes: list[SchoolClass],
    subjects: list[Subject],
    assignments: list[Assignment],
    curriculum: Optional[CurriculumTable] = None,
) -> ConflictMatrix:
    """Durchsucht alle bestehenden Zuweisungen und liefert die Befunde.

    Jeder Befund ist über (Entitätsart, ID, Befundart) eindeutig; ein
    wiederholter Lauf erzeugt keine Duplikate.
    """
    curriculum = curriculum or CurriculumTable.default()
    conflicts = ConflictMatrix()

    _check_qualifications(conflicts, teachers, subjects, assignments)
    _check_teacher_workload(conflicts, teachers, assignments)
    _check_class_totals(conflicts, classes, subjects, assignments, curriculum)

    logger.info(f"Konfliktanalyse: {len(conflicts)} Befunde")
    return conflicts


def _check_qualifications(
    conflicts: ConflictMatrix,
    teachers: list[Teacher],
    subjects: list[Subject],
    assignments: list[Assignment],
) -> None:
    """Lehrkraft unterrichtet ein Fach ohne Lehrbefähigung."""
    teacher_map = {t.id: t for t in teachers}
    subject_map = {s.id: s for s in subjects}

    for a in assignments:
        teacher = teacher_map.get(a.teacher_id)
        subject = subject_map.get(a.subject_id)
        if teacher is None or subject is None:
            continue
        if not teacher.is_qualified_for(subject.name):
            conflicts.add(
                ConflictKey("assignment", a.id, "qualification"),
                conflict_type="qualification",
                severity="critical",
                description=f"{teacher.name} hat keine Qualifikation für {subject.name}",
            )


def _check_teacher_workload(
    conflicts: ConflictMatrix,
    teachers: list[Teacher],
    assignments: list[Assignment],
) -> None:
    """Überlastung, Fast-Überlastung und fehlende Restkapazität."""
    for teacher in teachers:
        total = teacher_total_hours(teacher.id, assignments)
        max_hours = teacher.max_hours
        remaining = max_hours - total

        if total > max_hours:
            conflicts.add(
                ConflictKey("teacher", teacher.id, "overload"),
                conflict_type="workload",
                severity="high",
                description=(
                    f"{teacher.name} ist mit {total:g}h überbelastet "
                    f"(Max: {max_hours:g}h)"
                ),
            )
        elif total > max_hours * NEAR_OVERLOAD_RATIO:
            conflicts.add(
                ConflictKey("teacher", teacher.id, "near_overload"),
                conflict_type="workload",
                severity="medium",
                description=f"{teacher.name} ist fast vollständig ausgelastet",
            )

        if remaining <= 0:
            conflicts.add(
                ConflictKey("teacher", teacher.id, "no_capacity"),
                conflict_type="workload",
                severity="high",
                description=f"{teacher.name} hat keine freien Stunden mehr",
            )
        elif remaining < MINIMAL_CAPACITY_HOURS:
            conflicts.add(
                ConflictKey("teacher", teacher.id, "minimal_capacity"),
                conflict_type="workload",
                severity="medium",
                description=f"{teacher.name} hat nur noch {remaining:g}h frei",
            )


def _check_class_totals(
    conflicts: ConflictMatrix,
    classes: list[SchoolClass],
    subjects: list[Subject],
    assignments: list[Assignment],
    curriculum: CurriculumTable,
) -> None:
    """Stundenbudget: verletzt, fast voll, kaum genutzt oder unerfüllbar."""
    for cls in classes:
        target = cls.target_hours_total
        if target is None:
            continue
        current = class_total_hours(cls.id, assignments)
        remaining = target - current
        label = cls.name or cls.id

        if current > target:
            conflicts.add(
                ConflictKey("class", cls.id, "total_hours_violated"),
                conflict_type="total_hours",
                severity="critical",
                description=(
                    f"Klasse {label}: Stundenbudget überschritten "
                    f"({current:g}h > {target:g}h)"
                ),
            )
        if 0 < remaining < ALMOST_FULL_HOURS:
            conflicts.add(
                ConflictKey("class", cls.id, "total_hours_almost_full"),
                conflict_type="total_hours",
                severity="high",
                description=f"Klasse {label}: Stundenbudget fast ausgeschöpft ({remaining:g}h frei)",
            )
        if current < target * UNDERUSED_RATIO:
            conflicts.add(
                ConflictKey("class", cls.id, "total_hours_underutilized"),
                conflict_type="total_hours",
                severity="medium",
                description=(
                    f"Klasse {label}: Stundenbudget nur zu "
                    f"{_percent(current, target):.0f}% genutzt ({current:g}h von {target:g}h)"
                ),
            )

        required_total = curriculum.grade_total(cls.grade, subjects)
        if required_total > target:
            conflicts.add(
                ConflictKey("class", cls.id, "total_hours_impossible"),
                conflict_type="total_hours",
                severity="critical",
                description=(
                    f"Klasse {label}: Stundentafel verlangt {required_total:g}h, "
                    f"Budget erlaubt nur {target:g}h"
                ),
            )


def _percent(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 100.0


# ─── Vorab-Prüfung einer einzelnen Zuweisung ──────────────────────────────────

def detect_assignment_conflicts(
    candidate: RecommendedAssignment,
    teachers: list[Teacher],
    classes: list[SchoolClass],
    subjects: list[Subject],
    assignments: list[Assignment],
) -> ConflictCheckResult:
    """Prüft eine noch nicht gespeicherte Zuweisung gegen den Ist-Stand.

    Konflikte (blockierend): Überbelastung der Lehrkraft, überschrittenes
    Klassenbudget, doppelte Zuweisung. Warnungen: fehlende Qualifikation,
    weniger als 1h Restbudget, unbekannte IDs. Ob blockiert wird,
    entscheidet der Aufrufer.
    """
    conflicts: list[str] = []
    warnings: list[str] = []

    teacher = next((t for t in teachers if t.id == candidate.teacher_id), None)
    cls = next((c for c in classes if c.id == candidate.class_id), None)
    subject = next((s for s in subjects if s.id == candidate.subject_id), None)
    hours = candidate.hours_per_week

    if teacher is None:
        warnings.append(f"Lehrkraft {candidate.teacher_id} nicht gefunden")
    else:
        projected = teacher_total_hours(teacher.id, assignments) + hours
        if projected > teacher.max_hours:
            conflicts.append(
                f"Überbelastung: {teacher.name} hätte {projected:g}h "
                f"(Max: {teacher.max_hours:g}h)"
            )
        if subject is not None and not teacher.is_qualified_for(subject.name):
            warnings.append(f"{teacher.name} hat keine Qualifikation für {subject.name}")

    if subject is None:
        warnings.append(f"Fach {candidate.subject_id} nicht gefunden")

    if cls is None:
        warnings.append(f"Klasse {candidate.class_id} nicht gefunden")
    elif cls.target_hours_total is not None:
        projected_total = class_total_hours(cls.id, assignments) + hours
        remaining = cls.target_hours_total - projected_total
        label = cls.name or cls.id
        if projected_total > cls.target_hours_total:
            conflicts.append(
                f"Stundenbudget überschritten: Klasse {label} hätte "
                f"{projected_total:g}h (Budget: {cls.target_hours_total:g}h)"
            )
        elif remaining < TIGHT_BUDGET_HOURS:
            warnings.append(
                f"Klasse {label}: nach der Zuweisung nur noch {remaining:g}h Budget frei"
            )

    duplicates = [
        a for a in dedup_by_key(assignments, teacher_slot_key)
        if a.teacher_id == candidate.teacher_id
        and a.class_id == candidate.class_id
        and a.subject_id == candidate.subject_id
    ]
    if duplicates:
        conflicts.append(
            f"Doppelte Zuweisung: {candidate.teacher_id} unterrichtet "
            f"{candidate.subject_id} in {candidate.class_id} bereits "
            f"({duplicates[0].hours_per_week:g}h)"
        )

    return ConflictCheckResult(
        has_conflicts=len(conflicts) > 0,
        conflicts=conflicts,
        warnings=warnings,
    )
