"""Abschlussprüfung einer einzelnen Zuweisung vor dem Speichern.

Sammelt alle Verstöße statt beim ersten abzubrechen, damit der Aufrufer
sämtliche Probleme auf einmal anzeigen kann.
"""

from typing import Optional

from models.assignment import Assignment, class_total_hours, teacher_total_hours
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher
from optimizer.types import ClassTotalHoursConstraint, RecommendedAssignment, ValidationResult

MIN_HOURS_PER_ASSIGNMENT = 1.0
TIGHT_BUDGET_HOURS = 1.0


def validate_assignment(
    candidate: RecommendedAssignment,
    teacher: Teacher,
    subject: Subject,
    school_class: Optional[SchoolClass] = None,
    current_class_total_hours: Optional[float] = None,
    teacher_current_hours: Optional[float] = None,
) -> ValidationResult:
    """Prüft Qualifikation, Deputat, Mindeststunden, IDs und Klassenbudget.

    Ohne teacher_current_hours wird der gespeicherte Ist-Stand der Lehrkraft
    verwendet. Das Klassenbudget wird nur geprüft, wenn Klasse und aktuelle
    Klassensumme übergeben werden.
    """
    violations: list[str] = []

    for label, value in (
        ("Lehrkraft", candidate.teacher_id),
        ("Klasse", candidate.class_id),
        ("Fach", candidate.subject_id),
    ):
        if not value or not value.strip():
            violations.append(f"{label}-ID fehlt")

    if not teacher.is_qualified_for(subject.name):
        violations.append(f"Lehrkraft hat keine Qualifikation für {subject.name}")

    current = teacher.current_hours if teacher_current_hours is None else teacher_current_hours
    if current + candidate.hours_per_week > teacher.max_hours:
        violations.append(
            f"Zuweisung würde maximale Arbeitszeit überschreiten "
            f"({current + candidate.hours_per_week:g}h > {teacher.max_hours:g}h)"
        )

    if candidate.hours_per_week < MIN_HOURS_PER_ASSIGNMENT:
        violations.append("Mindestens 1 Stunde pro Zuweisung erforderlich")

    if (
        school_class is not None
        and school_class.target_hours_total is not None
        and current_class_total_hours is not None
    ):
        projected = current_class_total_hours + candidate.hours_per_week
        if projected > school_class.target_hours_total:
            violations.append(
                f"Stundenbudget der Klasse {school_class.name or school_class.id} "
                f"würde überschritten ({projected:g}h > {school_class.target_hours_total:g}h)"
            )

    return ValidationResult(is_valid=not violations, violations=violations)


def validate_assignment_with_context(
    candidate: RecommendedAssignment,
    teachers: list[Teacher],
    subjects: list[Subject],
    classes: list[SchoolClass],
    assignments: list[Assignment],
    constraints: dict[str, ClassTotalHoursConstraint],
) -> ValidationResult:
    """Wie validate_assignment, schlägt Lehrkraft, Fach und Klasse selbst nach.

    Ist-Stunden der Lehrkraft und Klassensumme kommen aus den Zuweisungen
    bzw. den Budget-Einträgen.
    """
    teacher = next((t for t in teachers if t.id == candidate.teacher_id), None)
    subject = next((s for s in subjects if s.id == candidate.subject_id), None)
    school_class = next((c for c in classes if c.id == candidate.class_id), None)

    violations: list[str] = []
    warnings: list[str] = []
    if teacher is None:
        violations.append(f"Lehrkraft {candidate.teacher_id} nicht gefunden")
    if subject is None:
        violations.append(f"Fach {candidate.subject_id} nicht gefunden")
    if school_class is None:
        warnings.append(f"Klasse {candidate.class_id} nicht gefunden")
    if teacher is None or subject is None:
        return ValidationResult(is_valid=False, violations=violations, warnings=warnings)

    constraint = constraints.get(candidate.class_id)
    if constraint is not None:
        class_total = constraint.current_total
    elif school_class is not None:
        class_total = class_total_hours(school_class.id, assignments)
    else:
        class_total = None

    base = validate_assignment(
        candidate,
        teacher,
        subject,
        school_class=school_class,
        current_class_total_hours=class_total,
        teacher_current_hours=teacher_total_hours(teacher.id, assignments),
    )

    if constraint is not None:
        remaining_after = constraint.target_total - class_total - candidate.hours_per_week
        if 0 <= remaining_after < TIGHT_BUDGET_HOURS:
            warnings.append(
                f"Klasse {candidate.class_id}: nach der Zuweisung nur noch "
                f"{remaining_after:g}h Budget frei"
            )

    teacher_after = teacher_total_hours(teacher.id, assignments) + candidate.hours_per_week
    near_full = teacher.max_hours * 0.95 < teacher_after <= teacher.max_hours
    if teacher.max_hours > 0 and near_full:
        warnings.append(f"{teacher.name} wäre danach fast vollständig ausgelastet")

    return ValidationResult(
        is_valid=base.is_valid,
        violations=base.violations,
        warnings=warnings,
    )
