"""Stundendefizite pro Klasse und Fach gegenüber der Stundentafel."""

import logging

from config.defaults import CORE_SUBJECTS
from models.assignment import Assignment, class_total_hours, hours_by_class_subject
from models.school_class import SchoolClass
from models.subject import Subject
from optimizer.curriculum import CurriculumTable
from optimizer.types import ClassRequirement, ClassTotalHoursConstraint

logger = logging.getLogger(__name__)

CORE_SUBJECT_PRIORITY = 100
OTHER_SUBJECT_PRIORITY = 50
DEFICIT_WEIGHT = 10


def calculate_priority(subject_name: str, deficit: float) -> float:
    """Hauptfächer und große Defizite zuerst."""
    base = CORE_SUBJECT_PRIORITY if subject_name in CORE_SUBJECTS else OTHER_SUBJECT_PRIORITY
    return base + deficit * DEFICIT_WEIGHT


def calculate_class_requirements(
    classes: list[SchoolClass],
    subjects: list[Subject],
    assignments: list[Assignment],
    curriculum: CurriculumTable,
) -> list[ClassRequirement]:
    """Liste aller offenen Defizite, global nach Priorität absteigend sortiert.

    Klassen mit hartem Stundenbudget bekommen ihre Defizite nach Priorität aus
    dem Restbudget zugeteilt; required_hours ist dann current_hours plus der
    zugeteilte Anteil, nicht der Wert aus der Stundentafel. Fächer, für die
    kein Budget mehr übrig ist, fallen weg.
    """
    current_by_key = hours_by_class_subject(assignments)
    requirements: list[ClassRequirement] = []

    for cls in classes:
        class_reqs: list[ClassRequirement] = []
        for subject in subjects:
            required = curriculum.hours_for_subject(cls.grade, subject)
            if required <= 0:
                continue
            current = current_by_key.get((cls.id, subject.id), 0.0)
            deficit = required - current
            if deficit <= 0:
                continue
            class_reqs.append(ClassRequirement(
                class_id=cls.id,
                subject_id=subject.id,
                required_hours=required,
                current_hours=current,
                priority=calculate_priority(subject.name, deficit),
            ))

        if cls.target_hours_total is None:
            requirements.extend(class_reqs)
            continue

        remaining_budget = cls.target_hours_total - class_total_hours(cls.id, assignments)
        class_reqs.sort(key=lambda r: r.priority, reverse=True)
        for req in class_reqs:
            allocated = min(req.deficit, remaining_budget)
            if allocated <= 0:
                logger.debug(
                    f"Klasse {cls.id}: Budget erschöpft, Fach {req.subject_id} entfällt"
                )
                continue
            remaining_budget -= allocated
            requirements.append(req.model_copy(
                update={"required_hours": req.current_hours + allocated}
            ))

    # sorted() ist stabil: Gleichstände behalten die Eingabereihenfolge
    return sorted(requirements, key=lambda r: r.priority, reverse=True)


def build_class_total_constraints(
    classes: list[SchoolClass], assignments: list[Assignment]
) -> dict[str, ClassTotalHoursConstraint]:
    """Ein Budget-Eintrag pro Klasse mit target_hours_total; andere sind frei."""
    constraints: dict[str, ClassTotalHoursConstraint] = {}
    for cls in classes:
        if cls.target_hours_total is None:
            continue
        current = class_total_hours(cls.id, assignments)
        constraints[cls.id] = ClassTotalHoursConstraint(
            class_id=cls.id,
            target_total=cls.target_hours_total,
            current_total=current,
            remaining_hours=cls.target_hours_total - current,
            is_hard_constraint=True,
        )
    return constraints
