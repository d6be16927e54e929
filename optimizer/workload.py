"""Auslastung der Lehrkräfte aus den bestehenden Zuweisungen."""

from models.assignment import Assignment, teacher_total_hours
from models.teacher import Teacher
from optimizer.types import TeacherWorkload, utilization_percent


def calculate_teacher_workloads(
    teachers: list[Teacher], assignments: list[Assignment]
) -> list[TeacherWorkload]:
    """Eine TeacherWorkload pro Lehrkraft.

    Keine Halbjahres-Filterung: wer nur ein Halbjahr betrachten will, filtert
    die Zuweisungen vorher. Doppelte Einträge (gleiche Lehrkraft, Klasse,
    Fach, Halbjahr) zählen nur einmal mit dem höheren Stundenwert.
    """
    workloads = []
    for teacher in teachers:
        current = teacher_total_hours(teacher.id, assignments)
        workloads.append(TeacherWorkload(
            teacher_id=teacher.id,
            current_hours=current,
            max_hours=teacher.max_hours,
            utilization=utilization_percent(current, teacher.max_hours),
            qualifications=list(teacher.qualifications),
        ))
    return workloads
