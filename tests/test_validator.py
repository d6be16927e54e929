"""Tests für die Abschlussprüfung einzelner Zuweisungen."""

import pytest

from analysis.assignment_validator import validate_assignment, validate_assignment_with_context
from models.assignment import Assignment
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher
from optimizer.requirements import build_class_total_constraints
from optimizer.types import RecommendedAssignment

DEUTSCH = Subject(id="D", name="Deutsch", short_name="D")
MATHE = Subject(id="M", name="Mathematik", short_name="M")


def _make_teacher(tid: str = "T1", max_hours: float = 25.0, current: float = 0.0,
                  quals=None) -> Teacher:
    return Teacher(
        id=tid, first_name="Anna", last_name="Müller",
        qualifications=quals if quals is not None else ["Deutsch"],
        max_hours=max_hours, current_hours=current,
    )


def _make_candidate(teacher: str = "T1", cls: str = "5a", subject: str = "D",
                    hours: float = 4) -> RecommendedAssignment:
    return RecommendedAssignment(
        teacher_id=teacher, class_id=cls, subject_id=subject,
        hours_per_week=hours, confidence=100.0, reasoning=[],
    )


# ─── EINZELPRÜFUNG ────────────────────────────────────────────────────────────

class TestValidateAssignment:
    def test_valid_assignment(self):
        result = validate_assignment(_make_candidate(), _make_teacher(), DEUTSCH)
        assert result.is_valid
        assert result.violations == []

    def test_missing_qualification(self):
        result = validate_assignment(_make_candidate(subject="M"), _make_teacher(), MATHE)
        assert not result.is_valid
        assert "Lehrkraft hat keine Qualifikation für Mathematik" in result.violations

    def test_exceeding_max_hours_uses_stored_current(self):
        result = validate_assignment(
            _make_candidate(hours=4), _make_teacher(current=22), DEUTSCH
        )
        assert not result.is_valid
        assert any("maximale Arbeitszeit" in v for v in result.violations)

    def test_explicit_teacher_hours_override_stored(self):
        result = validate_assignment(
            _make_candidate(hours=4), _make_teacher(current=22), DEUTSCH,
            teacher_current_hours=10,
        )
        assert result.is_valid

    def test_exactly_at_max_is_valid(self):
        result = validate_assignment(
            _make_candidate(hours=3), _make_teacher(current=22), DEUTSCH
        )
        assert result.is_valid

    def test_less_than_one_hour(self):
        result = validate_assignment(_make_candidate(hours=0.5), _make_teacher(), DEUTSCH)
        assert "Mindestens 1 Stunde pro Zuweisung erforderlich" in result.violations

    def test_empty_ids(self):
        result = validate_assignment(_make_candidate(teacher=" ", cls=""), _make_teacher(), DEUTSCH)
        assert "Lehrkraft-ID fehlt" in result.violations
        assert "Klasse-ID fehlt" in result.violations

    def test_class_ceiling(self):
        cls = SchoolClass(id="5a", name="5a", grade=5, target_hours_total=10)
        result = validate_assignment(
            _make_candidate(hours=4), _make_teacher(), DEUTSCH,
            school_class=cls, current_class_total_hours=8,
        )
        assert not result.is_valid
        assert any("Stundenbudget der Klasse 5a" in v for v in result.violations)

    def test_class_ceiling_skipped_without_total(self):
        cls = SchoolClass(id="5a", grade=5, target_hours_total=2)
        result = validate_assignment(_make_candidate(hours=4), _make_teacher(), DEUTSCH,
                                     school_class=cls)
        assert result.is_valid

    def test_collects_all_violations(self):
        result = validate_assignment(
            _make_candidate(subject="M", hours=0.5), _make_teacher(max_hours=0), MATHE
        )
        assert len(result.violations) == 3


# ─── PRÜFUNG MIT KONTEXT ──────────────────────────────────────────────────────

class TestValidateWithContext:
    @pytest.fixture
    def school(self):
        teachers = [_make_teacher("T1", max_hours=25)]
        classes = [SchoolClass(id="5a", grade=5, target_hours_total=10)]
        assignments = [Assignment(id="A1", teacher_id="T1", class_id="5a",
                                  subject_id="M", hours_per_week=5)]
        constraints = build_class_total_constraints(classes, assignments)
        return teachers, classes, assignments, constraints

    def test_valid_with_context(self, school):
        teachers, classes, assignments, constraints = school
        result = validate_assignment_with_context(
            _make_candidate(hours=4), teachers, [DEUTSCH, MATHE], classes,
            assignments, constraints,
        )
        assert result.is_valid
        assert result.warnings == []

    def test_budget_from_constraints(self, school):
        teachers, classes, assignments, constraints = school
        result = validate_assignment_with_context(
            _make_candidate(hours=6), teachers, [DEUTSCH, MATHE], classes,
            assignments, constraints,
        )
        assert not result.is_valid

    def test_tight_budget_warning(self, school):
        teachers, classes, assignments, constraints = school
        result = validate_assignment_with_context(
            _make_candidate(hours=4.5), teachers, [DEUTSCH, MATHE], classes,
            assignments, constraints,
        )
        assert result.is_valid
        assert any("Budget frei" in w for w in result.warnings)

    def test_unknown_teacher_is_violation(self, school):
        _, classes, assignments, constraints = school
        result = validate_assignment_with_context(
            _make_candidate(teacher="GHOST"), [], [DEUTSCH], classes, assignments, constraints,
        )
        assert not result.is_valid
        assert result.violations == ["Lehrkraft GHOST nicht gefunden"]

    def test_unknown_class_is_warning(self, school):
        teachers, _, assignments, constraints = school
        result = validate_assignment_with_context(
            _make_candidate(cls="9z"), teachers, [DEUTSCH], [], assignments, constraints,
        )
        assert result.is_valid
        assert "Klasse 9z nicht gefunden" in result.warnings

    def test_teacher_hours_from_assignments(self):
        """Gespeicherter Ist-Stand wird ignoriert, es zählen die Zuweisungen."""
        teacher = _make_teacher("T1", max_hours=25, current=25)
        result = validate_assignment_with_context(
            _make_candidate(cls="5b", hours=4), [teacher], [DEUTSCH],
            [SchoolClass(id="5b", grade=5)], [], {},
        )
        assert result.is_valid

    def test_near_full_teacher_warning(self):
        teacher = _make_teacher("T1", max_hours=20)
        assignments = [Assignment(id="A1", teacher_id="T1", class_id="5a",
                                  subject_id="D", hours_per_week=16)]
        result = validate_assignment_with_context(
            _make_candidate(cls="5b", hours=4), [teacher], [DEUTSCH],
            [SchoolClass(id="5b", grade=5)], assignments, {},
        )
        assert result.is_valid
        assert any("fast vollständig ausgelastet" in w for w in result.warnings)
