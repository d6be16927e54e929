"""Testdaten-Generator für den Zuweisungs-Optimierer.

Erzeugt einen realistischen Ist-Stand mit absichtlichen Lücken, damit der
Optimierer etwas zu tun hat.

Absichtliche Lücken und Engpässe:
  1. Nur ein Teil der Stundentafel ist bereits besetzt (coverage)
  2. Chemie-Engpass: nur 2 Chemie-Lehrkräfte
  3. Einige Klassen haben ein Stundenbudget knapp unter der Stundentafel
  4. Teilzeitkräfte (14h) sind nach wenigen Zuweisungen ausgelastet
"""

import random
import string
from typing import Optional

from config.defaults import STUNDENTAFEL_REALSCHULE_NRW, SUBJECT_METADATA
from models.assignment import Assignment
from models.school_class import SchoolClass
from models.school_data import SchoolData
from models.subject import Subject
from models.teacher import Teacher

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES_M = [
    "Andreas", "Bernd", "Christian", "Dieter", "Franz", "Hans", "Jürgen",
    "Klaus", "Markus", "Michael", "Norbert", "Peter", "Stefan", "Thomas",
    "Tobias", "Ulrich", "Yusuf", "Martin", "Robert", "Rainer",
]

_FIRST_NAMES_F = [
    "Anna", "Birgit", "Christine", "Eva", "Iris", "Kathrin", "Karin",
    "Lena", "Maria", "Olga", "Renate", "Sandra", "Tanja", "Ulrike",
    "Vera", "Monika", "Sabine", "Heike", "Claudia", "Petra",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Schäfer", "Koch",
    "Bauer", "Richter", "Klein", "Wolf", "Schröder", "Neumann",
    "Schwarz", "Zimmermann", "Braun", "Krüger", "Hartmann", "Lange",
    "Schmitz", "Krause", "Lehmann", "Köhler", "Kaiser", "Fuchs",
    "Weiß", "Berger", "Roth", "Frank", "Engel", "Vogel", "Beck",
]

# ─── Fächerkombinationen (gewichtet) ─────────────────────────────────────────
# Chemie fehlt absichtlich: nur die festen Chemie-Lehrkräfte decken das Fach ab.

_SUBJECT_COMBOS: list[tuple[list[str], int]] = [
    (["Mathematik", "Physik"], 8),
    (["Deutsch", "Geschichte"], 8),
    (["Englisch", "Deutsch"], 6),
    (["Biologie", "Erdkunde"], 5),
    (["Mathematik", "Differenzierung"], 4),
    (["Erdkunde", "Politik"], 4),
    (["Geschichte", "Politik"], 4),
    (["Englisch", "Differenzierung"], 3),
    (["Kunst", "Deutsch"], 3),
    (["Musik", "Englisch"], 3),
    (["Sport", "Biologie"], 4),
    (["Sport", "Erdkunde"], 3),
    (["Religion", "Geschichte"], 3),
    (["Mathematik", "Deutsch"], 3),
]

_COMBO_WEIGHTS = [w for _, w in _SUBJECT_COMBOS]
_COMBO_SUBJECTS = [s for s, _ in _SUBJECT_COMBOS]


def _make_abbreviation(last_name: str, used: set[str], rng: random.Random) -> str:
    """Generiert ein eindeutiges 3-Zeichen-Kürzel aus dem Nachnamen."""
    base = (
        last_name.upper()
        .replace("Ä", "AE").replace("Ö", "OE").replace("Ü", "UE")
        .replace("ß", "SS")
    )
    candidates = [
        base[:3],
        base[:2] + base[-1],
        base[0] + base[2:4],
        base[:2] + str(len(used) % 10),
    ]
    for c in candidates:
        c = c[:3].ljust(3, "X")
        if c not in used:
            used.add(c)
            return c
    while True:
        c = "".join(rng.choices(string.ascii_uppercase, k=3))
        if c not in used:
            used.add(c)
            return c


class FakeDataGenerator:
    """Generiert einen vollständigen Demo-Datensatz (SchoolData)."""

    def __init__(
        self,
        seed: Optional[int] = None,
        classes_per_grade: int = 2,
        num_teachers: int = 30,
        coverage: float = 0.7,
        school_name: str = "Muster-Realschule",
    ) -> None:
        self.rng = random.Random(seed)
        self.classes_per_grade = classes_per_grade
        self.num_teachers = num_teachers
        self.coverage = coverage
        self.school_name = school_name
        self._used_abbreviations: set[str] = set()

    # ─── Fächer ───────────────────────────────────────────────────────────────

    def _generate_subjects(self) -> list[Subject]:
        return [
            Subject(
                id=meta["short"],
                name=name,
                short_name=meta["short"],
                category=meta["category"],
            )
            for name, meta in SUBJECT_METADATA.items()
        ]

    # ─── Klassen ──────────────────────────────────────────────────────────────

    def _generate_classes(self) -> list[SchoolClass]:
        """Alle Klassen der Jahrgänge 5–10; jede dritte bekommt ein knappes Budget."""
        classes = []
        for grade, row in sorted(STUNDENTAFEL_REALSCHULE_NRW.items()):
            grade_total = sum(row.values())
            for label in string.ascii_lowercase[: self.classes_per_grade]:
                index = len(classes)
                target: Optional[float] = None
                if index % 3 == 0:
                    target = grade_total - self.rng.choice([0, 1, 2])
                classes.append(SchoolClass(
                    id=f"{grade}{label}",
                    name=f"{grade}{label}",
                    grade=grade,
                    target_hours_total=target,
                    student_count=self.rng.randint(22, 30),
                ))
        return classes

    # ─── Lehrkräfte ───────────────────────────────────────────────────────────

    def _make_teacher(self, qualifications: list[str], max_hours: float) -> Teacher:
        """Erstellt eine Lehrkraft mit zufälligem Namen."""
        first_names = _FIRST_NAMES_F if self.rng.random() < 0.55 else _FIRST_NAMES_M
        first = self.rng.choice(first_names)
        last = self.rng.choice(_LAST_NAMES)
        abbr = _make_abbreviation(last, self._used_abbreviations, self.rng)
        return Teacher(
            id=abbr,
            first_name=first,
            last_name=last,
            short_name=abbr,
            qualifications=qualifications,
            max_hours=max_hours,
        )

    def _generate_teachers(self) -> list[Teacher]:
        """Feste Chemie-Lehrkräfte (Engpass) plus gewichtete Fächerkombinationen.

        Etwa 30% Teilzeit (14h), Rest Vollzeit (25h).
        """
        teachers = [
            self._make_teacher(["Chemie", "Biologie"], 25.0),
            self._make_teacher(["Chemie", "Physik"], 14.0),
        ]
        for _ in range(max(0, self.num_teachers - len(teachers))):
            subjects = self.rng.choices(_COMBO_SUBJECTS, weights=_COMBO_WEIGHTS)[0]
            max_hours = 14.0 if self.rng.random() < 0.3 else 25.0
            teachers.append(self._make_teacher(list(subjects), max_hours))
        return teachers

    # ─── Ist-Stand ────────────────────────────────────────────────────────────

    def _generate_assignments(
        self,
        teachers: list[Teacher],
        classes: list[SchoolClass],
        subjects: list[Subject],
    ) -> list[Assignment]:
        """Besetzt zufällig einen Teil der Stundentafel mit qualifizierten Lehrkräften.

        Schreibt den Ist-Stand zusätzlich in Teacher.current_hours.
        """
        by_name = {s.name: s for s in subjects}
        load = {t.id: 0.0 for t in teachers}
        assignments: list[Assignment] = []

        for cls in classes:
            class_total = 0.0
            for subject_name, hours in STUNDENTAFEL_REALSCHULE_NRW[cls.grade].items():
                if self.rng.random() > self.coverage:
                    continue
                budget = cls.target_hours_total
                if budget is not None and class_total + hours > budget:
                    continue
                pool = [
                    t for t in teachers
                    if subject_name in t.qualifications
                    and load[t.id] + hours <= t.max_hours
                ]
                if not pool:
                    continue
                teacher = self.rng.choice(pool)
                load[teacher.id] += hours
                class_total += hours
                assignments.append(Assignment(
                    id=f"A{len(assignments) + 1:04d}",
                    teacher_id=teacher.id,
                    class_id=cls.id,
                    subject_id=by_name[subject_name].id,
                    hours_per_week=hours,
                ))

        for t in teachers:
            t.current_hours = load[t.id]
        return assignments

    # ─── Vollständiger Datensatz ──────────────────────────────────────────────

    def generate(self) -> SchoolData:
        """Erzeugt den vollständigen Datensatz als SchoolData-Objekt."""
        subjects = self._generate_subjects()
        classes = self._generate_classes()
        teachers = self._generate_teachers()
        assignments = self._generate_assignments(teachers, classes, subjects)
        return SchoolData(
            teachers=teachers,
            classes=classes,
            subjects=subjects,
            assignments=assignments,
            school_name=self.school_name,
        )

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, data: SchoolData) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich import box
        from rich.console import Console
        from rich.table import Table

        console = Console()
        table = Table(title="Erzeugte Testdaten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        part_time = sum(1 for t in data.teachers if t.max_hours < 25)
        budgeted = sum(1 for c in data.classes if c.has_hour_budget)
        assigned_hours = sum(a.hours_per_week for a in data.assignments)
        table.add_row("Fächer", str(len(data.subjects)), "")
        table.add_row("Klassen", str(len(data.classes)),
                      f"{len(set(c.grade for c in data.classes))} Jahrgänge, "
                      f"{budgeted} mit Stundenbudget")
        table.add_row("Lehrkräfte", str(len(data.teachers)),
                      f"{part_time} Teilzeit, {len(data.teachers) - part_time} Vollzeit")
        table.add_row("Zuweisungen", str(len(data.assignments)),
                      f"{assigned_hours:g}h/Woche")

        console.print(table)
