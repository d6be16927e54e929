from config.schema import OptimizationSettings, OptimizerConfig


def default_settings() -> OptimizationSettings:
    """Standard-Schalter wie in der Optimierungsmaske vorbelegt."""
    return OptimizationSettings(
        prioritize_qualifications=True,
        balance_workload=True,
        minimize_conflicts=True,
        respect_max_hours=True,
        allow_partial_assignments=False,
    )


def default_optimizer_config() -> OptimizerConfig:
    """Komplette Default-Konfiguration für eine Realschule in NRW."""
    return OptimizerConfig(
        school_name="Muster-Realschule",
        bundesland="NRW",
        settings=default_settings(),
    )


# ─── HAUPTFÄCHER ───
# Werden bei der Priorisierung der Defizite zuerst bedient (Basis 100 statt 50).

CORE_SUBJECTS: frozenset[str] = frozenset({"Deutsch", "Mathematik", "Englisch"})


# ─── PARALLELE FÄCHERGRUPPEN ───
# Fächer einer Gruppe laufen parallel (Schüler verteilen sich auf die Gruppen).
# In der Stundentafel steht deshalb nur der Gruppenname, nie die Einzelfächer.

PARALLEL_GROUPS: dict[str, list[str]] = {
    # FS=Französisch, SW=Sozialwissenschaften, NW=Bio-Kurs, IF=Informatik,
    # TC=Technik, MUS=Musik-Kurs
    "Differenzierung": ["FS", "SW", "NW", "IF", "TC", "MUS"],
    # KR=Kath. Religion, ER=Ev. Religion, PP=Praktische Philosophie
    "Religion": ["KR", "ER", "PP"],
}


# ─── STUNDENTAFEL ───
# Jahrgang → Fach → Wochenstunden (Realschule NRW, korrigiert für parallele Fächer).

STUNDENTAFEL_REALSCHULE_NRW: dict[int, dict[str, float]] = {
    5: {
        "Deutsch":      5,
        "Mathematik":   4,
        "Englisch":     4,
        "Biologie":     2,
        "Erdkunde":     2,
        "Geschichte":   2,
        "Sport":        3,
        "Kunst":        2,
        "Musik":        2,
        "Religion":     2,   # statt KR/ER/PP einzeln
    },  # Summe: 28h
    6: {
        "Deutsch":      4,
        "Mathematik":   4,
        "Englisch":     4,
        "Biologie":     2,
        "Physik":       2,
        "Erdkunde":     1,
        "Geschichte":   2,
        "Politik":      1,
        "Sport":        3,
        "Kunst":        2,
        "Musik":        1,
        "Religion":     2,
    },  # Summe: 28h
    7: {
        "Deutsch":          4,
        "Mathematik":       4,
        "Englisch":         4,
        "Differenzierung":  3,   # statt FS/SW/NW/IF/TC/MUS einzeln
        "Biologie":         2,
        "Physik":           2,
        "Chemie":           2,
        "Geschichte":       2,
        "Politik":          2,
        "Erdkunde":         1,
        "Sport":            3,
        "Kunst":            1,
        "Musik":            1,
        "Religion":         2,
    },  # Summe: 33h
    8: {
        "Deutsch":          4,
        "Mathematik":       4,
        "Englisch":         3,
        "Differenzierung":  4,
        "Biologie":         1,
        "Physik":           2,
        "Chemie":           2,
        "Geschichte":       2,
        "Politik":          2,
        "Erdkunde":         2,
        "Sport":            3,
        "Kunst":            2,
        "Musik":            1,
        "Religion":         2,
    },  # Summe: 34h
    9: {
        "Deutsch":          4,
        "Mathematik":       4,
        "Englisch":         3,
        "Differenzierung":  3,
        "Biologie":         2,
        "Physik":           2,
        "Chemie":           2,
        "Geschichte":       2,
        "Politik":          2,
        "Erdkunde":         1,
        "Sport":            3,
        "Kunst":            1,
        "Musik":            1,
        "Religion":         2,
    },  # Summe: 32h
    10: {
        "Deutsch":          4,
        "Mathematik":       4,
        "Englisch":         4,
        "Differenzierung":  4,
        "Biologie":         2,
        "Physik":           2,
        "Chemie":           2,
        "Geschichte":       2,
        "Politik":          2,
        "Erdkunde":         2,
        "Sport":            3,
        "Kunst":            1,
        "Musik":            1,
        "Religion":         2,
    },  # Summe: 35h
}


# ─── FACH-METADATEN ───
# Pro Fach: Kürzel und Kategorie (für Anzeige und Demo-Daten).

SUBJECT_METADATA: dict[str, dict] = {
    "Deutsch":          {"short": "D",   "category": "hauptfach"},
    "Mathematik":       {"short": "M",   "category": "hauptfach"},
    "Englisch":         {"short": "E",   "category": "hauptfach"},
    "Biologie":         {"short": "BI",  "category": "nw"},
    "Physik":           {"short": "PH",  "category": "nw"},
    "Chemie":           {"short": "CH",  "category": "nw"},
    "Erdkunde":         {"short": "EK",  "category": "gesellschaft"},
    "Geschichte":       {"short": "GE",  "category": "gesellschaft"},
    "Politik":          {"short": "PK",  "category": "gesellschaft"},
    "Kunst":            {"short": "KU",  "category": "musisch"},
    "Musik":            {"short": "MU",  "category": "musisch"},
    "Sport":            {"short": "SP",  "category": "sport"},
    "Religion":         {"short": "REL", "category": "parallel"},
    "Differenzierung":  {"short": "DIFF", "category": "parallel"},
}
