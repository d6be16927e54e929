"""Lehrerzuweisungs-Optimierer — Haupt-CLI.

Verwendung:
  python main.py config init              Standard-Konfiguration anlegen
  python main.py config show              Konfiguration anzeigen
  python main.py config edit              Konfiguration bearbeiten
  python main.py generate                 Demo-Datensatz als JSON erzeugen
  python main.py optimize                 Zuweisungen optimieren
  python main.py conflicts                Ist-Stand auf Konflikte prüfen
  python main.py check --teacher ...      Einzelne Zuweisung vorab prüfen
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

# Standard-Pfad für gespeicherte SchoolData
DEFAULT_DATA_JSON = Path("output/school_data.json")


def _load_config_or_abort():
    """Lädt die Konfiguration (oder Standardwerte) oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        return mgr, mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _load_data_or_abort(json_path: str):
    """Lädt den Datensatz aus JSON oder bricht mit Fehlermeldung ab."""
    from models.school_data import SchoolData
    try:
        return SchoolData.load_json(Path(json_path))
    except FileNotFoundError as e:
        console.print(
            f"[red]{e}[/red]\n"
            "Verwenden Sie zunächst [bold]python main.py generate[/bold]."
        )
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Datensatz ungültig: {json_path}[/red]\n{e}")
        sys.exit(1)


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        )


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen, anlegen oder bearbeiten."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config_or_abort()
    if mgr.first_run_check():
        console.print("[dim]Keine Konfigurationsdatei, Standardwerte aktiv.[/dim]")
    mgr.print_rich(config)


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Konfiguration überschreiben.")
def config_init(force: bool):
    """Legt die Standard-Konfiguration als YAML-Datei an."""
    from config.defaults import default_optimizer_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return
    mgr.save(default_optimizer_config())


@cmd_config.command("edit")
def config_edit():
    """Bearbeitet die Konfiguration interaktiv."""
    mgr, config = _load_config_or_abort()
    mgr.edit_interactive(config)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für JSON-Export.")
@click.option("--coverage", default=0.7, type=click.FloatRange(0.0, 1.0),
              help="Anteil der bereits besetzten Stundentafel.")
def cmd_generate(seed: int, json_path: str, coverage: float):
    """Erzeugt einen Demo-Datensatz (Lehrkräfte, Klassen, Fächer, Ist-Stand)."""
    from data.fake_data import FakeDataGenerator

    console.print("[bold]Testdaten werden generiert...[/bold]")
    gen = FakeDataGenerator(seed=seed, coverage=coverage)
    data = gen.generate()
    gen.print_summary(data)
    console.print(f"\n[dim]{data.summary()}[/dim]")

    out_path = Path(json_path)
    data.save_json(out_path)
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── OPTIMIZE ─────────────────────────────────────────────────────────────────

def _settings_with_overrides(settings, overrides: dict):
    """Übernimmt nur explizit gesetzte Schalter (None = aus Config)."""
    update = {k: v for k, v in overrides.items() if v is not None}
    return settings.model_copy(update=update) if update else settings


@click.command("optimize")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
@click.option("--report", "report_path", default=None,
              help="Textbericht in diese Datei schreiben.")
@click.option("--excel", "excel_path", default=None,
              help="Ergebnis als Excel-Datei speichern.")
@click.option("--qualifications/--no-qualifications", default=None,
              help="Qualifikation priorisieren (überschreibt Config).")
@click.option("--balance/--no-balance", default=None,
              help="Arbeitsbelastung ausgleichen (überschreibt Config).")
@click.option("--respect-max/--ignore-max", default=None,
              help="Maximalstunden einhalten (überschreibt Config).")
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliches Logging.")
def cmd_optimize(
    json_path: str,
    report_path: Optional[str],
    excel_path: Optional[str],
    qualifications: Optional[bool],
    balance: Optional[bool],
    respect_max: Optional[bool],
    verbose: bool,
):
    """Berechnet Zuweisungsempfehlungen für den gespeicherten Datensatz."""
    _setup_logging(verbose)
    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(json_path)

    from optimizer.curriculum import CurriculumTable
    from optimizer.engine import run_optimization

    settings = _settings_with_overrides(config.settings, {
        "prioritize_qualifications": qualifications,
        "balance_workload": balance,
        "respect_max_hours": respect_max,
    })

    console.print(f"[bold]Lade Datensatz:[/bold] {json_path}")
    console.print(f"\n[dim]{data.summary()}[/dim]\n")

    result = run_optimization(
        data.teachers, data.classes, data.subjects, data.assignments,
        settings=settings,
        curriculum=CurriculumTable.from_config(config.curriculum),
        config=config,
    )
    result.print_rich()

    if report_path:
        from export.text_report import generate_optimization_report
        out = Path(report_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(generate_optimization_report(result), encoding="utf-8")
        console.print(f"[green]✓[/green] Bericht gespeichert: {out}")

    if excel_path:
        from export.excel_export import ExcelExporter
        ExcelExporter(result, data).export(Path(excel_path))
        console.print(f"[green]✓[/green] Excel gespeichert: {excel_path}")


# ─── CONFLICTS ────────────────────────────────────────────────────────────────

@click.command("conflicts")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
def cmd_conflicts(json_path: str):
    """Durchsucht den Ist-Stand nach Konflikten. Exit-Code 1 bei kritischen Befunden."""
    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(json_path)

    from analysis.conflict_analyzer import analyze_conflicts
    from optimizer.curriculum import CurriculumTable

    matrix = analyze_conflicts(
        data.teachers, data.classes, data.subjects, data.assignments,
        CurriculumTable.from_config(config.curriculum),
    )
    matrix.print_rich()
    sys.exit(1 if matrix.by_severity("critical") else 0)


# ─── CHECK ────────────────────────────────────────────────────────────────────

@click.command("check")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
@click.option("--teacher", "teacher_id", required=True, help="ID der Lehrkraft.")
@click.option("--class", "class_id", required=True, help="ID der Klasse.")
@click.option("--subject", "subject_key", required=True,
              help="ID, Name oder Kürzel des Fachs.")
@click.option("--hours", required=True, type=float, help="Wochenstunden.")
def cmd_check(json_path: str, teacher_id: str, class_id: str, subject_key: str, hours: float):
    """Prüft eine geplante Zuweisung vor dem Speichern."""
    data = _load_data_or_abort(json_path)

    from analysis.assignment_validator import validate_assignment_with_context
    from analysis.conflict_analyzer import detect_assignment_conflicts
    from optimizer.requirements import build_class_total_constraints
    from optimizer.types import RecommendedAssignment

    subject = data.find_subject(subject_key)
    candidate = RecommendedAssignment(
        teacher_id=teacher_id,
        class_id=class_id,
        subject_id=subject.id if subject else subject_key,
        hours_per_week=hours,
        confidence=0.0,
        reasoning=["Manuelle Prüfung"],
    )

    check = detect_assignment_conflicts(
        candidate, data.teachers, data.classes, data.subjects, data.assignments
    )
    validation = validate_assignment_with_context(
        candidate, data.teachers, data.subjects, data.classes, data.assignments,
        build_class_total_constraints(data.classes, data.assignments),
    )

    table = Table(title="Vorab-Prüfung", box=box.ROUNDED)
    table.add_column("Art", style="bold")
    table.add_column("Meldung")
    for text in check.conflicts:
        table.add_row("[red]Konflikt[/red]", text)
    for text in validation.violations:
        table.add_row("[red]Verstoß[/red]", text)
    for text in dict.fromkeys(check.warnings + validation.warnings):
        table.add_row("[yellow]Warnung[/yellow]", text)
    if table.row_count:
        console.print(table)

    ok = not check.has_conflicts and validation.is_valid
    console.print(Panel(
        "[green]Zuweisung zulässig[/green]" if ok else "[red]Zuweisung nicht zulässig[/red]",
        border_style="green" if ok else "red",
    ))
    sys.exit(0 if ok else 1)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
def cli():
    """Lehrerzuweisungs-Optimierer für Realschulen (Sek I).

    Starten Sie mit: python main.py generate
    """


def main():
    cli()


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_optimize)
cli.add_command(cmd_conflicts)
cli.add_command(cmd_check)


if __name__ == "__main__":
    main()
