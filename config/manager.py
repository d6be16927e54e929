"""Konfigurationsmanager: Laden, Speichern, Validieren und interaktives Bearbeiten.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, Prompt
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import OptimizationSettings, OptimizerConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Lehrerzuweisungs-Optimierer — Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "settings": (
        "Optimierungs-Schalter",
        "true/false pro Option. respect_max_hours schützt das Deputat.",
    ),
    "curriculum": (
        "Stundentafel",
        "Jahrgang → Fach → Wochenstunden. Leer (null) = Standard-Stundentafel.",
    ),
    "ideal_utilization": (
        "Schwellwerte",
        "Ziel-Auslastung, akzeptierte Streuung und Budget-Toleranz.",
    ),
}

_SETTING_LABELS = {
    "prioritize_qualifications": "Qualifikation priorisieren",
    "balance_workload": "Arbeitsbelastung ausgleichen",
    "minimize_conflicts": "Konflikte minimieren",
    "respect_max_hours": "Maximalstunden einhalten",
    "allow_partial_assignments": "Teilzuweisungen erlauben",
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "optimizer_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> OptimizerConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return OptimizerConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> OptimizerConfig:
        """Lädt die Config, fällt ohne Datei auf die Standardwerte zurück."""
        from config.defaults import default_optimizer_config
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            return default_optimizer_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: OptimizerConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: OptimizerConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            if field not in cm:
                continue
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        settings_map = CommentedMap(cm["settings"])
        for key, label in _SETTING_LABELS.items():
            if key in settings_map:
                settings_map.yaml_add_eol_comment(label, key)
        cm["settings"] = settings_map

        return cm

    # ─── Anzeige & interaktives Bearbeiten ───

    def print_rich(self, config: OptimizerConfig) -> None:
        """Zeigt die Konfiguration als Tabelle an."""
        console.print(Panel(
            f"[bold]{config.school_name}[/bold]  |  {config.bundesland}",
            title="Optimierer-Konfiguration",
            border_style="cyan",
        ))
        table = Table(title="Schalter", box=box.ROUNDED)
        table.add_column("Option", style="bold")
        table.add_column("Aktiv")
        for key, value in config.settings.model_dump().items():
            mark = "[green]ja[/green]" if value else "[red]nein[/red]"
            table.add_row(_SETTING_LABELS.get(key, key), mark)
        console.print(table)
        stundentafel = "eigene" if config.curriculum else "Standard (Realschule NRW)"
        console.print(
            f"[bold]Stundentafel:[/bold] {stundentafel} | "
            f"Ziel-Auslastung: {config.ideal_utilization:.0f}% | "
            f"Streuung: {config.balance_spread:.0f} | "
            f"Toleranz: ±{config.compliance_tolerance}h"
        )

    def edit_interactive(self, config: OptimizerConfig) -> OptimizerConfig:
        """Interaktives Bearbeitungsmenü für die Konfiguration."""
        while True:
            console.print()
            console.print(Panel("[bold]Konfiguration bearbeiten[/bold]",
                                border_style="cyan"))
            console.print("  [bold]1.[/bold] Optimierungs-Schalter")
            console.print("  [bold]2.[/bold] Schwellwerte")
            console.print("  [bold]0.[/bold] Speichern & Zurück")

            choice = Prompt.ask("\nAuswahl", default="0")

            if choice == "1":
                config = config.model_copy(
                    update={"settings": self._edit_settings(config.settings)}
                )
            elif choice == "2":
                config = config.model_copy(update={
                    "ideal_utilization": FloatPrompt.ask(
                        "Ziel-Auslastung (%)", default=config.ideal_utilization),
                    "balance_spread": FloatPrompt.ask(
                        "Akzeptierte Streuung", default=config.balance_spread),
                    "compliance_tolerance": FloatPrompt.ask(
                        "Budget-Toleranz (h)", default=config.compliance_tolerance),
                })
            elif choice == "0":
                self.save(config)
                break
            else:
                console.print("[yellow]Ungültige Auswahl.[/yellow]")

        return config

    def _edit_settings(self, settings: OptimizationSettings) -> OptimizationSettings:
        """Schalter einzeln abfragen."""
        values = {
            key: Confirm.ask(label, default=getattr(settings, key))
            for key, label in _SETTING_LABELS.items()
        }
        return OptimizationSettings(**values)
