"""Excel-Export für ein Optimierungsergebnis (openpyxl)."""

from pathlib import Path
from typing import Optional

from models.school_data import SchoolData
from optimizer.types import OptimizationResult

COLORS: dict[str, str] = {
    "header":   "4472C4",
    "optimal":  "B3FFB3",
    "good":     "D9F2D9",
    "warning":  "FFF2B3",
    "poor":     "FF9999",
    "critical": "FF9999",
    "high":     "FFD4B3",
    "medium":   "FFF2B3",
    "low":      "F5F5F5",
}


class ExcelExporter:
    """Schreibt ein OptimizationResult in eine Excel-Datei mit 3 Sheets."""

    COL_NARROW_W = 12
    COL_WIDE_W   = 28
    COL_TEXT_W   = 80

    ROW_HEADER_H = 22

    def __init__(self, result: OptimizationResult, school_data: Optional[SchoolData] = None):
        self.result = result
        self.data   = school_data

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> None:
        """Erstellt die Datei mit den Sheets Übersicht, Empfehlungen, Konflikte."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)

        self._sheet_uebersicht(wb)
        self._sheet_empfehlungen(wb)
        self._sheet_konflikte(wb)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header_row(self, ws, headers: list[str], row: int = 1) -> None:
        from openpyxl.styles import Alignment, Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = border
        ws.row_dimensions[row].height = self.ROW_HEADER_H

    def _set_widths(self, ws, widths: list[int]) -> None:
        from openpyxl.utils import get_column_letter
        for col, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = width

    # ─── Anzeigenamen ─────────────────────────────────────────────────────────

    def _teacher_label(self, teacher_id: str) -> str:
        if self.data is None:
            return teacher_id
        t = self.data.teacher_map().get(teacher_id)
        return f"{t.name} ({t.short_name})" if t else teacher_id

    def _class_label(self, class_id: str) -> str:
        if self.data is None:
            return class_id
        c = self.data.class_map().get(class_id)
        return (c.name or c.id) if c else class_id

    def _subject_label(self, subject_id: str) -> str:
        if self.data is None:
            return subject_id
        s = self.data.subject_map().get(subject_id)
        return s.name if s else subject_id

    # ─── Sheets ───────────────────────────────────────────────────────────────

    def _sheet_uebersicht(self, wb) -> None:
        from openpyxl.styles import Font
        ws = wb.create_sheet("Übersicht")
        self._set_widths(ws, [self.COL_WIDE_W, self.COL_NARROW_W, self.COL_TEXT_W])
        r = self.result

        ws.cell(row=1, column=1, value="Optimierungsergebnis").font = Font(bold=True, size=14)
        if self.data is not None:
            ws.cell(row=2, column=1, value=self.data.school_name).font = Font(italic=True)

        summary = [
            ("Neue Zuweisungen", r.new_assignments),
            ("Gelöste Konflikte", r.resolved_conflicts),
            ("Effizienzsteigerung (%)", round(r.efficiency_gain, 1)),
            ("Gesamtbewertung", r.overall_score),
        ]
        row = 4
        for label, value in summary:
            ws.cell(row=row, column=1, value=label).font = Font(bold=True)
            ws.cell(row=row, column=2, value=value)
            row += 1
        ws.cell(row=row - 1, column=2).fill = self._fill(COLORS[r.overall_score])

        row += 1
        self._write_header_row(ws, ["Metrik", "Wert (%)", "Beschreibung"], row=row)
        border = self._thin_border()
        for m in r.metrics:
            row += 1
            for col, value in enumerate((m.name, round(m.score, 1), m.description), 1):
                ws.cell(row=row, column=col, value=value).border = border

        if r.warnings:
            row += 2
            ws.cell(row=row, column=1, value="Warnungen").font = Font(bold=True)
            for warning in r.warnings:
                row += 1
                ws.cell(row=row, column=1, value=warning)

    def _sheet_empfehlungen(self, wb) -> None:
        ws = wb.create_sheet("Empfehlungen")
        self._set_widths(ws, [
            self.COL_WIDE_W, self.COL_NARROW_W, self.COL_WIDE_W,
            self.COL_NARROW_W, self.COL_NARROW_W, self.COL_TEXT_W,
        ])
        self._write_header_row(
            ws, ["Lehrkraft", "Klasse", "Fach", "Stunden", "Vertrauen (%)", "Begründung"]
        )
        border = self._thin_border()
        for row, rec in enumerate(self.result.recommended_assignments, 2):
            values = (
                self._teacher_label(rec.teacher_id),
                self._class_label(rec.class_id),
                self._subject_label(rec.subject_id),
                rec.hours_per_week,
                round(rec.confidence, 1),
                "; ".join(rec.reasoning),
            )
            for col, value in enumerate(values, 1):
                ws.cell(row=row, column=col, value=value).border = border
        ws.freeze_panes = "A2"

    def _sheet_konflikte(self, wb) -> None:
        ws = wb.create_sheet("Konflikte")
        self._set_widths(ws, [
            self.COL_NARROW_W, self.COL_NARROW_W, self.COL_WIDE_W, self.COL_TEXT_W,
        ])
        self._write_header_row(ws, ["Schwere", "Art", "Betroffen", "Beschreibung"])
        border = self._thin_border()
        for row, conflict in enumerate(self.result.conflicts, 2):
            values = (
                conflict.severity,
                conflict.type,
                f"{conflict.entity_kind}:{conflict.entity_id}",
                conflict.description,
            )
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = border
            ws.cell(row=row, column=1).fill = self._fill(COLORS[conflict.severity])
        ws.freeze_panes = "A2"
