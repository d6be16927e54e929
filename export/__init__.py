"""Export-Modul: Textbericht und Excel (openpyxl) für Optimierungsergebnisse."""

from export.excel_export import ExcelExporter
from export.text_report import generate_optimization_report

__all__ = ["ExcelExporter", "generate_optimization_report"]
