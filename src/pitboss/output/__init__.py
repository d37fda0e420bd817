"""Output generation for schedules and statistics (text, PDF)."""

from pitboss.output.pdf_generator import PDFGenerator
from pitboss.output.text_export import TextExporter

__all__ = [
    "PDFGenerator",
    "TextExporter",
]
