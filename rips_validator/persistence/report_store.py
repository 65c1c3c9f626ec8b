"""
Report Store

Keeps the last report text produced for each invoice so it can be fetched
again later, and writes it to disk next to the other validation reports.

A failed write never fails the validation: it is appended to the report
as one extra invoice-level line.
"""

import threading
from pathlib import Path
from typing import Dict, Optional

from ..config.settings import get_settings
from ..models.validation_result import Finding, ValidationReport
from ..utils.error_handler import ErrorCode
from ..utils.logger import get_logger
from ..utils.reporting import ReportRenderer, get_report_renderer, report_filename

logger = get_logger("report_store")


class ReportStore:
    """Concurrency-safe cache of rendered reports, keyed by invoice number."""

    def __init__(
        self,
        report_dir: str = "reportes",
        write_to_disk: bool = True,
        renderer: Optional[ReportRenderer] = None
    ):
        """
        Initialize the report store.

        Args:
            report_dir: Directory where report files are written
            write_to_disk: Whether to write report files at all
            renderer: ReportRenderer instance (uses singleton if None)
        """
        self.report_dir = Path(report_dir)
        self.write_to_disk = write_to_disk
        self.renderer = renderer or get_report_renderer()
        self._reports: Dict[str, str] = {}
        self._lock = threading.Lock()

    def _write(self, report: ValidationReport, text: str) -> Path:
        self.report_dir.mkdir(parents=True, exist_ok=True)
        path = self.report_dir / report_filename(report.invoice_number)
        path.write_text(text, encoding="utf-8")
        return path

    def publish(self, report: ValidationReport) -> ValidationReport:
        """
        Persist and cache a report.

        Args:
            report: Report returned by the validation engine

        Returns:
            The report as handed to the caller, with a persistence failure
            finding appended when the file could not be written
        """
        text = self.renderer.render_text(report)

        if self.write_to_disk:
            try:
                path = self._write(report, text)
                logger.info("Report written", invoice=report.invoice_number, path=str(path))
            except OSError as e:
                logger.warning(
                    "Could not write report file",
                    invoice=report.invoice_number,
                    reason=str(e)
                )
                report = report.with_finding(Finding(
                    error_code=ErrorCode.REPORT_PERSISTENCE_FAILURE,
                    category="Error escribiendo reporte",
                    detail=f"No se pudo escribir archivo en disco: {e}",
                ))
                text = self.renderer.render_text(report)

        with self._lock:
            self._reports[report.invoice_number] = text

        return report

    def get(self, invoice_number: str) -> Optional[str]:
        """Cached report text for an invoice, or None."""
        with self._lock:
            return self._reports.get(invoice_number)

    def clear(self) -> None:
        """Forget every cached report."""
        with self._lock:
            self._reports.clear()


# Singleton instance
_store_instance: Optional[ReportStore] = None
_store_lock = threading.Lock()


def get_report_store() -> ReportStore:
    """Get singleton instance of ReportStore, configured from settings."""
    global _store_instance
    with _store_lock:
        if _store_instance is None:
            settings = get_settings()
            _store_instance = ReportStore(
                report_dir=settings.report_dir,
                write_to_disk=settings.write_reports
            )
        return _store_instance
