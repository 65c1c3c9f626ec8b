"""
Findings Report Module

Renders a ValidationReport as the plain-text file handed back to the
provider, and as JSON for integrations that prefer structured output.

Text layout:
    Validación factura: <numFactura>
    ==========================================================================
    Usuario consecutivo <n> -> <categoría> en <fecha|N/A> con código <código>. <detalle>
    ...

No lines after the separator means the invoice passed validation.
"""

from typing import Dict, List, Optional
from datetime import datetime
import json

from ..config.constants import (
    FALLBACK_INVOICE_NUMBER,
    REPORT_FILENAME_TEMPLATE,
    REPORT_HEADER_PREFIX,
    REPORT_SEPARATOR,
)
from ..models.validation_result import ValidationReport


def report_filename(invoice_number: Optional[str]) -> str:
    """File name of the report for an invoice."""
    return REPORT_FILENAME_TEMPLATE.format(
        num_factura=invoice_number or FALLBACK_INVOICE_NUMBER
    )


class ReportRenderer:
    """Renders validation reports for people and for machines."""

    def __init__(self, line_separator: str = "\n"):
        """
        Initialize the renderer.

        Args:
            line_separator: Separator placed after every line, header included
        """
        self.line_separator = line_separator

    def render_lines(self, report: ValidationReport) -> List[str]:
        """Header, separator and one line per finding, in emission order."""
        lines = [
            f"{REPORT_HEADER_PREFIX}{report.invoice_number}",
            REPORT_SEPARATOR,
        ]
        lines.extend(finding.render() for finding in report.findings)
        return lines

    def render_text(self, report: ValidationReport) -> str:
        """Render the whole report as text."""
        return "".join(
            line + self.line_separator for line in self.render_lines(report)
        )

    def export_to_json(self, report: ValidationReport) -> str:
        """
        Export the report as JSON.

        Returns:
            JSON string with the invoice, the profile, a summary and every finding
        """
        result_dict = {
            "num_factura": report.invoice_number,
            "perfil": report.profile.value,
            "valida": report.is_valid,
            "total_hallazgos": len(report.findings),
            "hallazgos_por_tipo": self._count_by_code(report),
            "hallazgos": [
                {
                    "consecutivo_usuario": f.patient_sequence,
                    "tipo": f.error_code.name,
                    "categoria": f.category,
                    "fecha": f.date,
                    "codigo": f.code,
                    "detalle": f.detail,
                    "linea": f.render(),
                }
                for f in report.findings
            ],
            "generado_en": datetime.now().isoformat(),
        }
        return json.dumps(result_dict, indent=2, ensure_ascii=False, default=str)

    def _count_by_code(self, report: ValidationReport) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for finding in report.findings:
            counts[finding.error_code.name] = counts.get(finding.error_code.name, 0) + 1
        return counts


# Singleton instance
_report_renderer_instance: Optional[ReportRenderer] = None


def get_report_renderer() -> ReportRenderer:
    """Get singleton instance of ReportRenderer."""
    global _report_renderer_instance
    if _report_renderer_instance is None:
        _report_renderer_instance = ReportRenderer()
    return _report_renderer_instance
