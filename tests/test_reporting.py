"""
Unit Tests for Report Rendering and the Report Store
"""

import json

import pytest

from rips_validator.config.constants import RuleProfile
from rips_validator.models.validation_result import Finding, ValidationReport
from rips_validator.persistence.report_store import ReportStore
from rips_validator.utils.error_handler import ErrorCode
from rips_validator.utils.reporting import ReportRenderer, report_filename


SEPARATOR = "=" * 74


@pytest.fixture
def renderer():
    return ReportRenderer()


@pytest.fixture
def sample_report():
    return ValidationReport(
        invoice_number="FE1234",
        profile=RuleProfile.COMPLETO,
        findings=(
            Finding(
                patient_sequence=1,
                error_code=ErrorCode.DUPLICATE_SERVICE_LINE,
                category="Consulta duplicada",
                date="2025-04-22 13:57",
                code="890201",
                detail="Detalle.",
            ),
            Finding(
                patient_sequence=2,
                error_code=ErrorCode.MISSING_SERVICES_SECTION,
                category="Sin sección 'servicios'",
                code="43000000",
                detail="Sin servicios.",
            ),
        ),
    )


@pytest.mark.unit
class TestReportRenderer:
    """Test the text layout of the report"""

    def test_layout(self, renderer, sample_report):
        text = renderer.render_text(sample_report)

        assert text == (
            "Validación factura: FE1234\n"
            f"{SEPARATOR}\n"
            "Usuario consecutivo 1 -> Consulta duplicada en 2025-04-22 13:57 con código 890201. Detalle.\n"
            "Usuario consecutivo 2 -> Sin sección 'servicios' en N/A con código 43000000. Sin servicios.\n"
        )

    def test_clean_report_has_only_header(self, renderer):
        text = renderer.render_text(ValidationReport(invoice_number="FE1"))
        assert text.splitlines() == ["Validación factura: FE1", SEPARATOR]

    def test_invoice_level_line(self, renderer):
        report = ValidationReport(invoice_number="FE1").with_finding(Finding(
            error_code=ErrorCode.MISSING_PATIENT_LIST,
            category="Factura sin usuarios",
            detail="No se encontraron usuarios en la factura.",
        ))
        assert renderer.render_lines(report)[-1] == "⚠️ No se encontraron usuarios en la factura."

    def test_json_export(self, renderer, sample_report):
        exported = json.loads(renderer.export_to_json(sample_report))

        assert exported["num_factura"] == "FE1234"
        assert exported["valida"] is False
        assert exported["total_hallazgos"] == 2
        assert exported["hallazgos_por_tipo"] == {
            "DUPLICATE_SERVICE_LINE": 1,
            "MISSING_SERVICES_SECTION": 1,
        }

    def test_filename(self):
        assert report_filename("FE1234") == "errores_validacion_fact_FE1234.txt"
        assert report_filename(None) == "errores_validacion_fact_sin_numfact.txt"


@pytest.mark.unit
class TestReportStore:
    """Test writing and caching reports"""

    def test_publish_writes_and_caches(self, report_store, sample_report):
        published = report_store.publish(sample_report)

        path = report_store.report_dir / "errores_validacion_fact_FE1234.txt"
        assert published == sample_report
        assert path.read_text(encoding="utf-8") == report_store.get("FE1234")
        assert report_store.get("FE9999") is None

    def test_last_report_wins(self, report_store, sample_report):
        report_store.publish(sample_report)
        report_store.publish(ValidationReport(invoice_number="FE1234"))

        assert report_store.get("FE1234").splitlines() == ["Validación factura: FE1234", SEPARATOR]

    def test_disk_writes_can_be_disabled(self, tmp_path, sample_report):
        store = ReportStore(report_dir=str(tmp_path / "reportes"), write_to_disk=False)
        store.publish(sample_report)

        assert not (tmp_path / "reportes").exists()
        assert store.get("FE1234") is not None

    def test_write_failure_is_reported(self, tmp_path, sample_report):
        blocker = tmp_path / "ocupado"
        blocker.write_text("", encoding="utf-8")
        store = ReportStore(report_dir=str(blocker / "reportes"))

        published = store.publish(sample_report)

        failures = published.findings_by_code(ErrorCode.REPORT_PERSISTENCE_FAILURE)
        assert len(failures) == 1
        last_line = store.get("FE1234").splitlines()[-1]
        assert last_line.startswith("⚠️ No se pudo escribir archivo en disco: ")
