"""
Integration Tests for the Validation Engine
Whole invoices through the rule profiles
"""

import pytest

from conftest import consulta, procedimiento, usuario
from rips_validator.config.constants import RuleProfile
from rips_validator.utils.error_handler import ErrorCode


@pytest.mark.integration
class TestInvoiceLevel:
    """Test findings that concern the invoice as a whole"""

    @pytest.mark.parametrize("usuarios", [None, []])
    def test_no_patients(self, engine, build_invoice, usuarios):
        report = engine.validate(build_invoice(usuarios))

        assert len(report.findings) == 1
        finding = report.findings[0]
        assert finding.error_code == ErrorCode.MISSING_PATIENT_LIST
        assert finding.render() == "⚠️ No se encontraron usuarios en la factura."

    def test_clean_invoice_has_no_findings(self, engine, build_invoice):
        invoice = build_invoice([usuario([consulta()], [procedimiento()])])
        report = engine.validate(invoice)

        assert report.is_valid
        assert report.invoice_number == "FE1234"
        assert report.profile == RuleProfile.COMPLETO

    def test_missing_invoice_number(self, engine, build_invoice):
        report = engine.validate(build_invoice([usuario([consulta()])], numFactura=None))
        assert report.invoice_number == "sin_numfact"


@pytest.mark.integration
class TestPatientLevel:
    """Test per-patient behavior"""

    def test_missing_services_section(self, engine, build_invoice):
        invoice = build_invoice([
            usuario(with_services=False, consecutivo=1),
            usuario([consulta()], consecutivo=2),
        ])
        report = engine.validate(invoice)

        patient_findings = report.findings_for_patient(1)
        assert len(patient_findings) == 1
        assert patient_findings[0].error_code == ErrorCode.MISSING_SERVICES_SECTION
        assert patient_findings[0].code == "1017000000"
        assert report.findings_for_patient(2) == []

    def test_duplicates_are_per_patient(self, engine, build_invoice):
        invoice = build_invoice([
            usuario([consulta()], consecutivo=1),
            usuario([consulta()], consecutivo=2),
        ])
        assert engine.validate(invoice).is_valid

    def test_duplicate_consultation(self, engine, build_invoice):
        invoice = build_invoice([usuario([consulta(), consulta(fechaInicioAtencion="2025-04-22 16:00")])])
        report = engine.validate(invoice)

        duplicates = report.findings_by_code(ErrorCode.DUPLICATE_SERVICE_LINE)
        assert len(duplicates) == 1
        assert duplicates[0].date == "2025-04-22 16:00"

    def test_consultations_before_procedures(self, engine, build_invoice):
        invoice = build_invoice([usuario(
            [consulta(), consulta()],
            [procedimiento(consecutivo=7), procedimiento(consecutivo=8)],
        )])
        report = engine.validate(invoice)

        categories = [f.category for f in report.findings]
        assert categories == ["Consulta duplicada", "Procedimiento duplicado"]
        assert "(Consecutivo procedimiento: 8)" in report.findings[1].detail


@pytest.mark.integration
class TestDocumentAndDates:
    """Test the document rule through the engine"""

    def test_minor_with_cc(self, engine, build_invoice):
        invoice = build_invoice([usuario(
            [consulta()],
            tipoDocumentoIdentificacion="CC",
            fechaNacimiento="2015-01-01",
        )])
        findings = engine.validate(invoice).findings_by_code(ErrorCode.AGE_DOCUMENT_MISMATCH)

        assert len(findings) == 1
        assert findings[0].detail.startswith("Edad en la atención: 10 años,")

    def test_empty_attention_date(self, engine, build_invoice):
        invoice = build_invoice([usuario([consulta(fechaInicioAtencion="")])])
        report = engine.validate(invoice)

        assert [f.error_code for f in report.findings] == [ErrorCode.EMPTY_DATE]

    def test_broken_birth_date_still_checks_allowed_types(self, engine, build_invoice):
        invoice = build_invoice([usuario(
            [consulta()],
            tipoDocumentoIdentificacion="XX",
            fechaNacimiento="sin dato",
        )])
        codes = [f.error_code for f in engine.validate(invoice).findings]

        assert codes == [ErrorCode.INVALID_BIRTH_DATE, ErrorCode.INVALID_DOCUMENT_TYPE]

    def test_attention_before_birth(self, engine, build_invoice):
        invoice = build_invoice([usuario(
            [consulta(fechaInicioAtencion="2024-06-01 08:00")],
            tipoDocumentoIdentificacion="CC",
            fechaNacimiento="2026-01-01",
        )])
        findings = engine.validate(invoice).findings

        assert [f.error_code for f in findings] == [ErrorCode.AGE_DOCUMENT_MISMATCH]
        assert findings[0].detail.startswith("Edad en la atención: -1 años, -579 días.")


@pytest.mark.integration
class TestProfiles:
    """Test rule selection per profile"""

    def _diagnosis_invoice(self, build_invoice):
        return build_invoice([usuario([
            consulta(codDiagnosticoPrincipal="Z300", finalidadTecnologiaSalud="11"),
        ])])

    @pytest.mark.parametrize("profile", [RuleProfile.COMPLETO, RuleProfile.PYP])
    def test_diagnosis_rules_enabled(self, engine, build_invoice, profile):
        report = engine.validate(self._diagnosis_invoice(build_invoice), profile)

        assert [f.error_code for f in report.findings] == [
            ErrorCode.FINALITY_MISMATCH,
            ErrorCode.DIAGNOSIS_NOT_IN_REFERENCE_SET,
        ]

    def test_morbidity_skips_diagnosis_rules(self, engine, build_invoice):
        report = engine.validate(self._diagnosis_invoice(build_invoice), RuleProfile.MORB)
        assert report.is_valid
        assert report.profile == RuleProfile.MORB


@pytest.mark.integration
class TestLineFailures:
    """Test that a failing line never stops the invoice"""

    def test_failing_rule_becomes_read_error(self, engine, build_invoice, monkeypatch):
        line_validator = engine._patient_validators[RuleProfile.COMPLETO].line_validator
        original = line_validator.finality_rule.evaluate

        def flaky(patient_sequence, line):
            if line.cod_diagnostico_principal == "Z999":
                raise RuntimeError("lectura fallida")
            return original(patient_sequence, line)

        monkeypatch.setattr(line_validator.finality_rule, "evaluate", flaky)

        invoice = build_invoice([usuario([
            consulta(codDiagnosticoPrincipal="Z999"),
            consulta(codDiagnosticoPrincipal="Z999"),
            consulta(codDiagnosticoPrincipal="Z300", finalidadTecnologiaSalud="11", codConsulta="890301"),
        ])])
        report = engine.validate(invoice)

        assert [f.error_code for f in report.findings] == [
            ErrorCode.LINE_READ_ERROR,
            ErrorCode.DUPLICATE_SERVICE_LINE,
            ErrorCode.LINE_READ_ERROR,
            ErrorCode.FINALITY_MISMATCH,
            ErrorCode.DIAGNOSIS_NOT_IN_REFERENCE_SET,
        ]
        read_error = report.findings[0]
        assert read_error.category == "Error lectura consulta"
        assert read_error.code == "890201"
        assert read_error.detail == "Error procesando consulta: lectura fallida"
