"""
Validation Engine

Core orchestrator for RIPS invoice validation.
Walks every patient and every service line of an invoice through the rules
enabled by the selected profile and collects the findings in order.
"""

import time
from typing import Callable, Dict, List, Optional

from ..config.constants import (
    DEFAULT_RULE_PROFILE,
    FALLBACK_INVOICE_NUMBER,
    LineKind,
    RuleId,
    RuleProfile,
)
from ..edge_cases.document_type_checker import DocumentTypeRule, get_document_type_rule
from ..edge_cases.duplicate_detector import DuplicateTracker, duplicate_finding
from ..models.invoice import Invoice, Patient, ServiceLine
from ..models.validation_result import Finding, ValidationReport
from ..utils.date_utils import calculate_age
from ..utils.error_handler import ErrorCode, ErrorHandler, RipsError
from ..utils.logger import get_logger
from .diagnosis_rules import DiagnosisConsistencyRule, DiagnosisFinalityRule
from .rule_loader import RuleLoader, get_rule_loader


logger = get_logger("validation_engine")


DATE_ERROR_CATEGORIES = {
    ErrorCode.EMPTY_DATE: "Fecha de atención vacía",
    ErrorCode.INVALID_DATE_FORMAT: "Formato de fecha de atención inválido",
    ErrorCode.INVALID_BIRTH_DATE: "Fecha de nacimiento inválida",
}


class ServiceLineValidator:
    """
    Runs the enabled rules over one consultation or procedure line.

    A failure inside any rule is captured as a value and reported as a
    single read error for the line; findings produced before it are kept.
    """

    def __init__(
        self,
        enabled_rules: List[RuleId],
        document_rule: DocumentTypeRule,
        finality_rule: DiagnosisFinalityRule,
        consistency_rule: DiagnosisConsistencyRule,
        error_handler: Optional[ErrorHandler] = None
    ):
        self.enabled_rules = list(enabled_rules)
        self.document_rule = document_rule
        self.finality_rule = finality_rule
        self.consistency_rule = consistency_rule
        self.error_handler = error_handler or ErrorHandler(logger)

        self._checks: Dict[RuleId, Callable[[Patient, ServiceLine, DuplicateTracker], List[Finding]]] = {
            RuleId.DUPLICATES: self._check_duplicate,
            RuleId.DOCUMENT_AGE: self._check_document_age,
            RuleId.DIAGNOSIS_FINALITY: self._check_finality,
            RuleId.DIAGNOSIS_CONSISTENCY: self._check_consistency,
        }

    def validate(
        self,
        patient: Patient,
        line: ServiceLine,
        tracker: DuplicateTracker,
        kind: LineKind
    ) -> List[Finding]:
        """
        Validate one service line.

        Args:
            patient: Owner of the line
            line: Consultation or procedure
            tracker: Duplicate tracker of the patient
            kind: Whether the line came from consultas or procedimientos

        Returns:
            Findings for the line, in rule order
        """
        findings: List[Finding] = []
        result = self.error_handler.wrap_operation(
            self._run_rules, patient, line, tracker, findings
        )
        if not result.success:
            findings.append(self._read_error_finding(patient, line, kind, result.error))
        return findings

    def _run_rules(
        self,
        patient: Patient,
        line: ServiceLine,
        tracker: DuplicateTracker,
        findings: List[Finding]
    ) -> None:
        for rule_id in self.enabled_rules:
            findings.extend(self._checks[rule_id](patient, line, tracker))

    def _check_duplicate(self, patient: Patient, line: ServiceLine, tracker: DuplicateTracker) -> List[Finding]:
        if tracker.check_line(patient, line).is_duplicate:
            return [duplicate_finding(patient, line)]
        return []

    def _check_document_age(self, patient: Patient, line: ServiceLine, tracker: DuplicateTracker) -> List[Finding]:
        findings: List[Finding] = []
        attention_date = line.fecha_inicio_atencion

        age = calculate_age(patient.fecha_nacimiento, attention_date)
        if age.success:
            years, days = age.value.years, age.value.days
        else:
            findings.append(self._date_finding(patient, line, age.error))
            years, days = None, None

        document_finding = self.document_rule.evaluate(patient, attention_date, years, days)
        if document_finding is not None:
            findings.append(document_finding)
        return findings

    def _check_finality(self, patient: Patient, line: ServiceLine, tracker: DuplicateTracker) -> List[Finding]:
        return self.finality_rule.evaluate(patient.consecutivo, line)

    def _check_consistency(self, patient: Patient, line: ServiceLine, tracker: DuplicateTracker) -> List[Finding]:
        finding = self.consistency_rule.evaluate(patient.consecutivo, line)
        return [finding] if finding is not None else []

    def _date_finding(self, patient: Patient, line: ServiceLine, error: RipsError) -> Finding:
        if error.code == ErrorCode.INVALID_BIRTH_DATE:
            code = patient.fecha_nacimiento
        else:
            code = line.fecha_inicio_atencion
        return Finding(
            patient_sequence=patient.consecutivo,
            error_code=error.code,
            category=DATE_ERROR_CATEGORIES.get(error.code, "Error parseando fechas"),
            date=line.fecha_inicio_atencion,
            code=code,
            detail=f"Error parseando fechaNacimiento/fechaInicioAtencion: {error.message}",
        )

    def _read_error_finding(
        self,
        patient: Patient,
        line: ServiceLine,
        kind: LineKind,
        error: RipsError
    ) -> Finding:
        if kind == LineKind.CONSULTA:
            code = getattr(line, "cod_consulta", None)
        else:
            code = getattr(line, "cod_procedimiento", None)
        return Finding(
            patient_sequence=patient.consecutivo,
            error_code=ErrorCode.LINE_READ_ERROR,
            category=f"Error lectura {kind.value}",
            date=getattr(line, "fecha_inicio_atencion", None),
            code=code,
            detail=f"Error procesando {kind.value}: {error.message}",
        )


class PatientValidator:
    """Runs every service line of one patient, with a fresh duplicate tracker."""

    def __init__(self, line_validator: ServiceLineValidator):
        self.line_validator = line_validator

    def validate(self, patient: Patient) -> List[Finding]:
        """
        Validate consultations first, then procedures, in the order given.

        Returns:
            Findings for the patient, in emission order
        """
        if patient.servicios is None:
            return [Finding(
                patient_sequence=patient.consecutivo,
                error_code=ErrorCode.MISSING_SERVICES_SECTION,
                category="Sin sección 'servicios'",
                code=patient.num_documento,
                detail="El usuario no tiene sección 'servicios'; no se validaron consultas ni procedimientos.",
            )]

        tracker = DuplicateTracker()
        findings: List[Finding] = []

        for consulta in patient.servicios.consultas or []:
            findings.extend(
                self.line_validator.validate(patient, consulta, tracker, LineKind.CONSULTA)
            )

        for procedimiento in patient.servicios.procedimientos or []:
            findings.extend(
                self.line_validator.validate(patient, procedimiento, tracker, LineKind.PROCEDIMIENTO)
            )

        logger.log_patient(patient.consecutivo, patient.num_documento, len(findings))
        return findings


class InvoiceValidator:
    """
    Entry point of the rule engine.

    Holds only immutable configuration, so one instance can validate any
    number of invoices, from any number of threads.
    """

    def __init__(
        self,
        rule_loader: Optional[RuleLoader] = None,
        document_rule: Optional[DocumentTypeRule] = None,
        error_handler: Optional[ErrorHandler] = None
    ):
        """
        Initialize the InvoiceValidator.

        Args:
            rule_loader: RuleLoader instance (uses singleton if None)
            document_rule: DocumentTypeRule instance (uses singleton if None)
            error_handler: ErrorHandler used to isolate failing lines
        """
        self.rule_loader = rule_loader or get_rule_loader()
        self.rules = self.rule_loader.load_rules()

        document_rule = document_rule or get_document_type_rule()
        finality_rule = DiagnosisFinalityRule(self.rules.finality_sets)
        consistency_rule = DiagnosisConsistencyRule(self.rules.guideline_diagnoses)

        self._patient_validators: Dict[RuleProfile, PatientValidator] = {
            profile: PatientValidator(
                ServiceLineValidator(
                    enabled_rules=self.rules.rules_for(profile),
                    document_rule=document_rule,
                    finality_rule=finality_rule,
                    consistency_rule=consistency_rule,
                    error_handler=error_handler,
                )
            )
            for profile in RuleProfile
        }

    def validate(
        self,
        invoice: Invoice,
        profile: RuleProfile = DEFAULT_RULE_PROFILE
    ) -> ValidationReport:
        """
        Validate a whole invoice.

        This is the main entry point for invoice validation.

        Args:
            invoice: Parsed invoice
            profile: Rule profile selecting which rules run

        Returns:
            ValidationReport with every finding in emission order
        """
        start_time = time.time()
        invoice_number = invoice.num_factura or FALLBACK_INVOICE_NUMBER
        patients = invoice.usuarios or []
        logger.log_invoice(invoice_number, profile.value, len(patients))

        findings: List[Finding] = []

        if not patients:
            findings.append(Finding(
                error_code=ErrorCode.MISSING_PATIENT_LIST,
                category="Factura sin usuarios",
                detail="No se encontraron usuarios en la factura.",
            ))
        else:
            patient_validator = self._patient_validators[profile]
            for patient in patients:
                findings.extend(patient_validator.validate(patient))

        logger.log_invoice(
            invoice_number,
            profile.value,
            len(patients),
            finding_count=len(findings),
            duration_seconds=time.time() - start_time
        )

        return ValidationReport(
            invoice_number=invoice_number,
            profile=profile,
            findings=tuple(findings),
        )


# Singleton instance
_validation_engine_instance: Optional[InvoiceValidator] = None


def get_validation_engine() -> InvoiceValidator:
    """
    Get singleton instance of InvoiceValidator.

    Returns:
        InvoiceValidator instance
    """
    global _validation_engine_instance
    if _validation_engine_instance is None:
        _validation_engine_instance = InvoiceValidator()
    return _validation_engine_instance
