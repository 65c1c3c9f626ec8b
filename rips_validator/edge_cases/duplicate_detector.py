"""
Duplicate Detector Module

Flags service lines billed more than once for the same patient.

Business Rules:
- Duplicate = same patient document + same service code + same purpose code
  + same principal diagnosis + same attention day
- Consultations and procedures are tracked apart; a consultation never
  duplicates a procedure
- History lives for one patient of one invoice and is then discarded
"""

from typing import Optional, Set
from pydantic import BaseModel

from ..config.constants import (
    DATE_PREFIX_LENGTH,
    DUPLICATE_KEY_SEPARATOR,
    MISSING_DOCUMENT_PREFIX,
    LineKind,
)
from ..models.invoice import Patient, ServiceLine
from ..models.validation_result import Finding
from ..utils.error_handler import ErrorCode


class DuplicateDetectionResult(BaseModel):
    """Result of checking one service line"""
    is_duplicate: bool
    key: str


def _safe(value: Optional[object]) -> str:
    return "" if value is None else str(value)


def patient_document_key(patient: Patient) -> str:
    """Document number of the patient, or ND-<consecutivo> when missing."""
    if patient.num_documento is None:
        return f"{MISSING_DOCUMENT_PREFIX}{patient.consecutivo}"
    return patient.num_documento


def build_duplicate_key(patient: Patient, line: ServiceLine) -> str:
    """
    Composite key identifying a service line within a patient.

    Args:
        patient: Owner of the line
        line: Consultation or procedure

    Returns:
        Key made of line kind, patient document, service code, purpose code,
        principal diagnosis and attention day
    """
    attention = _safe(line.fecha_inicio_atencion)
    day = attention[:DATE_PREFIX_LENGTH]

    return DUPLICATE_KEY_SEPARATOR.join([
        line.kind.value,
        patient_document_key(patient),
        _safe(line.service_code),
        _safe(line.finalidad),
        _safe(line.cod_diagnostico_principal),
        day,
    ])


class DuplicateTracker:
    """
    Set of keys seen for one patient.

    Create one per patient; never share it across patients or invoices.
    """

    def __init__(self):
        self._seen: Set[str] = set()

    def observe(self, key: str) -> bool:
        """
        Register a key.

        Returns:
            True if the key had already been seen (duplicate), False otherwise
        """
        if key in self._seen:
            return True
        self._seen.add(key)
        return False

    def __len__(self) -> int:
        return len(self._seen)

    def check_line(self, patient: Patient, line: ServiceLine) -> DuplicateDetectionResult:
        """Build the key of a line and observe it."""
        key = build_duplicate_key(patient, line)
        return DuplicateDetectionResult(is_duplicate=self.observe(key), key=key)


def duplicate_finding(patient: Patient, line: ServiceLine) -> Finding:
    """Finding emitted for the second and later occurrences of a line."""
    if line.kind == LineKind.CONSULTA:
        category = "Consulta duplicada"
        detail = (
            "El paciente tiene otra consulta con el mismo código, finalidad "
            "y diagnóstico en la misma fecha."
        )
    else:
        category = "Procedimiento duplicado"
        detail = (
            "El paciente tiene otro procedimiento con el mismo código, finalidad "
            "y diagnóstico en la misma fecha. "
            f"(Consecutivo procedimiento: {_safe(line.consecutivo) or 'N/A'})"
        )

    return Finding(
        patient_sequence=patient.consecutivo,
        error_code=ErrorCode.DUPLICATE_SERVICE_LINE,
        category=category,
        date=line.fecha_inicio_atencion,
        code=line.service_code,
        detail=detail,
    )
