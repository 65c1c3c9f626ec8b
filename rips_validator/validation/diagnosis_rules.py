"""
Diagnosis Rules

Cross-field checks between the principal diagnosis of a service line and
its purpose code (finalidadTecnologiaSalud), and between the diagnoses of a
consultation and the technical guideline reference set.
"""

from typing import List, Optional

from ..models.invoice import ServiceLine
from ..models.validation_result import Finding
from ..utils.error_handler import ErrorCode
from .rule_loader import FinalityCodeSet, ReferenceCodeSet, normalize_code


class DiagnosisFinalityRule:
    """
    Diagnoses of family planning and prenatal care must be billed with the
    purpose code mandated for them.

    Every reference set is checked on its own; a code found in two sets
    yields two findings.
    """

    def __init__(self, finality_sets: List[FinalityCodeSet]):
        self.finality_sets = list(finality_sets)

    def evaluate(self, patient_sequence: int, line: ServiceLine) -> List[Finding]:
        """
        Check one service line.

        Args:
            patient_sequence: consecutivo of the owning patient
            line: Consultation or procedure

        Returns:
            One Finding per reference set whose purpose code is not respected
        """
        findings: List[Finding] = []
        diagnosis = line.cod_diagnostico_principal
        actual = (line.finalidad or "").strip()

        for reference in self.finality_sets:
            if not reference.contains(diagnosis):
                continue
            if actual == reference.required_purpose:
                continue

            findings.append(Finding(
                patient_sequence=patient_sequence,
                error_code=ErrorCode.FINALITY_MISMATCH,
                category="Finalidad no corresponde al diagnóstico",
                date=line.fecha_inicio_atencion,
                code=normalize_code(diagnosis),
                detail=(
                    f"El diagnóstico {normalize_code(diagnosis)} ({reference.label}) "
                    f"exige finalidad '{reference.required_purpose}' "
                    f"y se reportó '{actual}'."
                ),
            ))

        return findings


class DiagnosisConsistencyRule:
    """
    The principal diagnosis of a consultation must belong to the technical
    guideline set. When it does not, the first related diagnosis that does
    is suggested as principal.
    """

    def __init__(self, guideline: ReferenceCodeSet):
        self.guideline = guideline

    def applies_to(self, line: ServiceLine) -> bool:
        """Only line shapes carrying related diagnoses are checked."""
        return line.related_diagnoses is not None

    def evaluate(self, patient_sequence: int, line: ServiceLine) -> Optional[Finding]:
        """
        Check one service line.

        Returns:
            None when the principal diagnosis is accepted or the line has no
            related diagnoses; otherwise exactly one Finding
        """
        if not self.applies_to(line):
            return None

        principal = line.cod_diagnostico_principal
        if self.guideline.contains(principal):
            return None

        related = list(line.related_diagnoses)[:2]
        for position, candidate in enumerate(related, start=1):
            if self.guideline.contains(candidate):
                return self._finding(
                    patient_sequence,
                    line,
                    f"El diagnóstico principal {normalize_code(principal) or 'vacío'} no está "
                    f"en la {self.guideline.label}; el diagnóstico relacionado {position} "
                    f"({normalize_code(candidate)}) sí lo está. Reporte "
                    f"{normalize_code(candidate)} como diagnóstico principal."
                )

        return self._finding(
            patient_sequence,
            line,
            f"Ni el diagnóstico principal ni los relacionados "
            f"({', '.join(normalize_code(c) or 'vacío' for c in related)}) "
            f"están en la {self.guideline.label}."
        )

    def _finding(self, patient_sequence: int, line: ServiceLine, detail: str) -> Finding:
        return Finding(
            patient_sequence=patient_sequence,
            error_code=ErrorCode.DIAGNOSIS_NOT_IN_REFERENCE_SET,
            category="Diagnóstico principal fuera de la guía técnica",
            date=line.fecha_inicio_atencion,
            code=line.cod_diagnostico_principal,
            detail=detail,
        )
