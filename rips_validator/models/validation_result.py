"""
Validation Result Data Models

Defines the structure of a single finding and of the report that collects
the findings for one invoice.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Tuple

from ..config.constants import (
    FALLBACK_INVOICE_NUMBER,
    INVOICE_LEVEL_MARKER,
    NOT_AVAILABLE,
    RuleProfile,
)
from ..utils.error_handler import ErrorCode, INVOICE_LEVEL_CODES


class Finding(BaseModel):
    """One reported validation issue"""

    model_config = ConfigDict(frozen=True)

    patient_sequence: Optional[int] = Field(None, description="consecutivo of the patient")
    error_code: ErrorCode = Field(..., description="Kind of finding")
    category: str = Field(..., description="Human-readable rule category")
    date: Optional[str] = Field(None, description="Attention date implicated")
    code: Optional[str] = Field(None, description="Code implicated (service, diagnosis, document)")
    detail: str = Field("", description="Explanation and suggested fix")

    @property
    def is_invoice_level(self) -> bool:
        """Whether the finding concerns the invoice rather than a patient"""
        return self.error_code in INVOICE_LEVEL_CODES

    def render(self) -> str:
        """Render the finding as one report line."""
        if self.is_invoice_level:
            return f"{INVOICE_LEVEL_MARKER} {self.detail}"

        return (
            f"Usuario consecutivo {self.patient_sequence} -> {self.category}"
            f" en {self.date if self.date is not None else NOT_AVAILABLE}"
            f" con código {self.code if self.code is not None else ''}."
            f" {self.detail}"
        ).rstrip()


class ValidationReport(BaseModel):
    """Findings for one invoice, in emission order"""

    model_config = ConfigDict(frozen=True)

    invoice_number: str = Field(FALLBACK_INVOICE_NUMBER, description="numFactura")
    profile: RuleProfile = Field(RuleProfile.COMPLETO, description="Rule profile applied")
    findings: Tuple[Finding, ...] = Field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        """An invoice passes when no finding was emitted"""
        return len(self.findings) == 0

    def findings_by_code(self, code: ErrorCode) -> List[Finding]:
        """Findings of one kind, in emission order."""
        return [f for f in self.findings if f.error_code == code]

    def findings_for_patient(self, patient_sequence: int) -> List[Finding]:
        """Findings reported for one patient, in emission order."""
        return [f for f in self.findings if f.patient_sequence == patient_sequence]

    def with_finding(self, finding: Finding) -> "ValidationReport":
        """Return a copy of the report with one more finding at the end."""
        return self.model_copy(update={"findings": self.findings + (finding,)})
