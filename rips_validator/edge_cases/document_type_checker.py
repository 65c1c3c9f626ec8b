"""
Document Type Checker Module

Validates the identity document type of a patient against the allowed RIPS
types and against the age of the patient on the day of attention.

Business Rules:
- MS (menor sin identificación): up to 30 days of life
- RC (registro civil): under 7 years
- TI (tarjeta de identidad): 7 to 17 years
- AS (adulto sin identificación): older than 17
- CC (cédula de ciudadanía): 18 years or more
- CE, PA: any age
- Adults (18+) can never carry RC, TI or MS; this check runs last and wins
"""

from typing import Optional, List
from pydantic import BaseModel

from ..config.constants import (
    ADULT_AGE_YEARS,
    ALLOWED_DOCUMENT_TYPES,
    MINOR_ONLY_DOCUMENT_TYPES,
    MS_MAX_AGE_DAYS,
    RC_MAX_AGE_YEARS,
    TI_MAX_AGE_YEARS,
    TI_MIN_AGE_YEARS,
    DocumentType,
)
from ..models.invoice import Patient
from ..models.validation_result import Finding
from ..utils.error_handler import ErrorCode


class DocumentTypeResult(BaseModel):
    """Result of a document type check"""
    is_valid: bool
    document_type: str
    error_code: Optional[ErrorCode] = None
    suggestion: str = ""


ADULT_SUGGESTION = (
    "Para mayores de 17 años no se debe usar RC/TI/MS; "
    "use CC, CE o PA según corresponda."
)


class DocumentTypeRule:
    """
    Checks a document type against the allowed set and the age windows.

    The rule is stateless; one instance can serve any number of invoices.
    """

    SUGGESTIONS = {
        DocumentType.MS.value: "MS solo es válido hasta 30 días de nacido.",
        DocumentType.RC.value: (
            "RC aplica para menores de 7 años; si tiene >=7 años use TI o CC "
            "según corresponda."
        ),
        DocumentType.TI.value: "TI aplica entre 7 y 17 años cumplidos.",
        DocumentType.AS.value: (
            "AS aplica solo para mayores de 17 años (adulto sin identificación)."
        ),
        DocumentType.CC.value: (
            "CC aplica preferiblemente para mayores de 17 años; revise el tipo "
            "de documento."
        ),
    }

    def __init__(self, allowed_types: Optional[List[str]] = None):
        self.allowed_types = list(allowed_types or ALLOWED_DOCUMENT_TYPES)

    def is_allowed(self, document_type: Optional[str]) -> bool:
        return (document_type or "") in self.allowed_types

    def _violates_window(self, document_type: str, years: int, days: int) -> bool:
        if document_type == DocumentType.MS.value:
            return days > MS_MAX_AGE_DAYS
        if document_type == DocumentType.RC.value:
            return years >= RC_MAX_AGE_YEARS
        if document_type == DocumentType.TI.value:
            return years < TI_MIN_AGE_YEARS or years > TI_MAX_AGE_YEARS
        if document_type == DocumentType.AS.value:
            return years <= TI_MAX_AGE_YEARS
        if document_type == DocumentType.CC.value:
            return years < ADULT_AGE_YEARS
        # CE, PA: no age restriction
        return False

    def check(
        self,
        document_type: Optional[str],
        years: Optional[int],
        days: Optional[int]
    ) -> DocumentTypeResult:
        """
        Decide whether a document type fits the allowed set and the age.

        Args:
            document_type: tipoDocumentoIdentificacion of the patient
            years: Whole years at attention, negative when attention precedes
                birth, None when the dates could not be read
            days: Whole days at attention, None with years

        Returns:
            DocumentTypeResult with the verdict and, when invalid, a suggestion
        """
        document_type = document_type or ""

        if not self.is_allowed(document_type):
            return DocumentTypeResult(
                is_valid=False,
                document_type=document_type,
                error_code=ErrorCode.INVALID_DOCUMENT_TYPE,
                suggestion=f"Debe ser uno de [{', '.join(self.allowed_types)}].",
            )

        # Date problems were already reported by the age computation
        if years is None or days is None:
            return DocumentTypeResult(is_valid=True, document_type=document_type)

        is_valid = True
        suggestion = ""

        if self._violates_window(document_type, years, days):
            is_valid = False
            suggestion = self.SUGGESTIONS.get(document_type, "")

        if years >= ADULT_AGE_YEARS and document_type in MINOR_ONLY_DOCUMENT_TYPES:
            is_valid = False
            suggestion = ADULT_SUGGESTION

        if is_valid:
            return DocumentTypeResult(is_valid=True, document_type=document_type)

        return DocumentTypeResult(
            is_valid=False,
            document_type=document_type,
            error_code=ErrorCode.AGE_DOCUMENT_MISMATCH,
            suggestion=suggestion,
        )

    def evaluate(
        self,
        patient: Patient,
        attention_date: Optional[str],
        years: Optional[int],
        days: Optional[int]
    ) -> Optional[Finding]:
        """
        Run the check for one service line of a patient.

        Returns:
            A Finding when the document type is invalid, None otherwise
        """
        result = self.check(patient.tipo_documento, years, days)
        if result.is_valid:
            return None

        if result.error_code == ErrorCode.INVALID_DOCUMENT_TYPE:
            return Finding(
                patient_sequence=patient.consecutivo,
                error_code=ErrorCode.INVALID_DOCUMENT_TYPE,
                category="Tipo de documento inválido",
                date=attention_date,
                code=result.document_type,
                detail=result.suggestion,
            )

        return Finding(
            patient_sequence=patient.consecutivo,
            error_code=ErrorCode.AGE_DOCUMENT_MISMATCH,
            category="Tipo de documento no coincide con la edad",
            date=attention_date,
            code=result.document_type,
            detail=f"Edad en la atención: {years} años, {days} días. {result.suggestion}",
        )


# Singleton instance
_rule_instance: Optional[DocumentTypeRule] = None


def get_document_type_rule() -> DocumentTypeRule:
    """Get singleton instance of DocumentTypeRule."""
    global _rule_instance
    if _rule_instance is None:
        _rule_instance = DocumentTypeRule()
    return _rule_instance
