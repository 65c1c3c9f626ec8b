"""
Application Constants and Enumerations

Defines constants used throughout the validator including document types,
rule identifiers, rule profiles and the fixed layout of the findings report.

KEY DESIGN PRINCIPLES:

1. ALL-AT-ONCE VALIDATION:
   - Every patient and every service line is checked in a single pass
   - The report lists everything wrong with the invoice on first review

2. FINDINGS, NOT FAILURES:
   - A broken line never aborts the invoice
   - An empty findings list is the success signal
"""

from enum import Enum


class DocumentType(str, Enum):
    """Identity document types accepted in RIPS"""
    CC = "CC"  # Cédula de ciudadanía
    CE = "CE"  # Cédula de extranjería
    PA = "PA"  # Pasaporte
    RC = "RC"  # Registro civil
    TI = "TI"  # Tarjeta de identidad
    AS = "AS"  # Adulto sin identificación
    MS = "MS"  # Menor sin identificación


class LineKind(str, Enum):
    """Kinds of billed service lines"""
    CONSULTA = "consulta"
    PROCEDIMIENTO = "procedimiento"


class RuleId(str, Enum):
    """Line-level rules the engine can run"""
    DUPLICATES = "duplicados"
    DOCUMENT_AGE = "documento_edad"
    DIAGNOSIS_FINALITY = "finalidad_diagnostico"
    DIAGNOSIS_CONSISTENCY = "diagnostico_guia"


class RuleProfile(str, Enum):
    """Named rule profiles selectable per request"""
    COMPLETO = "completo"  # Full ruleset
    PYP = "pyp"  # Promoción y prevención
    MORB = "morb"  # Morbilidad, no diagnosis rules


# Allowed document types, in the order shown to users
ALLOWED_DOCUMENT_TYPES = [
    DocumentType.CC.value,
    DocumentType.CE.value,
    DocumentType.PA.value,
    DocumentType.RC.value,
    DocumentType.TI.value,
    DocumentType.AS.value,
    DocumentType.MS.value,
]


# Document types that are never valid for adults
MINOR_ONLY_DOCUMENT_TYPES = {
    DocumentType.RC.value,
    DocumentType.TI.value,
    DocumentType.MS.value,
}


# Age thresholds for document type eligibility
ADULT_AGE_YEARS = 18
RC_MAX_AGE_YEARS = 7  # RC invalid from this age on
TI_MIN_AGE_YEARS = 7
TI_MAX_AGE_YEARS = 17
MS_MAX_AGE_DAYS = 30


# Date formats, zero-padded only
BIRTH_DATE_FORMAT = "%Y-%m-%d"
DATE_ONLY_PATTERN = r"\d{4}-\d{2}-\d{2}"
ATTENTION_DATE_FORMATS = [
    (r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}", "%Y-%m-%d %H:%M"),            # 2025-04-22 13:57
    (r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", "%Y-%m-%d %H:%M:%S"),  # 2025-04-22 13:57:00
]
# ISO local date-time: 2025-04-22T13:57, 2025-04-22T13:57:00.123
ISO_DATE_TIME_PATTERN = r"(\d{4}-\d{2}-\d{2})T(\d{2}:\d{2}(?::\d{2})?)(?:\.\d{1,9})?"
DATE_PREFIX_LENGTH = 10  # len("yyyy-MM-dd")


# Duplicate detection
DUPLICATE_KEY_SEPARATOR = "_"
MISSING_DOCUMENT_PREFIX = "ND-"


# Report layout
REPORT_HEADER_PREFIX = "Validación factura: "
REPORT_SEPARATOR = "=" * 74
REPORT_FILENAME_TEMPLATE = "errores_validacion_fact_{num_factura}.txt"
FALLBACK_INVOICE_NUMBER = "sin_numfact"
NOT_AVAILABLE = "N/A"
INVOICE_LEVEL_MARKER = "⚠️"


# Default profile when a caller does not pick one
DEFAULT_RULE_PROFILE = RuleProfile.COMPLETO


# PHI fields to mask in logs
PHI_FIELDS = [
    "num_documento",
    "numdocumentoidentificacion",
    "fecha_nacimiento",
    "fechanacimiento",
]
