"""
Edge Cases Module

Patient-level checks that do not depend on the reference code sets.

Components:
- duplicate_detector.py: Repeated service lines within one patient
- document_type_checker.py: Document type against the allowed set and age
"""

from .duplicate_detector import (
    DuplicateTracker,
    DuplicateDetectionResult,
    build_duplicate_key,
    duplicate_finding
)
from .document_type_checker import (
    DocumentTypeRule,
    DocumentTypeResult,
    get_document_type_rule
)

__all__ = [
    "DuplicateTracker",
    "DuplicateDetectionResult",
    "build_duplicate_key",
    "duplicate_finding",
    "DocumentTypeRule",
    "DocumentTypeResult",
    "get_document_type_rule",
]
