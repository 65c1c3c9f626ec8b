"""
Data Models Module

Pydantic models for type safety and validation.

Components:
- invoice.py: RIPS invoice, patients and service lines
- validation_result.py: Findings and the validation report
"""

from .invoice import Invoice, Patient, Services, ServiceLine, ConsultationLine, ProcedureLine
from .validation_result import Finding, ValidationReport

__all__ = [
    "Invoice",
    "Patient",
    "Services",
    "ServiceLine",
    "ConsultationLine",
    "ProcedureLine",
    "Finding",
    "ValidationReport",
]
