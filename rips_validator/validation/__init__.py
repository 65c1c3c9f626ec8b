"""
Validation Module

Runs the RIPS rules over an invoice and collects the findings.

Components:
- validation_engine.py: Main validation orchestrator
- rule_loader.py: Loads reference sets and rule profiles from YAML
- diagnosis_rules.py: Diagnosis against purpose code and guideline set
"""

from .validation_engine import InvoiceValidator, PatientValidator, ServiceLineValidator, get_validation_engine
from .rule_loader import RuleLoader, ReferenceRules, ReferenceCodeSet, FinalityCodeSet, get_rule_loader
from .diagnosis_rules import DiagnosisFinalityRule, DiagnosisConsistencyRule

__all__ = [
    # Main components
    "InvoiceValidator",
    "PatientValidator",
    "ServiceLineValidator",
    "get_validation_engine",
    "RuleLoader",
    "ReferenceRules",
    "ReferenceCodeSet",
    "FinalityCodeSet",
    "get_rule_loader",

    # Rules
    "DiagnosisFinalityRule",
    "DiagnosisConsistencyRule",
]
