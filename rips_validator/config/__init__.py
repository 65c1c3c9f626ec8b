"""
Configuration Module

Manages application configuration and settings.

Components:
- settings.py: Application settings from environment variables
- constants.py: Application constants and enums
- reference_codes.yaml: Diagnosis reference sets and rule profiles
"""

from .settings import Settings, get_settings
from .constants import DocumentType, LineKind, RuleId, RuleProfile

__all__ = [
    "Settings",
    "get_settings",
    "DocumentType",
    "LineKind",
    "RuleId",
    "RuleProfile",
]
