"""
RIPS Invoice Validator

Rule engine that checks healthcare service invoices in the Colombian RIPS
JSON format and reports every finding in one pass.
"""

__version__ = "0.1.0"
__author__ = "Equipo de Facturación"

# Make submodules easily importable
from . import utils
from . import config
from . import models
from . import validation

__all__ = [
    "utils",
    "config",
    "models",
    "validation",
]
