"""
Persistence Module

Keeps rendered reports on disk and in memory for later download.
"""

from .report_store import ReportStore, get_report_store

__all__ = ["ReportStore", "get_report_store"]
