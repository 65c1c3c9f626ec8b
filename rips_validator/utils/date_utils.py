"""
Date Utilities

Provides helper functions for the dates carried by RIPS records:
- Attention date resolution across the formats providers send
- Birth date parsing
- Age at attention in whole years and whole days

Only zero-padded shapes are accepted; the pattern is checked before the
value is handed to strptime, which would otherwise take 2025-4-2 9:5.
"""

import re
from datetime import datetime, date
from typing import Optional, NamedTuple

from ..config.constants import (
    ATTENTION_DATE_FORMATS,
    BIRTH_DATE_FORMAT,
    DATE_ONLY_PATTERN,
    DATE_PREFIX_LENGTH,
    ISO_DATE_TIME_PATTERN,
)
from .error_handler import ErrorCode, ErrorResult, date_error


_ATTENTION_FORMATS = [(re.compile(pattern), fmt) for pattern, fmt in ATTENTION_DATE_FORMATS]
_ISO_DATE_TIME = re.compile(ISO_DATE_TIME_PATTERN)
_DATE_ONLY = re.compile(DATE_ONLY_PATTERN)


class AgeResult(NamedTuple):
    """Age of a patient at the moment of attention"""
    years: int
    days: int
    birth_date: date
    attention_date: date


def _parse_date_only(value: str) -> Optional[date]:
    if not _DATE_ONLY.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, BIRTH_DATE_FORMAT).date()
    except ValueError:
        return None


def _parse_iso_date_time(value: str) -> Optional[date]:
    match = _ISO_DATE_TIME.fullmatch(value)
    if match is None:
        return None
    day, clock = match.groups()
    fmt = "%Y-%m-%d %H:%M:%S" if clock.count(":") == 2 else "%Y-%m-%d %H:%M"
    try:
        return datetime.strptime(f"{day} {clock}", fmt).date()
    except ValueError:
        return None


def resolve_attention_date(value: Optional[str]) -> ErrorResult:
    """
    Resolve a loosely formatted attention date into a calendar date.

    Formats are tried in order, first match wins:
    - YYYY-MM-DD HH:MM
    - YYYY-MM-DD HH:MM:SS
    - ISO-8601 local date-time (2025-04-22T13:57:00, optional fraction)
    - First 10 characters as YYYY-MM-DD

    Args:
        value: fechaInicioAtencion as received

    Returns:
        ErrorResult holding a date, or an EMPTY_DATE / INVALID_DATE_FORMAT error
    """
    if value is None or not value.strip():
        return ErrorResult.fail(
            date_error(ErrorCode.EMPTY_DATE, value, "fechaInicioAtencion vacía")
        )

    for pattern, fmt in _ATTENTION_FORMATS:
        if not pattern.fullmatch(value):
            continue
        try:
            return ErrorResult.ok(datetime.strptime(value, fmt).date())
        except ValueError:
            continue

    iso = _parse_iso_date_time(value)
    if iso is not None:
        return ErrorResult.ok(iso)

    # Lossy fallback, only after every full format failed
    if len(value) >= DATE_PREFIX_LENGTH:
        prefix = _parse_date_only(value[:DATE_PREFIX_LENGTH])
        if prefix is not None:
            return ErrorResult.ok(prefix)

    return ErrorResult.fail(
        date_error(
            ErrorCode.INVALID_DATE_FORMAT,
            value,
            f"Formato de fecha inválido para fechaInicioAtencion: {value}"
        )
    )


def parse_birth_date(value: Optional[str]) -> ErrorResult:
    """
    Parse fechaNacimiento (YYYY-MM-DD).

    Returns:
        ErrorResult holding a date, or an INVALID_BIRTH_DATE error
    """
    if value is None or not value.strip():
        return ErrorResult.fail(
            date_error(ErrorCode.INVALID_BIRTH_DATE, value, "fechaNacimiento vacía")
        )

    born = _parse_date_only(value)
    if born is None:
        return ErrorResult.fail(
            date_error(
                ErrorCode.INVALID_BIRTH_DATE,
                value,
                f"fechaNacimiento con formato inválido: {value}"
            )
        )
    return ErrorResult.ok(born)


def calendar_years_between(start: date, end: date) -> int:
    """
    Whole calendar years from start to end.

    A partial final year does not count; a birthday on 29 February is
    reached on 1 March in non-leap years. Negative when end precedes start.
    """
    if end < start:
        return -calendar_years_between(end, start)

    years = end.year - start.year

    # Adjust for anniversary not yet reached this year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1

    return years


def calculate_age(birth_date: Optional[str], attention_date: Optional[str]) -> ErrorResult:
    """
    Compute the age of a patient at the moment of attention.

    Birth date is parsed first, so a patient with both dates broken gets
    the birth date error.

    Args:
        birth_date: fechaNacimiento of the patient
        attention_date: fechaInicioAtencion of the service line

    Returns:
        ErrorResult holding an AgeResult, or the first date error found
    """
    birth = parse_birth_date(birth_date)
    if not birth.success:
        return birth

    attention = resolve_attention_date(attention_date)
    if not attention.success:
        return attention

    born = birth.value
    attended = attention.value
    return ErrorResult.ok(
        AgeResult(
            years=calendar_years_between(born, attended),
            days=(attended - born).days,
            birth_date=born,
            attention_date=attended,
        )
    )
