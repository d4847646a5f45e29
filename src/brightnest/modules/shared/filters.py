"""
Shared Query Filters

Filters reused by more than one repository.
"""

from collections.abc import Iterable

from sqlalchemy import ColumnElement, func


def status_in(column, statuses: Iterable[str]) -> ColumnElement[bool]:
    """
    Case-insensitive membership filter for a free-text status column.

    ``statuses`` are expected in lowercase, as in the named status sets.
    """
    return func.lower(column).in_(sorted(statuses))
