"""Context subtree predicates shared by listing and relicensing."""

from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from coursefiles.models.context import Context
from coursefiles.models.file import FileRecord

HIDDEN_FILENAME = "."


def in_scope(scope: Context) -> ColumnElement[bool]:
    """Context is ``scope`` itself or one of its descendants.

    Expects ``Context`` to be joined on ``FileRecord.contextid``.
    """
    return or_(Context.path.like(f"{scope.path}/%"), Context.id == scope.id)


def visible_file() -> ColumnElement[bool]:
    """Excludes the "." rows that only mark directories."""
    return FileRecord.filename != HIDDEN_FILENAME


def path_in_scope(scope: Context, contextid: int, path: str) -> bool:
    """Python-side counterpart of :func:`in_scope` for already fetched rows."""
    return contextid == scope.id or path == scope.path or path.startswith(f"{scope.path}/")
