"""MIME type categories — classification and SQL filter predicates.

Each category maps to an ordered list of patterns. A pattern is either a
literal MIME type or a prefix ending in ``%`` (``image/%`` matches every
``image/...`` type). Categories and patterns are checked in declared order
and the first match wins; types matching nothing are "other".
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from sqlalchemy import and_, func, not_, or_
from sqlalchemy.sql.elements import ColumnElement

from coursefiles.services.strings import PLUGIN_COMPONENT, StringManager

WILDCARD = "%"
OTHER = "other"
ALL = "all"

MIME_TYPE_CATEGORIES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "document": (
        "application/pdf",
        "application/epub+zip",
        "application/vnd.ms-%",
        "application/vnd.openxmlformats-officedocument%",
    ),
    "image": ("image/%",),
    "audio": ("audio/%",),
    "video": ("video/%",),
    "text": ("text/%", "application/x-tex"),
    "archive": (
        "application/zip",
        "application/x-tar",
        "application/g-zip",
        "application/x-rar-compressed",
        "application/x-7z-compressed",
        "application/vnd.moodle.backup",
    ),
})


def pattern_matches(pattern: str, mimetype: str | None) -> bool:
    if mimetype is None:
        return False
    if pattern.endswith(WILDCARD):
        return mimetype.startswith(pattern[:-1])
    return pattern == mimetype


def classify(mimetype: str | None) -> str | None:
    """Category name of a MIME type, or None for "other"."""
    for category, patterns in MIME_TYPE_CATEGORIES.items():
        for pattern in patterns:
            if pattern_matches(pattern, mimetype):
                return category
    return None


def has_prefix(column, prefix: str) -> ColumnElement[bool]:
    """Case-sensitive prefix test; SQLite's LIKE ignores ASCII case."""
    return func.substr(column, 1, len(prefix)) == prefix


def _pattern_clause(column, pattern: str) -> ColumnElement[bool]:
    if pattern.endswith(WILDCARD):
        return has_prefix(column, pattern[:-1])
    return column == pattern


def build_filter_predicate(column, selector: str | None) -> ColumnElement[bool] | None:
    """SQL predicate on ``column`` for a file type selector.

    A known category gives the OR of its patterns. ``other`` gives the AND of
    NOT-match over every pattern of every category, and also keeps rows
    without a MIME type. Anything else ("all", unknown values) yields None,
    meaning no restriction.
    """
    if selector == OTHER:
        clauses = [
            not_(_pattern_clause(column, pattern))
            for patterns in MIME_TYPE_CATEGORIES.values()
            for pattern in patterns
        ]
        return or_(column.is_(None), and_(*clauses))
    if selector in MIME_TYPE_CATEGORIES:
        return or_(*[_pattern_clause(column, p) for p in MIME_TYPE_CATEGORIES[selector]])
    return None


def get_file_types(strings: StringManager) -> dict[str, str]:
    """Selectable file types: all, every category, other."""
    types = {ALL: strings.get_string("filetype_all", PLUGIN_COMPONENT)}
    for category in MIME_TYPE_CATEGORIES:
        types[category] = strings.get_string(f"filetype_{category}", PLUGIN_COMPONENT)
    types[OTHER] = strings.get_string("filetype_other", PLUGIN_COMPONENT)
    return types


def get_file_type_translation(strings: StringManager, mimetype: str | None) -> str | None:
    """Translated category of a MIME type; the MIME type itself when unknown."""
    category = classify(mimetype)
    if category is None:
        return mimetype
    return strings.get_string(f"filetype_{category}", PLUGIN_COMPONENT)
