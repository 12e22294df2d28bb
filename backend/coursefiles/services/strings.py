"""String lookup — translated labels keyed by (identifier, component).

Stand-in for the LMS string manager. The default table carries the strings
this service needs; deployments can layer additional strings on top.
"""

from __future__ import annotations

import logging

from coursefiles.exceptions import TranslationUnavailable

logger = logging.getLogger(__name__)

PLUGIN_COMPONENT = "local_coursefiles"

DEFAULT_STRINGS: dict[str, dict[str, str]] = {
    PLUGIN_COMPONENT: {
        "pluginname": "List course files",
        "all_files": "All files",
        "all_wo_submissions": "All files (without submissions)",
        "filetype_all": "All",
        "filetype_document": "Document",
        "filetype_image": "Image",
        "filetype_audio": "Audio",
        "filetype_video": "Video",
        "filetype_text": "Text",
        "filetype_archive": "Archive",
        "filetype_other": "Other",
        "invalid_license": "Invalid license",
        "too_many_files": "Too many files selected",
        "eventlicensechanged": "License changed",
    },
    "license": {
        "unknown": "Other",
        "allrightsreserved": "All rights reserved",
        "public": "Public domain",
        "cc": "Creative Commons",
        "cc-nd": "Creative Commons - NoDerivs",
        "cc-nc-nd": "Creative Commons - No Commercial NoDerivs",
        "cc-nc": "Creative Commons - No Commercial",
        "cc-nc-sa": "Creative Commons - No Commercial ShareAlike",
        "cc-sa": "Creative Commons - ShareAlike",
    },
    # Core strings (empty component)
    "": {
        "course": "Course",
        "user": "User",
        "question": "Question bank",
        "backup": "Backup",
        "contentbank": "Content bank",
        "block_html": "Text block",
    },
    "mod_assign": {"pluginname": "Assignment"},
    "mod_book": {"pluginname": "Book"},
    "mod_data": {"pluginname": "Database"},
    "mod_folder": {"pluginname": "Folder"},
    "mod_forum": {"pluginname": "Forum"},
    "mod_glossary": {"pluginname": "Glossary"},
    "mod_label": {"pluginname": "Text and media area"},
    "mod_page": {"pluginname": "Page"},
    "mod_resource": {"pluginname": "File"},
    "mod_wiki": {"pluginname": "Wiki"},
    "assignsubmission_file": {"pluginname": "File submissions"},
    "assignfeedback_file": {"pluginname": "File feedback"},
}


class StringManager:
    """Resolves (identifier, component) pairs to display strings."""

    def __init__(self, strings: dict[str, dict[str, str]] | None = None):
        self._strings: dict[str, dict[str, str]] = {
            component: dict(values) for component, values in DEFAULT_STRINGS.items()
        }
        for component, values in (strings or {}).items():
            self._strings.setdefault(component, {}).update(values)

    def string_exists(self, identifier: str, component: str = "") -> bool:
        return identifier in self._strings.get(component, {})

    def get_string(self, identifier: str, component: str = "") -> str:
        """Return the string, or ``[[identifier]]`` when it is missing."""
        try:
            return self._strings[component][identifier]
        except KeyError:
            logger.debug("Missing string %s/%s", component or "core", identifier)
            return f"[[{identifier}]]"


def get_component_translation(strings: StringManager, name: str) -> str:
    """Human readable name of a component, falling back to the raw name."""
    try:
        if strings.string_exists("pluginname", name):
            return strings.get_string("pluginname", name)
        if strings.string_exists(name, ""):
            return strings.get_string(name, "")
    except TranslationUnavailable as exc:
        logger.debug("String lookup unavailable for %s: %s", name, exc)
    return name
