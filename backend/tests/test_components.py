"""Tests for the component catalog."""

import pytest

from coursefiles.exceptions import TranslationUnavailable
from coursefiles.models import Context, FileRecord
from coursefiles.models.context import CONTEXT_COURSE
from coursefiles.services.components import ComponentCatalog
from coursefiles.services.strings import StringManager, get_component_translation


@pytest.mark.asyncio
async def test_components_sorted_by_label(db_session, course, strings):
    catalog = ComponentCatalog(db_session, course["context"], strings)
    components = await catalog.list_components()

    assert list(components) == [
        "all",
        "all_wo_submissions",
        "mod_assign",
        "mod_book",
        "course",
        "assignsubmission_file",
        "mod_folder",
    ]
    assert components["mod_folder"] == "Folder"
    assert components["course"] == "Course"


@pytest.mark.asyncio
async def test_components_exclude_other_contexts(db_session, course, strings):
    catalog = ComponentCatalog(db_session, course["context"], strings)
    components = await catalog.list_components()
    # Only context 23 ("/1/23") has mod_resource files
    assert "mod_resource" not in components


@pytest.mark.asyncio
async def test_synthetic_entries_without_files(db_session, strings):
    empty = Context(id=99, contextlevel=CONTEXT_COURSE, instanceid=99, path="/1/99", depth=2)
    db_session.add(empty)
    await db_session.commit()

    components = await ComponentCatalog(db_session, empty, strings).list_components()
    assert list(components) == ["all", "all_wo_submissions"]
    assert components["all"] == "All files"


@pytest.mark.asyncio
async def test_components_cached(db_session, course, strings):
    catalog = ComponentCatalog(db_session, course["context"], strings)
    first = await catalog.list_components()

    db_session.add(FileRecord(id=60, contextid=2, component="mod_forum", filearea="post",
                              filename="late.txt", mimetype="text/plain"))
    await db_session.commit()

    second = await catalog.list_components()
    assert second is first
    assert "mod_forum" not in second


def test_translation_fallbacks():
    strings = StringManager({"": {"customthing": "Custom thing"}})
    assert get_component_translation(strings, "mod_forum") == "Forum"
    assert get_component_translation(strings, "customthing") == "Custom thing"
    assert get_component_translation(strings, "local_unknown") == "local_unknown"


def test_translation_unavailable_uses_raw_name():
    class BrokenStrings(StringManager):
        def string_exists(self, identifier, component=""):
            raise TranslationUnavailable("string cache offline")

    assert get_component_translation(BrokenStrings(), "mod_folder") == "mod_folder"
