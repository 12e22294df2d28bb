"""Tests for licenses — registry, colours and the bulk relicense transaction."""

import json

import pytest
from sqlalchemy import func, select

from coursefiles.config import Settings
from coursefiles.exceptions import InvalidLicense, TooManyFiles
from coursefiles.models import FileRecord, LogEvent
from coursefiles.services.events import EventBus
from coursefiles.services.licenses import (
    LicenseRegistry,
    LicenseUpdateTransaction,
    parse_license_colors,
)


async def _licenses(db_session) -> dict[int, str | None]:
    result = await db_session.execute(select(FileRecord.id, FileRecord.license))
    return dict(result.all())


async def _event_count(db_session) -> int:
    return (await db_session.execute(select(func.count()).select_from(LogEvent))).scalar_one()


@pytest.fixture
def registry(strings):
    return LicenseRegistry(strings)


@pytest.fixture
def received(event_bus):
    events = []
    event_bus.subscribe(events.append)
    return events


def _transaction(db_session, course, registry, event_bus, **kwargs):
    return LicenseUpdateTransaction(db_session, course["context"], registry, event_bus, **kwargs)


class TestRegistry:
    def test_available_licenses_follow_config_order(self, strings):
        registry = LicenseRegistry(strings, Settings(licenses="cc, public,,unknown"))
        assert registry.get_available_licenses() == {
            "cc": "Creative Commons",
            "public": "Public domain",
            "unknown": "Other",
        }

    def test_name_color(self, strings):
        registry = LicenseRegistry(strings, Settings(license_colors="cc 00AA00\npublic 0000ff"))
        label = registry.get_license_name_color("cc")
        assert label.name == "Creative Commons"
        assert label.color == "00AA00"
        assert label.to_html() == '<span style="color: #00AA00">Creative Commons</span>'

    def test_name_without_color(self, registry):
        label = registry.get_license_name_color("allrightsreserved")
        assert label.color is None
        assert label.to_html() == "All rights reserved"

    def test_unknown_license_has_empty_name(self, registry):
        assert registry.get_license_name_color("wtfpl").name == ""
        assert registry.get_license_name_color(None).name == ""


def test_parse_license_colors():
    text = "  cc   ff0000\n cc-nd 00ff00 public abcdef\nbroken 12345\n"
    assert parse_license_colors(text) == {"cc": "ff0000", "cc-nd": "00ff00", "public": "abcdef"}
    assert parse_license_colors("") == {}
    assert parse_license_colors(None) == {}


@pytest.mark.asyncio
async def test_relicense_skips_files_outside_scope(db_session, course, registry, event_bus, received):
    changed = await _transaction(db_session, course, registry, event_bus).apply({1, 8, 2}, "cc-sa")

    assert changed == [1, 2]
    licenses = await _licenses(db_session)
    assert licenses[1] == "cc-sa"
    assert licenses[2] == "cc-sa"
    assert licenses[8] == "public"

    assert [(e.objectid, e.other["license"], e.contextid) for e in received] == [
        (1, "cc-sa", 2),
        (2, "cc-sa", 2),
    ]
    rows = (await db_session.execute(select(LogEvent).order_by(LogEvent.objectid))).scalars().all()
    assert [row.objectid for row in rows] == [1, 2]
    assert rows[0].eventname == "license_changed"
    assert json.loads(rows[0].other) == {"license": "cc-sa"}


@pytest.mark.asyncio
async def test_relicense_rejects_sibling_path_prefix(db_session, course, registry, event_bus):
    changed = await _transaction(db_session, course, registry, event_bus).apply([9], "cc")

    assert changed == []
    assert (await _licenses(db_session))[9] == "public"
    assert await _event_count(db_session) == 0


@pytest.mark.asyncio
async def test_relicense_includes_module_contexts(db_session, course, registry, event_bus):
    changed = await _transaction(db_session, course, registry, event_bus).apply([4, 5, 999], "public")
    assert changed == [4, 5]


@pytest.mark.asyncio
async def test_invalid_license(db_session, course, registry, event_bus, received):
    before = await _licenses(db_session)
    with pytest.raises(InvalidLicense):
        await _transaction(db_session, course, registry, event_bus).apply([1, 2], "cc-by-9000")

    assert await _licenses(db_session) == before
    assert received == []


@pytest.mark.asyncio
async def test_too_many_files(db_session, course, registry, event_bus, received):
    before = await _licenses(db_session)
    with pytest.raises(TooManyFiles):
        await _transaction(db_session, course, registry, event_bus).apply(range(1, 502), "cc")

    assert await _licenses(db_session) == before
    assert await _event_count(db_session) == 0
    assert received == []


@pytest.mark.asyncio
async def test_limit_is_inclusive(db_session, course, registry, event_bus):
    changed = await _transaction(db_session, course, registry, event_bus).apply(range(1, 501), "cc")
    # The "." row of the folder is in scope as well
    assert changed == [1, 2, 3, 4, 5, 6, 7, 10]


@pytest.mark.asyncio
async def test_zero_limit_rejects_any_selection(db_session, course, registry, event_bus, received):
    transaction = _transaction(db_session, course, registry, event_bus, max_files=0)
    with pytest.raises(TooManyFiles):
        await transaction.apply([1], "cc")
    assert received == []
    assert await transaction.apply([], "cc") == []


@pytest.mark.asyncio
async def test_empty_selection_is_noop(db_session, course, registry, event_bus, received):
    assert await _transaction(db_session, course, registry, event_bus).apply([], "cc") == []
    assert received == []


@pytest.mark.asyncio
async def test_failure_rolls_back_everything(db_session, course, registry, received):
    class FailingBus(EventBus):
        def __init__(self):
            super().__init__()
            self.staged = 0

        def stage(self, db, event):
            self.staged += 1
            if self.staged == 2:
                raise RuntimeError("log store full")
            super().stage(db, event)

    bus = FailingBus()
    bus.subscribe(received.append)
    before = await _licenses(db_session)

    with pytest.raises(RuntimeError, match="log store full"):
        await _transaction(db_session, course, registry, bus).apply([1, 2], "cc-nc")

    assert await _licenses(db_session) == before
    assert await _event_count(db_session) == 0
    assert received == []
