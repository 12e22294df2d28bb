"""Licenses — available licenses, display colours and bulk relicensing."""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from coursefiles.config import Settings, settings as default_settings
from coursefiles.exceptions import InvalidLicense, TooManyFiles
from coursefiles.models.context import Context
from coursefiles.models.file import FileRecord
from coursefiles.services.events import Event, EventBus, license_changed
from coursefiles.services.scope import path_in_scope
from coursefiles.services.strings import StringManager

logger = logging.getLogger(__name__)

LICENSE_COLOR_RE = re.compile(r"\s*(\S+)\s*([a-fA-F0-9]{6})\s*")


def parse_license_colors(text: str | None) -> dict[str, str]:
    """Parse ``"<code> <rrggbb>"`` pairs, e.g. ``"cc 00aa00\\npublic 0000ff"``."""
    return {m.group(1): m.group(2) for m in LICENSE_COLOR_RE.finditer(text or "")}


@dataclass(frozen=True)
class LicenseLabel:
    code: str
    name: str
    color: str | None = None

    def to_html(self) -> str:
        name = html.escape(self.name)
        if self.color:
            return f'<span style="color: #{self.color}">{name}</span>'
        return name


class LicenseRegistry:
    """Licenses allowed by the site configuration."""

    def __init__(self, strings: StringManager, settings: Settings | None = None):
        self._strings = strings
        self._settings = settings or default_settings
        self._licenses: dict[str, str] | None = None
        self._colors: dict[str, str] | None = None

    def get_available_licenses(self) -> dict[str, str]:
        """Ordered mapping license code -> translated name."""
        if self._licenses is None:
            self._licenses = {
                code: self._strings.get_string(code, "license")
                for code in self._settings.license_codes
            }
        return self._licenses

    def get_license_colors(self) -> dict[str, str]:
        if self._colors is None:
            self._colors = parse_license_colors(self._settings.license_colors)
        return self._colors

    def get_license_name_color(self, code: str | None) -> LicenseLabel:
        name = self.get_available_licenses().get(code or "", "")
        return LicenseLabel(code=code or "", name=name, color=self.get_license_colors().get(code or ""))

    def is_available(self, code: str) -> bool:
        return code in self.get_available_licenses()


class LicenseUpdateTransaction:
    """Sets the license of many files below one context at once.

    Ids are re-checked against the database: files outside the scope are
    dropped silently, the rest are updated and logged in one transaction.
    """

    def __init__(
        self,
        db: AsyncSession,
        scope: Context,
        registry: LicenseRegistry,
        events: EventBus,
        *,
        userid: int | None = None,
        max_files: int | None = None,
    ):
        self._db = db
        self._scope = scope
        self._registry = registry
        self._events = events
        self._userid = userid
        if max_files is None:
            max_files = default_settings.max_files_per_change
        self._max_files = max_files

    async def _ids_in_scope(self, file_ids: list[int]) -> list[int]:
        stmt = (
            select(FileRecord.id, FileRecord.contextid, Context.path)
            .join(Context, Context.id == FileRecord.contextid)
            .where(FileRecord.id.in_(file_ids))
        )
        rows = (await self._db.execute(stmt)).all()
        return sorted(
            fid for fid, contextid, path in rows
            if path_in_scope(self._scope, contextid, path)
        )

    async def apply(self, file_ids: Iterable[int], license_code: str) -> list[int]:
        """Relicense ``file_ids``; returns the ids that were changed."""
        if not self._registry.is_available(license_code):
            raise InvalidLicense(license_code)

        requested = set(file_ids)
        if len(requested) > self._max_files:
            raise TooManyFiles(len(requested), self._max_files)
        if not requested:
            return []

        checked = await self._ids_in_scope(sorted(requested))
        dropped = requested.difference(checked)
        if dropped:
            logger.warning(
                "Ignoring %d file(s) outside context %s: %s",
                len(dropped), self._scope.id, sorted(dropped),
            )
        if not checked:
            return []

        events: list[Event] = []
        try:
            await self._db.execute(
                update(FileRecord)
                .where(FileRecord.id.in_(checked))
                .values(license=license_code)
            )
            for fid in checked:
                event = license_changed(self._scope.id, fid, license_code, self._userid)
                self._events.stage(self._db, event)
                events.append(event)
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info(
            "License of %d file(s) in context %s set to %s",
            len(checked), self._scope.id, license_code,
        )
        self._events.publish(events)
        return checked
