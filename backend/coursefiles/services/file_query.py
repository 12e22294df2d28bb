"""Filtered, paginated file listing for a context subtree."""

from __future__ import annotations

import logging

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from coursefiles.config import settings
from coursefiles.exceptions import NotYetComputed
from coursefiles.models.context import Context
from coursefiles.models.file import FileRecord
from coursefiles.models.user import User
from coursefiles.schemas.files import FileListItem, PaginatedFileList
from coursefiles.services.components import (
    ALL_COMPONENTS,
    ALL_WITHOUT_SUBMISSIONS,
    ComponentCatalog,
)
from coursefiles.services.file_types import build_filter_predicate, has_prefix
from coursefiles.services.scope import in_scope, visible_file

logger = logging.getLogger(__name__)


def _to_item(
    record: FileRecord,
    contextlevel: int,
    instanceid: int,
    uploader: User | None,
) -> FileListItem:
    return FileListItem(
        id=record.id,
        contextid=record.contextid,
        component=record.component,
        filearea=record.filearea,
        itemid=record.itemid,
        filepath=record.filepath,
        filename=record.filename,
        mimetype=record.mimetype,
        filesize=record.filesize,
        author=record.author,
        license=record.license,
        userid=record.userid,
        contextlevel=contextlevel,
        instanceid=instanceid,
        uploader=(uploader.fullname or None) if uploader else None,
    )


class FileQueryEngine:
    """Lists the files of a context subtree with component/type filters.

    Pages are cached per ``(offset, limit)``; the filters are fixed for the
    lifetime of the instance.
    """

    def __init__(
        self,
        db: AsyncSession,
        course_id: int,
        scope: Context,
        catalog: ComponentCatalog,
        component: str = ALL_COMPONENTS,
        filetype: str = "all",
    ):
        self._db = db
        self.course_id = course_id
        self._scope = scope
        self._catalog = catalog
        self.component = component
        self.filetype = filetype
        self._pages: dict[tuple[int, int], PaginatedFileList] = {}
        self._total: int | None = None

    async def _predicates(self) -> list[ColumnElement[bool]]:
        where = [visible_file(), in_scope(self._scope)]

        if self.component == ALL_WITHOUT_SUBMISSIONS:
            prefix = settings.submission_component_prefix
            where.append(~has_prefix(FileRecord.component, prefix))
        elif self.component != ALL_COMPONENTS:
            available = await self._catalog.list_components()
            if self.component in available:
                where.append(FileRecord.component == self.component)

        mime_predicate = build_filter_predicate(FileRecord.mimetype, self.filetype)
        if mime_predicate is not None:
            where.append(mime_predicate)
        return where

    @staticmethod
    def _listing(where: list[ColumnElement[bool]]) -> Select:
        return (
            select(
                FileRecord,
                Context.contextlevel,
                Context.instanceid,
                User,
            )
            .join(Context, Context.id == FileRecord.contextid)
            .outerjoin(User, User.id == FileRecord.userid)
            .where(*where)
            .order_by(FileRecord.component, FileRecord.filename, FileRecord.id)
        )

    async def get_page(self, offset: int = 0, limit: int | None = None) -> PaginatedFileList:
        """Fetch ``limit`` files starting at ``offset`` and the total count."""
        limit = settings.default_per_page if limit is None else limit
        if offset < 0:
            raise ValueError("offset must not be negative")
        if limit <= 0:
            raise ValueError("limit must be positive")

        key = (offset, limit)
        if key in self._pages:
            return self._pages[key]

        where = await self._predicates()
        result = await self._db.execute(self._listing(where).offset(offset).limit(limit))

        items = [
            _to_item(record, contextlevel, instanceid, uploader)
            for record, contextlevel, instanceid, uploader in result.all()
        ]

        if len(items) < limit:
            total = offset + len(items)
        else:
            count_stmt = (
                select(func.count())
                .select_from(FileRecord)
                .join(Context, Context.id == FileRecord.contextid)
                .where(*where)
            )
            total = (await self._db.execute(count_stmt)).scalar_one()

        page = PaginatedFileList(items=items, offset=offset, limit=limit, total=total)
        self._pages[key] = page
        self._total = total
        logger.debug(
            "Listed %d of %d files in context %s (component=%s, filetype=%s)",
            len(items), total, self._scope.id, self.component, self.filetype,
        )
        return page

    def get_total_count(self) -> int:
        """Number of files matching the filters; needs a prior get_page()."""
        if self._total is None:
            raise NotYetComputed("get_page() must be called before get_total_count()")
        return self._total
