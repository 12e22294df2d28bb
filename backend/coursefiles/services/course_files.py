"""Course file listing — one object per request and course."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursefiles.models.context import CONTEXT_COURSE, CONTEXT_MODULE, Context
from coursefiles.models.course import CourseModule
from coursefiles.schemas.files import FileListItem
from coursefiles.services import file_types
from coursefiles.services.components import ALL_COMPONENTS, ComponentCatalog
from coursefiles.services.events import EventBus
from coursefiles.services.file_query import FileQueryEngine
from coursefiles.services.handlers import get_handler
from coursefiles.services.licenses import LicenseLabel, LicenseRegistry, LicenseUpdateTransaction
from coursefiles.services.strings import StringManager
from coursefiles.services.urls import course_url, module_url

logger = logging.getLogger(__name__)


async def get_course_context(db: AsyncSession, course_id: int) -> Context | None:
    result = await db.execute(
        select(Context).where(
            Context.contextlevel == CONTEXT_COURSE,
            Context.instanceid == course_id,
        )
    )
    return result.scalar_one_or_none()


class CourseFiles:
    """Files of one course: listing, filters, licenses and links."""

    def __init__(
        self,
        db: AsyncSession,
        course_id: int,
        context: Context,
        *,
        strings: StringManager,
        events: EventBus,
        component: str = ALL_COMPONENTS,
        filetype: str = file_types.ALL,
        userid: int | None = None,
    ):
        self._db = db
        self.course_id = course_id
        self.context = context
        self._strings = strings
        self._events = events
        self._userid = userid
        self._catalog = ComponentCatalog(db, context, strings)
        self._query = FileQueryEngine(
            db, course_id, context, self._catalog, component=component, filetype=filetype,
        )
        self._licenses = LicenseRegistry(strings)
        self._course_modules: dict[int, CourseModule] | None = None

    async def get_file_list(self, offset: int, limit: int) -> list[FileListItem]:
        page = await self._query.get_page(offset, limit)
        return page.items

    def get_file_list_total_size(self) -> int:
        """Number of files matching the filters; only after get_file_list()."""
        return self._query.get_total_count()

    async def get_components(self) -> dict[str, str]:
        return await self._catalog.list_components()

    def get_available_licenses(self) -> dict[str, str]:
        return self._licenses.get_available_licenses()

    def get_license_name_color(self, code: str | None) -> LicenseLabel:
        return self._licenses.get_license_name_color(code)

    async def set_files_license(self, file_ids, license_code: str) -> list[int]:
        transaction = LicenseUpdateTransaction(
            self._db, self.context, self._licenses, self._events, userid=self._userid,
        )
        return await transaction.apply(file_ids, license_code)

    async def _get_course_modules(self) -> dict[int, CourseModule]:
        if self._course_modules is None:
            result = await self._db.execute(
                select(CourseModule).where(CourseModule.course == self.course_id)
            )
            self._course_modules = {cm.id: cm for cm in result.scalars().all()}
        return self._course_modules

    async def get_component_url(self, contextlevel: int, instanceid: int) -> str | None:
        """Page of the module or course that owns a file."""
        if contextlevel == CONTEXT_MODULE:
            cm = (await self._get_course_modules()).get(instanceid)
            if cm is not None:
                return module_url(cm.modname, cm.id)
        elif contextlevel == CONTEXT_COURSE:
            return course_url(self.course_id)
        return None

    def get_file_download_url(self, file: FileListItem) -> str | None:
        return get_handler(file.component).get_download_url(file, self.course_id)

    def get_file_edit_url(self, file: FileListItem) -> str | None:
        return get_handler(file.component).get_edit_url(file)

    async def is_file_used(self, file: FileListItem) -> bool | None:
        return await get_handler(file.component).is_file_used(self._db, file)

    @staticmethod
    def get_file_types(strings: StringManager) -> dict[str, str]:
        return file_types.get_file_types(strings)

    @staticmethod
    def get_file_type_translation(strings: StringManager, mimetype: str | None) -> str | None:
        return file_types.get_file_type_translation(strings, mimetype)
