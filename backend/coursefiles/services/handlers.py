"""Per-component behaviour: download link, edit link, usage check.

Components are looked up in ``HANDLERS``; anything not listed there uses
the default handler.
"""

from __future__ import annotations

from urllib.parse import quote

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursefiles.models.context import CONTEXT_MODULE
from coursefiles.models.course import BookChapter
from coursefiles.schemas.files import FileListItem
from coursefiles.services.urls import pluginfile_url, resolve_download_url, site_url


def is_embedded_file_used(text: str | None, filename: str) -> bool:
    """Whether rich text references ``filename`` (raw or URL-encoded)."""
    if not text:
        return False
    return filename in text or quote(filename) in text


class CourseFileHandler:
    """Default behaviour for files of any component."""

    def get_download_url(self, file: FileListItem, courseid: int) -> str | None:
        return resolve_download_url(
            file.component, file.filearea, file.contextid,
            file.itemid, file.filepath, file.filename, courseid,
        )

    def get_edit_url(self, file: FileListItem) -> str | None:
        if file.filearea == "intro" and file.contextlevel == CONTEXT_MODULE:
            return site_url("/course/modedit.php", update=file.instanceid)
        if file.component == "course" and file.filearea == "section":
            return site_url("/course/editsection.php", id=file.itemid)
        return None

    async def is_file_used(self, db: AsyncSession, file: FileListItem) -> bool | None:
        """None when usage cannot be determined."""
        return None

    @staticmethod
    def get_standard_download_url(file: FileListItem) -> str:
        return pluginfile_url(
            file.contextid, file.component, file.filearea,
            file.itemid, file.filepath, file.filename,
        )


class FolderHandler(CourseFileHandler):
    """Folder content is always shown to students."""

    def get_download_url(self, file: FileListItem, courseid: int) -> str | None:
        if file.filearea == "content":
            return pluginfile_url(
                file.contextid, file.component, file.filearea,
                0, file.filepath, file.filename,
            )
        return super().get_download_url(file, courseid)

    async def is_file_used(self, db: AsyncSession, file: FileListItem) -> bool | None:
        if file.filearea == "content":
            return True
        return await super().is_file_used(db, file)


class BookHandler(CourseFileHandler):
    """Book chapters embed their files in the chapter text."""

    def get_download_url(self, file: FileListItem, courseid: int) -> str | None:
        if file.filearea == "chapter":
            return self.get_standard_download_url(file)
        return super().get_download_url(file, courseid)

    def get_edit_url(self, file: FileListItem) -> str | None:
        if file.filearea == "chapter":
            return site_url("/mod/book/edit.php", cmid=file.instanceid, id=file.itemid)
        return super().get_edit_url(file)

    async def is_file_used(self, db: AsyncSession, file: FileListItem) -> bool | None:
        if file.filearea == "chapter":
            result = await db.execute(
                select(BookChapter.content).where(BookChapter.id == file.itemid)
            )
            return is_embedded_file_used(result.scalar_one_or_none(), file.filename)
        return await super().is_file_used(db, file)


DEFAULT_HANDLER = CourseFileHandler()

HANDLERS: dict[str, CourseFileHandler] = {
    "mod_book": BookHandler(),
    "mod_folder": FolderHandler(),
}


def get_handler(component: str) -> CourseFileHandler:
    return HANDLERS.get(component, DEFAULT_HANDLER)
