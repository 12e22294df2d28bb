"""Course file API routes — listing, filter options and relicensing."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from coursefiles.api.deps import (
    CAP_CHANGE_LICENSE,
    CAP_VIEW,
    CurrentUser,
    get_course_scope,
    get_current_user,
    require_capability,
)
from coursefiles.config import settings
from coursefiles.database import get_db
from coursefiles.exceptions import CourseFilesError
from coursefiles.models.context import Context
from coursefiles.schemas.files import (
    FileEntryOut,
    FileListResponse,
    LicenseChangeRequest,
    LicenseChangeResponse,
    LicenseOut,
    OptionOut,
)
from coursefiles.services import get_event_bus, get_string_manager
from coursefiles.services.course_files import CourseFiles
from coursefiles.services.licenses import LicenseRegistry
from coursefiles.services.strings import get_component_translation

logger = logging.getLogger(__name__)
router = APIRouter()


def _course_files(db, course_id, context, user=None, **filters) -> CourseFiles:
    return CourseFiles(
        db,
        course_id,
        context,
        strings=get_string_manager(),
        events=get_event_bus(),
        userid=user.userid if user else None,
        **filters,
    )


@router.get("/courses/{course_id}/files", response_model=FileListResponse)
async def list_course_files(
    course_id: int,
    component: str = "all",
    filetype: str = "all",
    page: int = Query(0, ge=0),
    perpage: int | None = Query(None, ge=1),
    _user: CurrentUser = Depends(require_capability(CAP_VIEW)),
    context: Context = Depends(get_course_scope),
    db: AsyncSession = Depends(get_db),
):
    """Files of a course, filtered by component and file type."""
    perpage = min(perpage or settings.default_per_page, settings.max_per_page)
    files = _course_files(db, course_id, context, component=component, filetype=filetype)
    strings = get_string_manager()

    items = await files.get_file_list(page * perpage, perpage)
    entries = []
    for item in items:
        label = files.get_license_name_color(item.license)
        entries.append(FileEntryOut(
            **item.model_dump(),
            filetype=CourseFiles.get_file_type_translation(strings, item.mimetype),
            license_name=label.name,
            license_color=label.color,
            download_url=files.get_file_download_url(item),
            edit_url=files.get_file_edit_url(item),
            component_url=await files.get_component_url(item.contextlevel, item.instanceid),
            component_name=get_component_translation(strings, item.component),
            is_used=await files.is_file_used(item),
        ))

    return FileListResponse(
        course_id=course_id,
        component=component,
        filetype=filetype,
        page=page,
        perpage=perpage,
        total=files.get_file_list_total_size(),
        files=entries,
    )


@router.get("/courses/{course_id}/files/components", response_model=list[OptionOut])
async def list_course_components(
    course_id: int,
    _user: CurrentUser = Depends(require_capability(CAP_VIEW)),
    context: Context = Depends(get_course_scope),
    db: AsyncSession = Depends(get_db),
):
    """Components with files in the course, for the component filter."""
    components = await _course_files(db, course_id, context).get_components()
    return [OptionOut(key=key, label=label) for key, label in components.items()]


@router.post("/courses/{course_id}/files/license", response_model=LicenseChangeResponse)
async def change_files_license(
    course_id: int,
    body: LicenseChangeRequest,
    user: CurrentUser = Depends(require_capability(CAP_CHANGE_LICENSE)),
    context: Context = Depends(get_course_scope),
    db: AsyncSession = Depends(get_db),
):
    """Set the license of the selected files."""
    files = _course_files(db, course_id, context, user)
    try:
        changed = await files.set_files_license(body.file_ids, body.license)
    except CourseFilesError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    return LicenseChangeResponse(
        license=body.license,
        requested=sorted(set(body.file_ids)),
        changed=changed,
    )


@router.get("/files/types", response_model=list[OptionOut])
async def list_file_types(_user: CurrentUser = Depends(get_current_user)):
    """File type filter options."""
    types = CourseFiles.get_file_types(get_string_manager())
    return [OptionOut(key=key, label=label) for key, label in types.items()]


@router.get("/licenses", response_model=list[LicenseOut])
async def list_licenses(_user: CurrentUser = Depends(get_current_user)):
    """Licenses allowed on this site, with display colours."""
    registry = LicenseRegistry(get_string_manager())
    return [
        LicenseOut(code=code, name=name, color=registry.get_license_name_color(code).color)
        for code, name in registry.get_available_licenses().items()
    ]
