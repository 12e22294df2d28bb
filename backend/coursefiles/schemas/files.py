"""File listing schemas."""

from pydantic import BaseModel, Field


class FileListItem(BaseModel):
    """One file row with the owning context and uploader."""
    id: int
    contextid: int
    component: str
    filearea: str
    itemid: int = 0
    filepath: str = "/"
    filename: str
    mimetype: str | None = None
    filesize: int = 0
    author: str | None = None
    license: str | None = None
    userid: int | None = None
    contextlevel: int
    instanceid: int
    uploader: str | None = None  # Full name of the uploading user


class PaginatedFileList(BaseModel):
    """A page of files plus the total number of matching files."""
    items: list[FileListItem]
    offset: int
    limit: int
    total: int


class LicenseOut(BaseModel):
    """Available license with its display colour."""
    code: str
    name: str
    color: str | None = None


class FileEntryOut(FileListItem):
    """Listing row enriched with links and labels for display."""
    filetype: str | None = None
    license_name: str = ""
    license_color: str | None = None
    download_url: str | None = None
    edit_url: str | None = None
    component_url: str | None = None
    component_name: str
    is_used: bool | None = None


class FileListResponse(BaseModel):
    """Paginated listing response."""
    course_id: int
    component: str
    filetype: str
    page: int
    perpage: int
    total: int
    files: list[FileEntryOut]


class OptionOut(BaseModel):
    """Key/label pair for filter selections."""
    key: str
    label: str


class LicenseChangeRequest(BaseModel):
    """Change the license of the selected files."""
    file_ids: list[int] = Field(default_factory=list)
    license: str


class LicenseChangeResponse(BaseModel):
    """Which of the requested files were relicensed."""
    license: str
    requested: list[int]
    changed: list[int]
