"""Download and navigation URLs for course files."""

from __future__ import annotations

from enum import Enum
from urllib.parse import quote, urlencode

from coursefiles.config import settings


class UrlShape(str, Enum):
    STANDARD = "standard"          # item id forced to 0
    NO_ITEMID = "no_itemid"        # item id left out of the path
    WITH_ITEMID = "with_itemid"    # item id part of the path
    LEGACY = "legacy"              # old course files, keyed by course id


DOWNLOAD_URL_SHAPES: dict[tuple[str, str], UrlShape] = {
    ("mod_folder", "intro"): UrlShape.STANDARD,
    ("mod_folder", "content"): UrlShape.STANDARD,
    ("mod_resource", "intro"): UrlShape.STANDARD,
    ("mod_resource", "content"): UrlShape.STANDARD,

    ("mod_assign", "intro"): UrlShape.NO_ITEMID,
    ("mod_label", "intro"): UrlShape.NO_ITEMID,

    ("assignsubmission_file", "submission_files"): UrlShape.WITH_ITEMID,
    ("mod_assign", "introattachment"): UrlShape.WITH_ITEMID,
    ("mod_data", "content"): UrlShape.WITH_ITEMID,
    ("mod_forum", "post"): UrlShape.WITH_ITEMID,
    ("mod_forum", "attachment"): UrlShape.WITH_ITEMID,
    ("mod_page", "content"): UrlShape.WITH_ITEMID,
    ("mod_page", "intro"): UrlShape.WITH_ITEMID,
    ("mod_glossary", "entry"): UrlShape.WITH_ITEMID,
    ("mod_wiki", "attachments"): UrlShape.WITH_ITEMID,
    ("course", "section"): UrlShape.WITH_ITEMID,

    ("course", "legacy"): UrlShape.LEGACY,
}


def site_url(path: str, **params) -> str:
    url = f"{settings.wwwroot}{path}"
    if params:
        url += "?" + urlencode(params)
    return url


def pluginfile_url(
    contextid: int,
    component: str,
    filearea: str,
    itemid: int | None,
    filepath: str,
    filename: str,
) -> str:
    """``/pluginfile.php/<ctx>/<component>/<area>[/<item>]<path><name>``."""
    parts = [str(contextid), component, filearea]
    if itemid is not None:
        parts.append(str(itemid))
    path = "/".join(quote(p, safe="") for p in parts)
    return site_url(f"/pluginfile.php/{path}{quote(filepath + filename)}")


def resolve_download_url(
    component: str,
    filearea: str,
    contextid: int,
    itemid: int,
    filepath: str,
    filename: str,
    courseid: int,
) -> str | None:
    """Direct download URL, or None when the file area has no known shape."""
    shape = DOWNLOAD_URL_SHAPES.get((component, filearea))
    if shape is None:
        return None
    if shape is UrlShape.STANDARD:
        return pluginfile_url(contextid, component, filearea, 0, filepath, filename)
    if shape is UrlShape.NO_ITEMID:
        return pluginfile_url(contextid, component, filearea, None, filepath, filename)
    if shape is UrlShape.WITH_ITEMID:
        return pluginfile_url(contextid, component, filearea, itemid, filepath, filename)
    return site_url(f"/file.php/{courseid}{quote(filepath + filename)}")


def course_url(courseid: int) -> str:
    return site_url("/course/view.php", id=courseid)


def module_url(modname: str, cmid: int) -> str:
    return site_url(f"/mod/{modname}/view.php", id=cmid)
