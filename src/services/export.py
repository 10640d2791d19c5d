"""Render bookmarks as a Netscape bookmark file (browser-compatible HTML)."""
import html
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from core.exceptions import ExportError
from services.utils import as_utc

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "bookmarks.html"
ROOT_FOLDER = "Bookmarks"


class ExportableBookmark(Protocol):
    id: int
    title: str
    url: str
    created_at: datetime
    updated_at: datetime


def _timestamp(value: datetime | None, field: str) -> int:
    if value is None:
        raise ExportError(f"missing {field}")
    return int(as_utc(value).timestamp())


def render_entry(bookmark: ExportableBookmark) -> str:
    """One `<DT><A ...>` line for a bookmark."""
    if not bookmark.url:
        raise ExportError("missing url")
    add_date = _timestamp(bookmark.created_at, "created_at")
    last_modified = _timestamp(bookmark.updated_at, "updated_at")
    return (
        f'<DT><A HREF="{html.escape(bookmark.url, quote=True)}" '
        f'ADD_DATE="{add_date}" LAST_MODIFIED="{last_modified}">'
        f"{html.escape(bookmark.title or '', quote=False)}</A>"
    )


def render_netscape(bookmarks: Iterable[ExportableBookmark]) -> str:
    """
    Build the whole export document.

    All bookmarks go into a single "Bookmarks" folder. If any bookmark cannot
    be encoded an ExportError is raised and nothing is returned, so callers
    never emit a partial document.
    """
    entries = []
    for bookmark in bookmarks:
        try:
            entries.append("        " + render_entry(bookmark))
        except (ExportError, AttributeError, TypeError, ValueError, OverflowError) as e:
            bookmark_id = getattr(bookmark, "id", None)
            raise ExportError(f"failed to encode bookmark {bookmark_id}: {e}") from e

    lines = [
        "<!DOCTYPE NETSCAPE-Bookmark-file-1>",
        "<!-- This is an automatically generated file.",
        "     It will be read and overwritten.",
        "     DO NOT EDIT! -->",
        '<META HTTP-EQUIV="Content-Type" CONTENT="text/html; charset=UTF-8">',
        f"<TITLE>{ROOT_FOLDER}</TITLE>",
        f"<H1>{ROOT_FOLDER}</H1>",
        "<DL><p>",
        f"    <DT><H3>{ROOT_FOLDER}</H3>",
        "    <DL><p>",
        *entries,
        "    </DL><p>",
        "</DL><p>",
    ]
    logger.debug("netscape_document_rendered", extra={"bookmarks_count": len(entries)})
    return "\n".join(lines) + "\n"
