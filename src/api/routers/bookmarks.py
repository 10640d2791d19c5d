"""Bookmark CRUD, existence check and export endpoints."""
import logging

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response
from fastapi.responses import HTMLResponse

from api.dependencies import get_store
from api.pagination import ListOptions, parse_list_options
from models.bookmark import MAX_ID
from schemas.bookmark import BookmarkExistsResult, BookmarkResponse, BookmarkWrite
from schemas.responses import DataResponse, ErrorResponse
from services.export import EXPORT_FILENAME, render_netscape
from services.ports import (
    BookmarkChecker,
    BookmarkCreator,
    BookmarkEditor,
    BookmarkPager,
    BookmarkRemover,
)

logger = logging.getLogger(__name__)

BookmarkId = Annotated[int, Path(le=MAX_ID, description="Bookmark id")]

router = APIRouter(
    prefix="/bookmarks",
    tags=["bookmarks"],
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get("", response_model=DataResponse[list[BookmarkResponse]])
async def list_bookmarks(
    response: Response,
    options: ListOptions = Depends(parse_list_options),
    pager: BookmarkPager = Depends(get_store),
) -> DataResponse[list[BookmarkResponse]]:
    """
    List bookmarks, newest first.

    The X-Total header carries the number of bookmarks matching `search`
    before pagination, so clients can work out how many pages remain.
    """
    bookmarks, total = await pager.get_bookmarks(
        options.per_page, options.offset, options.search,
    )
    response.headers["X-Total"] = str(total)
    return DataResponse(data=[BookmarkResponse.model_validate(b) for b in bookmarks])


@router.post(
    "",
    response_model=DataResponse[BookmarkResponse],
    responses={409: {"model": ErrorResponse}},
)
async def create_bookmark(
    data: BookmarkWrite,
    creator: BookmarkCreator = Depends(get_store),
) -> DataResponse[BookmarkResponse]:
    """Create a new bookmark."""
    bookmark = await creator.create_bookmark(data.title, data.url)
    return DataResponse(data=BookmarkResponse.model_validate(bookmark))


@router.get("/exists", response_model=DataResponse[BookmarkExistsResult])
async def check_bookmark(
    url: str = Query(default="", description="Exact url to look up"),
    checker: BookmarkChecker = Depends(get_store),
) -> DataResponse[BookmarkExistsResult]:
    """Report whether a bookmark exists for `url`; id is 0 when it does not."""
    bookmark_id, found = await checker.bookmark_exists(url.strip())
    logger.info("bookmark_exists_checked", extra={"url": url, "found": found})
    return DataResponse(data=BookmarkExistsResult(id=bookmark_id, found=found))


@router.get(
    "/export/html",
    response_class=HTMLResponse,
    responses={200: {"content": {"text/html": {}}}},
)
async def export_bookmarks(
    pager: BookmarkPager = Depends(get_store),
) -> HTMLResponse:
    """Download every bookmark as a Netscape bookmark file."""
    bookmarks, _ = await pager.get_bookmarks(None, 0, "")
    document = render_netscape(bookmarks)
    logger.info(
        "bookmarks_exported",
        extra={"bookmarks_count": len(bookmarks), "output_size_bytes": len(document.encode())},
    )
    return HTMLResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.patch(
    "/{bookmark_id}",
    response_model=DataResponse[BookmarkResponse],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def edit_bookmark(
    bookmark_id: BookmarkId,
    data: BookmarkWrite,
    editor: BookmarkEditor = Depends(get_store),
) -> DataResponse[BookmarkResponse]:
    """Replace a bookmark's title and url."""
    bookmark = await editor.edit_bookmark(bookmark_id, data.title, data.url)
    return DataResponse(data=BookmarkResponse.model_validate(bookmark))


@router.delete(
    "/{bookmark_id}",
    response_model=DataResponse[str],
    responses={404: {"model": ErrorResponse}},
)
async def delete_bookmark(
    bookmark_id: BookmarkId,
    remover: BookmarkRemover = Depends(get_store),
) -> DataResponse[str]:
    """Delete a bookmark permanently."""
    await remover.delete_bookmark(bookmark_id)
    return DataResponse(data="bookmark successfully deleted")
