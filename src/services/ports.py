"""
Narrow store capabilities used by the request handlers.

Each handler depends only on the operation it calls, so tests can substitute
small fakes for the full BookmarkStore.
"""
from typing import Protocol

from models.bookmark import Bookmark


class BookmarkPager(Protocol):
    async def get_bookmarks(
        self, limit: int | None, offset: int, search: str,
    ) -> tuple[list[Bookmark], int]: ...


class BookmarkCreator(Protocol):
    async def create_bookmark(self, title: str, url: str) -> Bookmark: ...


class BookmarkEditor(Protocol):
    async def edit_bookmark(self, bookmark_id: int, title: str, url: str) -> Bookmark: ...


class BookmarkRemover(Protocol):
    async def delete_bookmark(self, bookmark_id: int) -> None: ...


class BookmarkChecker(Protocol):
    async def bookmark_exists(self, url: str) -> tuple[int, bool]: ...


class Pinger(Protocol):
    async def ping(self) -> None: ...
