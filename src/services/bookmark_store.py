"""
Bookmark persistence.

Uniqueness and not-found are decided by the database itself: the unique
index on `url` rejects duplicates, and edits/deletes inspect the rows they
actually touched. There is no read-then-write step that concurrent requests
could race through.
"""
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import delete, func, or_, select, text, update
from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from core.config import Settings
from core.exceptions import (
    ConflictError,
    NotFoundError,
    StoreError,
    StoreUnavailableError,
)
from db.session import create_db_engine, create_session_factory
from models.base import Base, utcnow
from models.bookmark import Bookmark
from services.utils import escape_ilike

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, OSError)


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == UNIQUE_VIOLATION
    # SQLite reports "UNIQUE constraint failed: bookmarks.url"
    return "unique" in str(orig).lower()


class BookmarkStore:
    """CRUD, pagination/search and liveness operations over bookmarks."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "BookmarkStore":
        return cls(create_db_engine(settings))

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Run the block in one transaction and classify database failures."""
        try:
            async with self._session_factory() as session, session.begin():
                yield session
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise ConflictError from e
            logger.exception("store_error", extra={"operation": operation})
            raise StoreError(f"failed to {operation}") from e
        except _UNAVAILABLE_ERRORS as e:
            logger.warning(
                "store_unavailable", extra={"operation": operation, "error": str(e)},
            )
            raise StoreUnavailableError from e
        except SQLAlchemyError as e:
            logger.exception("store_error", extra={"operation": operation})
            raise StoreError(f"failed to {operation}") from e

    async def create_schema(self) -> None:
        """Create the bookmarks table and its indexes if they are missing."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except _UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError from e

    async def get_bookmarks(
        self, limit: int | None, offset: int, search: str,
    ) -> tuple[list[Bookmark], int]:
        """
        Return one page of bookmarks, newest first, and the filtered total.

        Args:
            limit: Page size; None returns every row from `offset` on.
            offset: Number of rows to skip.
            search: Case-insensitive substring matched against title or url.
                Empty string disables filtering.

        Returns:
            The page and the number of rows matching `search` before paging.
        """
        filters = []
        if search:
            pattern = f"%{escape_ilike(search)}%"
            filters.append(
                or_(
                    Bookmark.title.ilike(pattern, escape="\\"),
                    Bookmark.url.ilike(pattern, escape="\\"),
                ),
            )

        page_query = (
            select(Bookmark)
            .where(*filters)
            .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
            .offset(offset)
        )
        if limit is not None:
            page_query = page_query.limit(limit)
        count_query = select(func.count()).select_from(Bookmark).where(*filters)

        async with self._transaction("get bookmarks") as session:
            total = await session.scalar(count_query) or 0
            bookmarks = list(await session.scalars(page_query))

        logger.debug(
            "bookmarks_listed",
            extra={"count": len(bookmarks), "total": total, "search": search},
        )
        return bookmarks, total

    async def create_bookmark(self, title: str, url: str) -> Bookmark:
        """Insert a bookmark. Raises ConflictError if the url is taken."""
        bookmark = Bookmark(title=title, url=url)
        async with self._transaction("create bookmark") as session:
            session.add(bookmark)
            await session.flush()

        logger.info("bookmark_created", extra={"bookmark_id": bookmark.id})
        return bookmark

    async def edit_bookmark(self, bookmark_id: int, title: str, url: str) -> Bookmark:
        """Replace title and url and refresh updated_at."""
        stmt = (
            update(Bookmark)
            .where(Bookmark.id == bookmark_id)
            .values(title=title, url=url, updated_at=utcnow())
            .returning(Bookmark)
        )
        async with self._transaction("edit bookmark") as session:
            bookmark = (await session.scalars(stmt)).one_or_none()
            if bookmark is None:
                raise NotFoundError

        logger.info("bookmark_edited", extra={"bookmark_id": bookmark_id})
        return bookmark

    async def delete_bookmark(self, bookmark_id: int) -> None:
        """Delete a bookmark. Raises NotFoundError if no row was removed."""
        stmt = delete(Bookmark).where(Bookmark.id == bookmark_id)
        async with self._transaction("delete bookmark") as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                raise NotFoundError

        logger.info("bookmark_deleted", extra={"bookmark_id": bookmark_id})

    async def bookmark_exists(self, url: str) -> tuple[int, bool]:
        """Return (id, True) for a stored url, (0, False) otherwise."""
        stmt = select(Bookmark.id).where(Bookmark.url == url).limit(1)
        async with self._transaction("check bookmark") as session:
            bookmark_id = await session.scalar(stmt)

        if bookmark_id is None:
            return 0, False
        return bookmark_id, True

    async def ping(self) -> None:
        async with self._transaction("ping") as session:
            await session.execute(text("SELECT 1"))

    async def close(self) -> None:
        """Release all pooled connections. Safe to call more than once."""
        if self._closed:
            return
        logger.info("closing database connection")
        await self._engine.dispose()
        self._closed = True
