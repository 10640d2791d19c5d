"""Shared helpers for service-layer queries."""
from datetime import UTC, datetime


def escape_ilike(value: str) -> str:
    r"""Escape LIKE wildcards so user input matches literally (use with escape='\\')."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
