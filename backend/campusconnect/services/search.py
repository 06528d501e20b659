"""Substring filters for the list endpoints."""

from sqlmodel import or_

LIKE_ESCAPE = "\\"


def escape_like(text: str) -> str:
    # user text is matched literally, wildcards included
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def contains(column, text: str):
    """Case-insensitive ``column LIKE %text%`` with ``text`` taken literally."""
    return column.ilike(f"%{escape_like(text)}%", escape=LIKE_ESCAPE)


def contains_any(text: str, *columns):
    return or_(*[contains(column, text) for column in columns])
