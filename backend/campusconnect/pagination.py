# backend/campusconnect/pagination.py
import math
from dataclasses import dataclass
from typing import Any, Callable, List

from sqlmodel import Session, func, select


@dataclass
class Page:
    items: List[Any]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self, serialize: Callable[[Any], dict]) -> dict:
        return {
            "data": [serialize(item) for item in self.items],
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "pages": self.pages,
            },
        }


def paginate(session: Session, statement, page: int, limit: int) -> Page:
    """Run ``statement`` for one page and count every row it would match."""
    count_stmt = select(func.count()).select_from(statement.order_by(None).subquery())
    total = session.exec(count_stmt).one()
    rows = session.exec(statement.offset((page - 1) * limit).limit(limit)).all()
    return Page(items=list(rows), total=total, page=page, limit=limit)
