import math

from sqlalchemy import func
from sqlmodel import select


def page_links(page: int, limit: int, total: int) -> dict:
    """Navigation fields rendered under every product listing."""
    return {
        "total_items": total,
        "current_page": page,
        "has_next_page": page * limit < total,
        "has_previous_page": page > 1,
        "next_page": page + 1,
        "previous_page": page - 1,
        "last_page": math.ceil(total / limit),
    }


def paginate(*, session, query, page: int = 1, limit: int = 2) -> dict:
    page = max(page, 1)
    limit = limit if limit > 0 else 2

    total = session.exec(select(func.count()).select_from(query.subquery())).one()
    results = session.exec(query.offset((page - 1) * limit).limit(limit)).all()

    return {**page_links(page, limit, total), "results": results}
