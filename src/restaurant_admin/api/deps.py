from dataclasses import dataclass

from fastapi import Query

from restaurant_admin.config import settings


@dataclass
class PageParams:
    page: int
    page_size: int


def page_params(
    page: int = Query(1, ge=1, description="Номер страницы (с 1)"),
    page_size: int = Query(
        settings.PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Записей на странице"
    ),
) -> PageParams:
    return PageParams(page=page, page_size=page_size)
