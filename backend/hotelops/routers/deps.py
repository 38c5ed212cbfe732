"""
路由公共依赖
"""
from dataclasses import dataclass

from fastapi import Query

from hotelops.config import settings


@dataclass
class Page:
    limit: int
    offset: int


def pagination(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0)
) -> Page:
    """分页参数，limit 上限由配置决定"""
    return Page(limit=limit, offset=offset)
