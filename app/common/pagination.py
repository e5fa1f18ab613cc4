"""
分页引擎：page / limit / total + 请求 URL → 分页描述 + 导航链接

纯函数，不访问存储；链接只改写 page 参数，其余 path / query 原样保留。
"""

import math
from typing import Any, Literal
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import BaseModel

from app.common.errors import ValidationFailed

# 数据库 OFFSET 为 64 位有符号整数
MAX_OFFSET = 2**63 - 1


class Paging(BaseModel):
    """分页描述：next / previous 在边界处为 None"""

    total_items: int
    page_size: int
    current: int
    count: int
    next: int | None = None
    previous: int | None = None


class Link(BaseModel):
    href: str
    rel: Literal["prev", "current", "next"]
    method: Literal["GET"] = "GET"


class PaginatedResult(BaseModel):
    payload: list[Any]
    paging: Paging
    links: list[Link]


def check_page_params(page: int, limit: int) -> None:
    """page / limit 必须为正整数，否则直接拒绝"""
    if limit <= 0:
        raise ValidationFailed("limit 必须大于 0")
    if page <= 0:
        raise ValidationFailed("page 必须大于 0")
    if (page - 1) * limit > MAX_OFFSET:
        raise ValidationFailed("page 超出范围")


def page_offset(page: int, limit: int) -> int:
    check_page_params(page, limit)
    return (page - 1) * limit


def with_page(url: str, page: int) -> str:
    """
    改写 URL 中的 page 参数；已有则原位替换（去重），没有则追加到末尾。

    无值参数（?archived）会被规范化为 archived=。
    """
    parts = urlsplit(url)
    query: list[tuple[str, str]] = []
    replaced = False
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key == "page":
            if replaced:
                continue
            value = str(page)
            replaced = True
        query.append((key, value))
    if not replaced:
        query.append(("page", str(page)))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def paginate(items: list[Any], total: int, page: int, limit: int, url: str) -> PaginatedResult:
    """组装分页结果：payload + paging + links（顺序固定为 prev / current / next）"""
    check_page_params(page, limit)

    total_pages = math.ceil(total / limit)
    next_page = page + 1 if total_pages > page else None
    previous_page = page - 1 if page > 1 else None

    paging = Paging(
        total_items=total,
        page_size=limit,
        current=page,
        count=len(items),
        next=next_page,
        previous=previous_page,
    )

    links: list[Link] = []
    if previous_page is not None:
        links.append(Link(href=with_page(url, previous_page), rel="prev"))
    links.append(Link(href=with_page(url, page), rel="current"))
    if next_page is not None:
        links.append(Link(href=with_page(url, next_page), rel="next"))

    return PaginatedResult(payload=items, paging=paging, links=links)
