"""Async iterators that follow ``next_url`` across list pages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Mapping, Sequence

    from .client import ResourceControllerV2
    from .schema import ResourceAlias, ResourceBinding, ResourceInstance, ResourceKey

PAGING_PARAMETERS = frozenset({"limit", "start"})


def get_start_token(next_url: str | None) -> str | None:
    """Return the ``start`` query parameter of a ``next_url`` link, if any."""

    if not next_url:
        return None
    return httpx.URL(next_url).params.get("start")


def _check_filters(filters: Mapping[str, Any]) -> None:
    clashing = sorted(PAGING_PARAMETERS.intersection(filters))
    if clashing:
        raise ValueError(
            f"Pass page_size instead of {', '.join(clashing)}; the iterator manages paging itself"
        )


async def _iterate[T](
    fetch_page: Callable[[str | None], Awaitable[tuple[Sequence[T], str | None]]],
    *,
    max_items: int | None,
) -> AsyncIterator[T]:
    if max_items is not None and max_items <= 0:
        return
    start: str | None = None
    yielded = 0
    while True:
        items, next_url = await fetch_page(start)
        if not items:
            return
        for item in items:
            yield item
            yielded += 1
            if max_items is not None and yielded >= max_items:
                return
        start = get_start_token(next_url)
        if start is None:
            return


def iter_resource_instances(
    client: ResourceControllerV2,
    *,
    page_size: int | None = None,
    max_items: int | None = None,
    **filters: Any,
) -> AsyncIterator[ResourceInstance]:
    _check_filters(filters)

    async def fetch_page(start: str | None) -> tuple[Sequence[ResourceInstance], str | None]:
        response = await client.list_resource_instances(limit=page_size, start=start, **filters)
        page = response.result
        return (page.resources, page.next_url) if page else ((), None)

    return _iterate(fetch_page, max_items=max_items)


def iter_resource_aliases(
    client: ResourceControllerV2,
    *,
    page_size: int | None = None,
    max_items: int | None = None,
    **filters: Any,
) -> AsyncIterator[ResourceAlias]:
    _check_filters(filters)

    async def fetch_page(start: str | None) -> tuple[Sequence[ResourceAlias], str | None]:
        response = await client.list_resource_aliases(limit=page_size, start=start, **filters)
        page = response.result
        return (page.resources, page.next_url) if page else ((), None)

    return _iterate(fetch_page, max_items=max_items)


def iter_resource_bindings(
    client: ResourceControllerV2,
    *,
    page_size: int | None = None,
    max_items: int | None = None,
    **filters: Any,
) -> AsyncIterator[ResourceBinding]:
    _check_filters(filters)

    async def fetch_page(start: str | None) -> tuple[Sequence[ResourceBinding], str | None]:
        response = await client.list_resource_bindings(limit=page_size, start=start, **filters)
        page = response.result
        return (page.resources, page.next_url) if page else ((), None)

    return _iterate(fetch_page, max_items=max_items)


def iter_resource_keys(
    client: ResourceControllerV2,
    *,
    page_size: int | None = None,
    max_items: int | None = None,
    **filters: Any,
) -> AsyncIterator[ResourceKey]:
    _check_filters(filters)

    async def fetch_page(start: str | None) -> tuple[Sequence[ResourceKey], str | None]:
        response = await client.list_resource_keys(limit=page_size, start=start, **filters)
        page = response.result
        return (page.resources, page.next_url) if page else ((), None)

    return _iterate(fetch_page, max_items=max_items)
