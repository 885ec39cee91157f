"""Listing router - the client-facing, redacted registry."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from blacklist_registry.api.dependencies import get_query_service, get_registry_settings
from blacklist_registry.api.schemas import RenderedPageResponse
from blacklist_registry.config import RegistrySettings
from blacklist_registry.query import RegistryQueryService
from blacklist_registry.rendering import render, render_markup, resolve_protocol

router = APIRouter()


@router.get("/the-blacklist", response_model=RenderedPageResponse)
async def rendered_list(
    protocol: Optional[str] = Query(default=None, description="legacy | current"),
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    format: Literal["json", "html"] = Query(default="json"),
    query: RegistryQueryService = Depends(get_query_service),
    settings: RegistrySettings = Depends(get_registry_settings),
):
    """Rendered registry page for list clients.

    The protocol is resolved before the store is read so that an unknown
    version is refused outright.
    """
    version = resolve_protocol(protocol or settings.default_protocol)
    result = await query.fetch_page(
        page=page,
        limit=limit,
        min_position=settings.min_position,
        max_position=settings.max_position,
    )
    items = render(result.items, version)

    if format == "html":
        return HTMLResponse(render_markup(items, version))

    next_url = None
    if result.has_more:
        next_url = (
            f"/the-blacklist?format=json&protocol={version.value}"
            f"&page={result.next_page}&limit={result.limit}"
        )
    return RenderedPageResponse(
        items=items,
        total=result.total,
        page=result.page,
        limit=result.limit,
        protocol=version.value,
        has_more=result.has_more,
        next=next_url,
    )
