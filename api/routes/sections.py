"""Section data endpoints: snapshot, fetch gate, normalized views, cache reset."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.models import DashboardStateOut, FetchOut, SectionOut
from api.services import get_provider, require_authenticated
from dashboard.provider import DashboardProvider
from dashboard.sections import Section, parse_section, state_to_json
from dashboard.views import ALL_PRODUCTS, TIMELINE_FILTERS, SectionView, build_view

router = APIRouter(tags=["sections"], dependencies=[Depends(require_authenticated)])


def _resolve_section(section: str) -> Section:
    try:
        return parse_section(section)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


def _section_out(provider: DashboardProvider, section: Section) -> SectionOut:
    flags = provider.get_flags()
    data = provider.get_section(section)
    return SectionOut(
        section=section.value,
        loaded=data is not None,
        data=data,
        attempted=flags.attempted[section],
        in_flight=flags.in_flight[section],
    )


@router.get("/sections", response_model=DashboardStateOut, summary="Full dashboard snapshot")
async def dashboard_state(provider: DashboardProvider = Depends(get_provider)) -> DashboardStateOut:
    """Return every section's payload with the last error and loading flags."""
    return DashboardStateOut(
        data=state_to_json(provider.get_state()),
        error=provider.get_error(),
        loading=provider.is_loading(),
        flags=provider.get_flags().to_dict(),
    )


@router.get("/sections/{section}", response_model=SectionOut, summary="One section")
async def section_detail(
    section: str,
    provider: DashboardProvider = Depends(get_provider),
) -> SectionOut:
    return _section_out(provider, _resolve_section(section))


@router.post("/sections/{section}/fetch", response_model=FetchOut, summary="Fetch a section")
async def fetch_section(
    section: str,
    force_refresh: bool = Query(False, description="Bypass the attempted/cached check"),
    wait: bool = Query(True, description="Wait for the webhook call to finish"),
    provider: DashboardProvider = Depends(get_provider),
) -> FetchOut:
    """Run the fetch gate for *section*.

    A call for a section that is already in flight, or already attempted or
    loaded without ``force_refresh``, is a no-op and reports ``started=false``.
    """
    resolved = _resolve_section(section)
    task = provider.fetch_section(resolved, force_refresh=force_refresh)
    if task is not None and wait:
        # A dropped request must not cancel the webhook call
        await asyncio.shield(task)
    return FetchOut(
        started=task is not None,
        error=provider.get_error(),
        section=_section_out(provider, resolved),
    )


@router.get("/sections/{section}/view", response_model=SectionView,
            summary="Normalized section view")
async def section_view(
    section: str,
    product: str = Query(ALL_PRODUCTS, description="Products: restrict monthly sales to one product"),
    timeline: Optional[str] = Query(
        None, description="Finance: timeline measure (profit, revenue, expenses)"
    ),
    provider: DashboardProvider = Depends(get_provider),
) -> SectionView:
    """Typed KPI and chart data for *section*; zero defaults when not loaded.

    Returns 400 for an unknown ``timeline`` filter.
    """
    resolved = _resolve_section(section)
    if timeline is None:
        return build_view(resolved, provider.get_state(), product=product)
    if timeline not in TIMELINE_FILTERS:
        raise HTTPException(status_code=400, detail=f"Unknown timeline filter: {timeline!r}")
    return build_view(resolved, provider.get_state(), product=product, timeline_filter=timeline)


@router.delete("/cache", summary="Clear cached dashboard data")
async def clear_cache(provider: DashboardProvider = Depends(get_provider)) -> dict:
    provider.clear_cache()
    return {"cleared": True}
