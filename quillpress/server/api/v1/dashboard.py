"""Dashboard API Endpoints."""

from fastapi import APIRouter

from quillpress.core.models.io.system import DashboardStats
from quillpress.server.services.deps import DashboardServiceDep

router = APIRouter(tags=["dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Dashboard Statistics",
    description="Counts of posts by status, users, pages, pending comments, media, tags and categories.",
)
async def dashboard_stats(service: DashboardServiceDep) -> DashboardStats:
    return await service.stats()
