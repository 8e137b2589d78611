"""
backend/routes_projects.py

Public read-only endpoints over the seeded project collection.

Filtering happens here and only here: clients pass their criteria as query
parameters and render the result as-is. No pagination, no server-side sort.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query

from backend.analytics import build_filter_options, cities_for, districts_for, trending_sectors
from backend.auth_context import get_storage
from backend.config import IS_DEV
from backend.errors import NotFoundError
from backend.filters import ProjectFilters
from backend.models import MarketIndicator, Project
from backend.storage import Storage

router = APIRouter(
    prefix="/api",
    tags=["projects"],
)


def get_project_filters(
    country: Optional[str] = Query(None, max_length=100),
    sector: Optional[str] = Query(None, max_length=100),
    sub_sector: Optional[str] = Query(None, alias="subSector", max_length=100),
    project_type: Optional[str] = Query(None, alias="projectType", max_length=100),
    city: Optional[str] = Query(None, max_length=100),
    district: Optional[str] = Query(None, max_length=100),
    status: Optional[str] = Query(None, max_length=100),
    min_investment: Optional[float] = Query(None, alias="minInvestment", ge=0),
    max_investment: Optional[float] = Query(None, alias="maxInvestment", ge=0),
    min_roi: Optional[float] = Query(None, alias="minRoi"),
    max_roi: Optional[float] = Query(None, alias="maxRoi"),
    is_luxury: Optional[bool] = Query(None, alias="isLuxury"),
    is_waterfront: Optional[bool] = Query(None, alias="isWaterfront"),
    is_sustainable: Optional[bool] = Query(None, alias="isSustainable"),
    search: Optional[str] = Query(None, max_length=200, description="Substring of the project name"),
) -> ProjectFilters:
    return ProjectFilters(
        country=country,
        sector=sector,
        sub_sector=sub_sector,
        project_type=project_type,
        city=city,
        district=district,
        status=status,
        min_investment=min_investment,
        max_investment=max_investment,
        min_roi=min_roi,
        max_roi=max_roi,
        is_luxury=is_luxury,
        is_waterfront=is_waterfront,
        is_sustainable=is_sustainable,
        search=search,
    )


@router.get("/projects", response_model=List[Project])
def list_projects(
    filters: ProjectFilters = Depends(get_project_filters),
    storage: Storage = Depends(get_storage),
) -> List[Project]:
    projects = storage.get_projects(filters)
    if IS_DEV:
        applied = filters.model_dump(exclude_none=True, by_alias=True)
        print(f"[PROJECTS] List: filters={applied}, results={len(projects)}")
    return projects


@router.get("/projects/{project_id}", response_model=Project)
def get_project(
    project_id: int = Path(..., description="Project ID"),
    storage: Storage = Depends(get_storage),
) -> Project:
    project = storage.get_project(project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


@router.get("/market-indicators", response_model=List[MarketIndicator])
def list_market_indicators(storage: Storage = Depends(get_storage)) -> List[MarketIndicator]:
    return storage.get_market_indicators()


@router.get("/filter-options")
def get_filter_options(storage: Storage = Depends(get_storage)) -> Dict[str, Any]:
    return build_filter_options(storage.get_projects())


@router.get("/cities/{country}", response_model=List[str])
def list_cities(country: str, storage: Storage = Depends(get_storage)) -> List[str]:
    return cities_for(storage.get_projects(), country)


@router.get("/districts/{country}/{city}", response_model=List[str])
def list_districts(country: str, city: str, storage: Storage = Depends(get_storage)) -> List[str]:
    return districts_for(storage.get_projects(), country, city)


@router.get("/trending-sectors")
def list_trending_sectors(storage: Storage = Depends(get_storage)) -> List[Dict[str, Any]]:
    return trending_sectors(storage.get_projects())
