"""
backend/filters.py

Project filter engine.

A filter is a sparse set of optional criteria; a project matches when every
supplied criterion holds. Client dropdowns send sentinel values such as "all"
or "All Sectors" to mean "no constraint", so those are treated exactly like a
missing value.

Pure Python logic - no FastAPI imports, no database access.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from backend.models import CamelModel, Project


class ProjectFilters(CamelModel):
    country: Optional[str] = None
    sector: Optional[str] = None
    sub_sector: Optional[str] = None
    project_type: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    status: Optional[str] = None
    min_investment: Optional[float] = None
    max_investment: Optional[float] = None
    min_roi: Optional[float] = None
    max_roi: Optional[float] = None
    is_luxury: Optional[bool] = None
    is_waterfront: Optional[bool] = None
    is_sustainable: Optional[bool] = None
    search: Optional[str] = None  # substring of the project name


# Fields compared by exact string equality
EXACT_FIELDS = ("sector", "sub_sector", "project_type", "city", "district", "status")
BOOLEAN_FIELDS = ("is_luxury", "is_waterfront", "is_sustainable")


def is_unset(value: Any) -> bool:
    """True for None, blank strings, "all" and "All ..." sentinels."""
    if value is None:
        return True
    if isinstance(value, str):
        text = value.strip()
        return text == "" or text.lower() == "all" or text.startswith("All ")
    return False


def _within(value: Optional[float], low: Optional[float], high: Optional[float]) -> bool:
    if low is None and high is None:
        return True
    if value is None:
        return False
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def matches(project: Project, filters: ProjectFilters) -> bool:
    # Country matches by case-insensitive containment ("saudi" -> "Saudi Arabia")
    if not is_unset(filters.country):
        if filters.country.strip().lower() not in project.country.lower():
            return False

    for field in EXACT_FIELDS:
        wanted = getattr(filters, field)
        if not is_unset(wanted) and getattr(project, field) != wanted:
            return False

    # Free text: no dropdown sentinels here, only blank means unset
    if filters.search and filters.search.strip():
        if filters.search.strip().lower() not in project.name.lower():
            return False

    if not _within(project.investment, filters.min_investment, filters.max_investment):
        return False

    if not _within(project.relevant_roi, filters.min_roi, filters.max_roi):
        return False

    for field in BOOLEAN_FIELDS:
        wanted = getattr(filters, field)
        if wanted is not None and getattr(project, field) != wanted:
            return False

    return True


def filter_projects(projects: Iterable[Project], filters: Optional[ProjectFilters] = None) -> List[Project]:
    """Return matching projects in their original order."""
    if filters is None:
        return list(projects)
    return [p for p in projects if matches(p, filters)]


def distinct(values: Iterable[Any]) -> List[Any]:
    """Distinct values in first-seen order."""
    seen = set()
    out = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out
