"""
backend/analytics.py

Listings derived from the project collection: dropdown options, location
lookups and the trending-sectors summary.

growthRate in trending_sectors is a simulated placeholder, not market data.
"""

from __future__ import annotations

import random
from typing import Any, Dict, List, Optional, Sequence

from backend.filters import distinct
from backend.models import Project
from backend.seed import CITY_TO_DISTRICTS, COUNTRY_TO_CITIES


def build_filter_options(projects: Sequence[Project]) -> Dict[str, Any]:
    return {
        "countries": distinct(p.country for p in projects),
        "sectors": distinct(p.sector for p in projects),
        "projectTypes": distinct(p.project_type for p in projects),
        "cities": distinct(p.city for p in projects),
        "districts": distinct(p.district for p in projects),
        "statuses": distinct(p.status for p in projects),
        "countryToCities": COUNTRY_TO_CITIES,
        "cityToDistricts": CITY_TO_DISTRICTS,
    }


def cities_for(projects: Sequence[Project], country: str) -> List[str]:
    return sorted(distinct(p.city for p in projects if p.country == country))


def districts_for(projects: Sequence[Project], country: str, city: str) -> List[str]:
    return sorted(distinct(p.district for p in projects if p.country == country and p.city == city))


def trending_sectors(projects: Sequence[Project], rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    """Per-sector project count and mean investment, busiest sectors first."""
    rng = rng or random.Random()
    grouped: Dict[str, List[Project]] = {}
    for project in projects:
        grouped.setdefault(project.sector, []).append(project)

    sectors = []
    for name, members in grouped.items():
        total = sum(p.investment for p in members)
        sectors.append({
            "name": name,
            "projectCount": len(members),
            "growthRate": round(rng.uniform(5.0, 25.0), 1),
            "averageValue": round(total / len(members), 1),
        })

    # sorted() is stable: equal counts keep first-seen order
    return sorted(sectors, key=lambda s: s["projectCount"], reverse=True)
