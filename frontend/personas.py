"""
frontend/personas.py
Per-role dashboard configuration and pure display helpers.

No Streamlit imports here so the helpers can be unit tested directly.
Filtering itself is the backend's job: build_query_params() only translates a
dashboard's filter draft into /api/projects query parameters.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import parse_qsl, urlencode

ROLES = ["investor", "contractor", "consultant", "developer", "supplier"]

COMPLETED_STATUSES = {"Completed", "Completed / Operational"}

ANY_COUNTRY = "All Countries"
ANY_SECTOR = "All Sectors"
ANY_TYPE = "All Types"
ANY_CITY = "All Cities"
ANY_DISTRICT = "All Districts"
ANY_STATUS = "All Status"

# Tri-state boolean facets in the filter form
ANY_CHOICE = "Any"
BOOLEAN_CHOICES = [ANY_CHOICE, "Yes", "No"]

# Sidebar filters shared by every dashboard
GLOBAL_FILTER_FIELDS = ("country", "sector")

MAX_COMPARISON = 4
MAX_SAVED_SEARCHES = 10

SORT_LABELS = {
    "roi": "Highest ROI",
    "value": "Highest Value",
    "name": "Name (A-Z)",
    "newest": "Newest First",
}

ROLE_CONFIGS: Dict[str, Dict[str, Any]] = {
    "investor": {
        "title": "Investor",
        "description": "Investment opportunities & market trends",
        "dashboard_title": "Investment Opportunities",
        "statuses": ["Planning", "Under Construction", "Nearing Completion", "Completed / Operational"],
        "filter_fields": ["country", "city", "district", "sector", "project_type", "status",
                          "investment", "roi", "is_luxury", "is_waterfront", "is_sustainable", "search"],
        "sort_options": ["roi", "value", "name", "newest"],
        "default_sort": "roi",
        "profile_tabs": ["overview", "financials", "timeline", "analysis", "roi-projections",
                         "market-comparison"],
    },
    "contractor": {
        "title": "Contractor",
        "description": "Active projects & bidding opportunities",
        "dashboard_title": "Bidding Opportunities",
        "statuses": ["Tender Open", "Planning", "Under Construction", "In Progress", "On Hold"],
        "filter_fields": ["country", "city", "district", "sector", "project_type", "status",
                          "investment", "search"],
        "sort_options": ["newest", "value", "name"],
        "default_sort": "newest",
        "profile_tabs": ["overview", "financials", "timeline", "construction", "procurement",
                         "timeline-details"],
    },
    "consultant": {
        "title": "Consultant",
        "description": "Market insights & advisory data",
        "dashboard_title": "Advisory Pipeline",
        "statuses": ["Planning", "Under Construction", "Completed", "On Hold"],
        "filter_fields": ["country", "city", "sector", "project_type", "status", "investment",
                          "is_sustainable", "search"],
        "sort_options": ["value", "name", "newest"],
        "default_sort": "value",
        "profile_tabs": ["overview", "financials", "timeline", "market-analysis", "feasibility",
                         "recommendations"],
    },
    "developer": {
        "title": "Developer",
        "description": "Development sites & market gaps",
        "dashboard_title": "Development Opportunities",
        "statuses": ["Planning", "Under Construction", "Nearing Completion", "Completed"],
        "filter_fields": ["country", "city", "district", "sector", "project_type", "status",
                          "investment", "roi", "is_luxury", "is_waterfront", "search"],
        "sort_options": ["roi", "value", "name", "newest"],
        "default_sort": "value",
        "profile_tabs": ["overview", "financials", "timeline", "development-plan", "zoning",
                         "site-analysis"],
    },
    "supplier": {
        "title": "Supplier",
        "description": "Materials & equipment for projects",
        "dashboard_title": "Supply Opportunities",
        "statuses": ["Tender Open", "Planning", "Under Construction", "In Progress"],
        "filter_fields": ["country", "city", "sector", "project_type", "status", "investment",
                          "search"],
        "sort_options": ["newest", "value", "name"],
        "default_sort": "newest",
        "profile_tabs": ["overview", "financials", "timeline", "supply-opportunities",
                         "material-specs", "procurement-schedule"],
    },
}

# Filter draft key -> /api/projects query parameter
QUERY_PARAM_NAMES = {
    "country": "country",
    "sector": "sector",
    "sub_sector": "subSector",
    "project_type": "projectType",
    "city": "city",
    "district": "district",
    "status": "status",
    "min_investment": "minInvestment",
    "max_investment": "maxInvestment",
    "min_roi": "minRoi",
    "max_roi": "maxRoi",
    "is_luxury": "isLuxury",
    "is_waterfront": "isWaterfront",
    "is_sustainable": "isSustainable",
    "search": "search",
}


def get_role_config(role: Optional[str]) -> Dict[str, Any]:
    """Config for role; unknown roles fall back to the investor dashboard."""
    return ROLE_CONFIGS.get(role or "", ROLE_CONFIGS["investor"])


def default_filters() -> Dict[str, Any]:
    return {
        "country": ANY_COUNTRY,
        "city": ANY_CITY,
        "district": ANY_DISTRICT,
        "sector": ANY_SECTOR,
        "project_type": ANY_TYPE,
        "status": ANY_STATUS,
        "min_investment": None,
        "max_investment": None,
        "min_roi": None,
        "max_roi": None,
        "is_luxury": ANY_CHOICE,
        "is_waterfront": ANY_CHOICE,
        "is_sustainable": ANY_CHOICE,
        "search": "",
    }


def is_unset(value: Any) -> bool:
    """Empty strings, "all" and "All ..." dropdown sentinels mean "no constraint"."""
    if value is None:
        return True
    if isinstance(value, str):
        text = value.strip()
        return text == "" or text.lower() == "all" or text.startswith("All ") or text == ANY_CHOICE
    return False


def _bool_param(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value == "Yes":
        return "true"
    if value == "No":
        return "false"
    return None


def merge_global_filters(draft: Dict[str, Any], global_filters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Overlay the sidebar country/sector on a dashboard draft; set global values win."""
    merged = dict(draft)
    for key in GLOBAL_FILTER_FIELDS:
        value = (global_filters or {}).get(key)
        if not is_unset(value):
            merged[key] = value
    return merged


def build_query_params(draft: Dict[str, Any], global_filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Translate a filter draft to API query parameters.

    Unset values are dropped; 0 is a real bound and is kept.
    """
    if global_filters:
        draft = merge_global_filters(draft, global_filters)
    params: Dict[str, Any] = {}
    for key, param in QUERY_PARAM_NAMES.items():
        value = draft.get(key)
        if key.startswith("is_"):
            flag = _bool_param(value)
            if flag is not None:
                params[param] = flag
            continue
        if key == "search":
            if isinstance(value, str) and value.strip():
                params[param] = value.strip()
            continue
        if is_unset(value):
            continue
        if isinstance(value, float) and math.isnan(value):
            continue
        params[param] = value.strip() if isinstance(value, str) else value
    return params


def relevant_roi(project: Dict[str, Any]) -> Optional[float]:
    """currentRoi once a project is completed, expectedRoi before that."""
    if project.get("status") in COMPLETED_STATUSES:
        return project.get("currentRoi")
    return project.get("expectedRoi")


def sort_projects(projects: Iterable[Dict[str, Any]], sort_by: str) -> List[Dict[str, Any]]:
    """Client-side ordering only; never removes projects. Unknown keys keep server order."""
    items = list(projects)
    if sort_by == "roi":
        # Projects without an ROI go last
        return sorted(items, key=lambda p: (relevant_roi(p) is None, -(relevant_roi(p) or 0.0)))
    if sort_by == "value":
        return sorted(items, key=lambda p: -(p.get("investment") or 0.0))
    if sort_by == "name":
        return sorted(items, key=lambda p: (p.get("name") or "").casefold())
    if sort_by == "newest":
        return sorted(items, key=lambda p: p.get("createdAt") or "", reverse=True)
    return items


def cities_for_country(options: Dict[str, Any], country: Optional[str]) -> List[str]:
    """Cascading dropdown: cities for the chosen country, or every known city."""
    if is_unset(country):
        return list(options.get("cities", []))
    return list(options.get("countryToCities", {}).get(country, []))


def districts_for_city(options: Dict[str, Any], city: Optional[str]) -> List[str]:
    if is_unset(city):
        return list(options.get("districts", []))
    return list(options.get("cityToDistricts", {}).get(city, []))


def tab_label(tab: str) -> str:
    return " ".join(word.capitalize() for word in tab.split("-"))


def format_money(value: Optional[float]) -> str:
    """Investment amounts are in millions USD."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "n/a"
    if value >= 1000:
        return f"${value / 1000:,.1f}B"
    return f"${value:,.1f}M"


def format_pct(value: Optional[float]) -> str:
    """ROI values are already percentages (16.2 means 16.2%)."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "n/a"
    return f"{value:.1f}%"


def summarize(projects: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Headline metrics for a result set."""
    rois = [r for r in (relevant_roi(p) for p in projects) if r is not None]
    return {
        "count": len(projects),
        "total_value": sum(p.get("investment") or 0.0 for p in projects),
        "average_roi": (sum(rois) / len(rois)) if rois else None,
        "active": sum(1 for p in projects if p.get("status") in ("Under Construction", "In Progress")),
    }


# --------------------------------------------------------------------
# Saved searches are stored as query strings in the savedSearches preference
# --------------------------------------------------------------------


def encode_search(params: Dict[str, Any]) -> str:
    return urlencode(params)


def decode_search(text: str) -> Dict[str, Any]:
    """Rebuild a filter draft from a saved query string; unknown params are ignored."""
    draft = default_filters()
    keys = {param: key for key, param in QUERY_PARAM_NAMES.items()}
    for param, value in parse_qsl(text or ""):
        key = keys.get(param)
        if key is None:
            continue
        if key.startswith("is_"):
            draft[key] = {"true": "Yes", "false": "No"}.get(value, ANY_CHOICE)
        elif key.startswith(("min_", "max_")):
            try:
                draft[key] = float(value)
            except ValueError:
                continue
        else:
            draft[key] = value
    return draft


def describe_search(text: str) -> str:
    parts = [f"{param}: {value}" for param, value in parse_qsl(text or "")]
    return " · ".join(parts) if parts else "All projects"


def add_saved_search(searches: List[str], entry: str, limit: int = MAX_SAVED_SEARCHES) -> List[str]:
    """Append entry (moving an existing copy to the end) and keep the newest `limit`."""
    if not entry:
        return list(searches)
    updated = [s for s in searches if s != entry] + [entry]
    return updated[-limit:]


def toggle_id(ids: List[int], item: int, limit: Optional[int] = None) -> List[int]:
    """Remove item if present, else append it unless the list is already at limit."""
    if item in ids:
        return [i for i in ids if i != item]
    if limit is not None and len(ids) >= limit:
        return list(ids)
    return list(ids) + [item]


COMPARISON_FIELDS = [
    ("Country", "country"),
    ("City", "city"),
    ("District", "district"),
    ("Sector", "sector"),
    ("Type", "projectType"),
    ("Status", "status"),
    ("Completion", "completionDate"),
]


def comparison_rows(projects: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """One row per attribute, one column per project, for side-by-side display."""
    columns = [f"{p.get('name')} (#{p.get('id')})" for p in projects]
    rows = []
    for label, key in COMPARISON_FIELDS:
        rows.append({"Attribute": label, **{c: p.get(key) or "n/a" for c, p in zip(columns, projects)}})
    rows.append({"Attribute": "Investment",
                 **{c: format_money(p.get("investment")) for c, p in zip(columns, projects)}})
    rows.append({"Attribute": "ROI", **{c: format_pct(relevant_roi(p)) for c, p in zip(columns, projects)}})
    return rows
