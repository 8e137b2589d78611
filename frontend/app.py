# frontend/app.py
# Sector Intelligence – Role-based Project Discovery
#
# Run from repo root: streamlit run frontend/app.py
# Or from frontend folder: streamlit run app.py

from __future__ import annotations

import uuid
from urllib.parse import quote
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

# Import environment config (robust fallback for different run contexts)
try:
    from frontend.config import ENABLE_DEBUG_UI, IS_DEV, SESSION_DAYS, get_api_base_url
except ModuleNotFoundError:
    from config import ENABLE_DEBUG_UI, IS_DEV, SESSION_DAYS, get_api_base_url

try:
    from frontend.auth import (
        clear_auth, get_current_user, init_auth_state, is_authenticated,
        require_auth, set_auth, update_current_user,
    )
except ModuleNotFoundError:
    from auth import (
        clear_auth, get_current_user, init_auth_state, is_authenticated,
        require_auth, set_auth, update_current_user,
    )

try:
    from frontend.api_client import api_request, error_message, extract_session_token
except ModuleNotFoundError:
    from api_client import api_request, error_message, extract_session_token

try:
    from frontend import personas
except ModuleNotFoundError:
    import personas

# --------------------------------------------------------------------
# Page setup
# --------------------------------------------------------------------

st.set_page_config(page_title="Sector Intelligence", page_icon="🏗️", layout="wide")

CUSTOM_CSS = """
<style>
.stButton > button {
    background-color: #0f4c81 !important;
    color: white !important;
    border: none !important;
}

.stButton > button:hover {
    background-color: #1b6ca8 !important;
}

.stSelectbox > div > div {
    border-color: #0f4c81 !important;
}
</style>
"""

st.markdown(CUSTOM_CSS, unsafe_allow_html=True)

# Widgets that make up the dashboard filter form; keys are prefixed per role
FILTER_WIDGETS = [
    "country", "city", "district", "sector", "project_type", "status",
    "min_investment", "max_investment", "min_roi", "max_roi",
    "is_luxury", "is_waterfront", "is_sustainable", "search",
]

# --------------------------------------------------------------------
# State helpers
# --------------------------------------------------------------------


def resolve_browser_id() -> str:
    """Preferences id kept in the ?pid= query param so it survives reloads and bookmarks."""
    pid = st.query_params.get("pid")
    if not pid:
        pid = uuid.uuid4().hex
        st.query_params["pid"] = pid
    return pid


def init_state() -> None:
    ss = st.session_state

    # Auth first so every page sees the same auth state
    init_auth_state()

    ss.setdefault("nav_page", None)
    ss.setdefault("selected_role", None)

    # Filter drafts and sort choice, one per role
    ss.setdefault("filters_by_role", {})
    ss.setdefault("sort_by_role", {})

    ss.setdefault("selected_project_id", None)
    ss.setdefault("favorite_projects", [])
    ss.setdefault("saved_searches", [])
    ss.setdefault("comparison_ids", [])

    # Sidebar country/sector filter, shared by every dashboard
    ss.setdefault("global_filters", {"country": personas.ANY_COUNTRY, "sector": personas.ANY_SECTOR})

    # Anonymous per-browser id for /api/preferences (not an auth token)
    if "browser_id" not in ss:
        ss["browser_id"] = resolve_browser_id()
    ss.setdefault("preferences_loaded", False)

    ss.setdefault("session_rehydrated", False)
    ss.setdefault("_backend_status", "unknown")


init_state()

ss = st.session_state


def go_to(page: str) -> None:
    """Set nav_page and rerun. The only way pages change."""
    st.session_state["nav_page"] = page
    st.rerun()


def current_role() -> str:
    return ss.get("selected_role") or "investor"


def widget_key(role: str, name: str) -> str:
    return f"filter_{role}_{name}"


# --------------------------------------------------------------------
# Backend calls
# --------------------------------------------------------------------


def fetch_json(path: str, params: Optional[Dict[str, Any]] = None, default: Any = None) -> Any:
    resp = api_request("GET", path, params=params)
    if resp is None:
        return default
    if resp.status_code != 200:
        st.error(f"Failed to load {path}: {error_message(resp)}")
        return default
    return resp.json()


def load_filter_options() -> Dict[str, Any]:
    return fetch_json("/api/filter-options", default={}) or {}


def load_projects(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    return fetch_json("/api/projects", params=params, default=[]) or []


def save_preferences(**fields: Any) -> None:
    """Best-effort: preferences are a convenience, failures only show in the log."""
    body = {"sessionId": ss["browser_id"], **fields}
    resp = api_request("POST", "/api/preferences", json=body, timeout=5)
    if resp is not None and resp.status_code != 200 and IS_DEV:
        print(f"[PREFERENCES] Save failed: {resp.status_code}")


def load_preferences() -> None:
    """Seed role, favorites and saved searches from /api/preferences once per session."""
    if ss.get("preferences_loaded"):
        return
    ss["preferences_loaded"] = True
    resp = api_request("GET", f"/api/preferences/{quote(ss['browser_id'], safe='')}", timeout=5)
    # 404 just means nothing was saved from this browser yet
    if resp is None or resp.status_code != 200:
        return
    prefs = resp.json()
    if prefs.get("selectedRole") and not ss.get("selected_role"):
        ss["selected_role"] = prefs["selectedRole"]
    ss["favorite_projects"] = list(prefs.get("favoriteProjects") or [])
    ss["saved_searches"] = list(prefs.get("savedSearches") or [])
    if IS_DEV:
        print(f"[PREFERENCES] Loaded role={ss.get('selected_role')} "
              f"favorites={len(ss['favorite_projects'])} searches={len(ss['saved_searches'])}")


def rehydrate_session() -> None:
    """Refresh current_user from /api/auth/me once per Streamlit session."""
    if ss.get("session_rehydrated"):
        return
    ss["session_rehydrated"] = True
    if not is_authenticated():
        return
    resp = api_request("GET", "/api/auth/me", timeout=5)
    if resp is not None and resp.status_code == 200:
        update_current_user(resp.json())


# --------------------------------------------------------------------
# Sidebar
# --------------------------------------------------------------------


def render_global_filters() -> None:
    st.markdown("**🌍 Global Filters**")
    options = load_filter_options()
    current = ss["global_filters"]
    countries = [personas.ANY_COUNTRY] + list(options.get("countries", []))
    sectors = [personas.ANY_SECTOR] + list(options.get("sectors", []))
    country = st.selectbox("Country", countries,
                           index=countries.index(current["country"]) if current["country"] in countries else 0,
                           key="global_country")
    sector = st.selectbox("Sector", sectors,
                          index=sectors.index(current["sector"]) if current["sector"] in sectors else 0,
                          key="global_sector")
    ss["global_filters"] = {"country": country, "sector": sector}


def render_sidebar() -> None:
    with st.sidebar:
        st.markdown("## 🏗️ Sector Intelligence")

        if ss.get("_backend_status") in ("timeout", "connection_error", "error"):
            st.error("⚠️ Backend unreachable")
        elif ss.get("_backend_status") == "ok":
            st.success("✅ Connected")

        role = ss.get("selected_role")
        if role:
            st.caption(f"Persona: **{personas.get_role_config(role)['title']}**")

        st.markdown("---")
        for page in ("Role Selection", "Dashboard"):
            if st.button(page, key=f"nav_{page}", use_container_width=True):
                go_to(page)
        compare_label = f"⚖️ Compare ({len(ss['comparison_ids'])})"
        if st.button(compare_label, key="nav_compare", use_container_width=True):
            go_to("Compare")

        st.markdown("---")
        render_global_filters()

        st.markdown("---")
        user = get_current_user()
        if is_authenticated() and user:
            st.markdown(f"**{user.get('firstName', '')} {user.get('lastName', '')}**")
            st.caption(user.get("email", ""))
            if st.button("⚙️ Account Settings", key="nav_account", use_container_width=True):
                go_to("Account")
            if st.button("🚪 Logout", key="logout_btn", use_container_width=True):
                # Revokes the backend session; a 401 here just means it was already gone
                api_request("POST", "/api/auth/logout", timeout=5)
                clear_auth()
                go_to("Role Selection")
        else:
            st.caption("_Not logged in_")
            if st.button("🔑 Login / Register", key="nav_login", use_container_width=True):
                go_to("Login")

        if ENABLE_DEBUG_UI:
            st.markdown("---")
            try:
                st.caption(f"API: {get_api_base_url()}")
            except (RuntimeError, ValueError):
                st.caption("API: not configured")
            st.caption(f"Token present: {'yes' if is_authenticated() else 'no'}")


# --------------------------------------------------------------------
# Role selection
# --------------------------------------------------------------------


def render_role_selection() -> None:
    st.title("Who are you?")
    st.caption("Pick a persona to get a dashboard tuned to how you look at projects.")

    cols = st.columns(len(personas.ROLES))
    for col, role in zip(cols, personas.ROLES):
        cfg = personas.get_role_config(role)
        with col:
            st.subheader(cfg["title"])
            st.caption(cfg["description"])
            if st.button(f"Continue as {cfg['title']}", key=f"role_{role}", use_container_width=True):
                ss["selected_role"] = role
                save_preferences(selectedRole=role)
                if IS_DEV:
                    print(f"[ROLE] Selected persona: {role}")
                go_to("Dashboard")


# --------------------------------------------------------------------
# Dashboard
# --------------------------------------------------------------------


def reset_filter_widgets(role: str) -> None:
    """Drop widget-owned keys; must run before the widgets are created."""
    for name in FILTER_WIDGETS:
        ss.pop(widget_key(role, name), None)
    ss["filters_by_role"].pop(role, None)


def apply_saved_search(role: str, entry: str) -> None:
    """Preload widget keys from a saved search; must run before the widgets are created."""
    reset_filter_widgets(role)
    defaults = personas.default_filters()
    for name, value in personas.decode_search(entry).items():
        if value != defaults.get(name):
            ss[widget_key(role, name)] = value


def _select(role: str, name: str, label: str, any_label: str, values: List[str]) -> str:
    options = [any_label] + [v for v in values if v != any_label]
    key = widget_key(role, name)
    # A stale choice (e.g. a city from the previous country) would not be in options
    if ss.get(key) not in options:
        ss.pop(key, None)
    return st.selectbox(label, options, key=key)


def _tri_state(role: str, name: str, label: str) -> str:
    return st.selectbox(label, personas.BOOLEAN_CHOICES, key=widget_key(role, name))


def render_filter_form(role: str, cfg: Dict[str, Any], options: Dict[str, Any],
                       global_filters: Dict[str, Any]) -> Dict[str, Any]:
    """Render the persona's filter widgets and return the resulting draft."""
    fields = cfg["filter_fields"]
    draft = personas.default_filters()
    global_country = global_filters.get("country")
    global_sector = global_filters.get("sector")

    countries = list(dict.fromkeys(options.get("countries", []) + list(options.get("countryToCities", {}))))

    st.markdown("### 🔎 Filters")
    row1 = st.columns(3)
    with row1[0]:
        if "country" in fields and not personas.is_unset(global_country):
            draft["country"] = global_country
            st.caption(f"Country: **{global_country}** (global filter)")
        elif "country" in fields:
            draft["country"] = _select(role, "country", "Country", personas.ANY_COUNTRY, countries)
    with row1[1]:
        if "city" in fields:
            cities = personas.cities_for_country(options, draft["country"])
            draft["city"] = _select(role, "city", "City", personas.ANY_CITY, cities)
    with row1[2]:
        if "district" in fields:
            districts = personas.districts_for_city(options, draft["city"])
            draft["district"] = _select(role, "district", "District", personas.ANY_DISTRICT, districts)

    row2 = st.columns(3)
    with row2[0]:
        if "sector" in fields and not personas.is_unset(global_sector):
            draft["sector"] = global_sector
            st.caption(f"Sector: **{global_sector}** (global filter)")
        elif "sector" in fields:
            draft["sector"] = _select(role, "sector", "Sector", personas.ANY_SECTOR, options.get("sectors", []))
    with row2[1]:
        if "project_type" in fields:
            draft["project_type"] = _select(role, "project_type", "Project Type", personas.ANY_TYPE,
                                            options.get("projectTypes", []))
    with row2[2]:
        if "status" in fields:
            draft["status"] = _select(role, "status", "Status", personas.ANY_STATUS, cfg["statuses"])

    with st.expander("More filters", expanded=False):
        row3 = st.columns(4)
        if "investment" in fields:
            with row3[0]:
                draft["min_investment"] = st.number_input(
                    "Min investment ($M)", min_value=0.0, value=None, step=10.0,
                    key=widget_key(role, "min_investment"))
            with row3[1]:
                draft["max_investment"] = st.number_input(
                    "Max investment ($M)", min_value=0.0, value=None, step=10.0,
                    key=widget_key(role, "max_investment"))
        if "roi" in fields:
            with row3[2]:
                draft["min_roi"] = st.number_input("Min ROI (%)", value=None, step=1.0,
                                                   key=widget_key(role, "min_roi"))
            with row3[3]:
                draft["max_roi"] = st.number_input("Max ROI (%)", value=None, step=1.0,
                                                   key=widget_key(role, "max_roi"))

        row4 = st.columns(4)
        with row4[0]:
            if "is_luxury" in fields:
                draft["is_luxury"] = _tri_state(role, "is_luxury", "Luxury")
        with row4[1]:
            if "is_waterfront" in fields:
                draft["is_waterfront"] = _tri_state(role, "is_waterfront", "Waterfront")
        with row4[2]:
            if "is_sustainable" in fields:
                draft["is_sustainable"] = _tri_state(role, "is_sustainable", "Sustainable")
        with row4[3]:
            if "search" in fields:
                draft["search"] = st.text_input("Project name", key=widget_key(role, "search"),
                                                placeholder="e.g. Tower")

    if st.button("↺ Reset Filters", key=f"reset_filters_{role}"):
        ss["_reset_filters_for"] = role
        st.rerun()

    return draft


def render_saved_searches(role: str, params: Dict[str, Any]) -> None:
    st.markdown("### 💾 Saved Searches")
    save_col, pick_col, apply_col = st.columns([1, 3, 1])
    with save_col:
        if st.button("Save this search", key=f"save_search_{role}"):
            entry = personas.encode_search(params)
            if not entry:
                st.info("Set at least one filter before saving.")
            else:
                ss["saved_searches"] = personas.add_saved_search(ss["saved_searches"], entry)
                save_preferences(savedSearches=ss["saved_searches"])
                st.success("Search saved.")

    searches = ss["saved_searches"]
    if not searches:
        return
    with pick_col:
        picked = st.selectbox("Saved searches", list(reversed(searches)), format_func=personas.describe_search,
                              key=f"saved_search_pick_{role}", label_visibility="collapsed")
    with apply_col:
        if st.button("Apply", key=f"apply_search_{role}"):
            ss["_apply_search_for"] = (role, picked)
            st.rerun()


def render_market_indicators() -> None:
    indicators = fetch_json("/api/market-indicators", default=[]) or []
    if not indicators:
        return
    st.markdown("### 📈 Market Indicators")
    icons = {"opportunity": "🟢", "trend": "🔵", "alert": "🟠"}
    cols = st.columns(len(indicators))
    for col, indicator in zip(cols, indicators):
        with col:
            st.metric(f"{icons.get(indicator.get('type'), '')} {indicator.get('title')}", indicator.get("value"))
            st.caption(f"{indicator.get('valueLabel', '')} · {indicator.get('description', '')}")


def render_trending_sectors() -> None:
    sectors = fetch_json("/api/trending-sectors", default=[]) or []
    if not sectors:
        return
    st.markdown("### 🔥 Trending Sectors")
    df = pd.DataFrame(sectors)
    st.dataframe(
        df,
        use_container_width=True,
        hide_index=True,
        column_config={
            "name": "Sector",
            "projectCount": "Projects",
            "growthRate": st.column_config.NumberColumn("Growth (simulated)", format="%.1f%%"),
            "averageValue": st.column_config.NumberColumn("Avg. Value", format="$%.1fM"),
        },
    )


def projects_frame(projects: List[Dict[str, Any]]) -> pd.DataFrame:
    rows = [
        {
            "id": p.get("id"),
            "name": p.get("name"),
            "city": p.get("city"),
            "district": p.get("district"),
            "sector": p.get("sector"),
            "type": p.get("projectType"),
            "status": p.get("status"),
            "investment": p.get("investment"),
            "roi": personas.relevant_roi(p),
            "completion": p.get("completionDate"),
        }
        for p in projects
    ]
    return pd.DataFrame(rows)


def render_results(role: str, cfg: Dict[str, Any], projects: List[Dict[str, Any]]) -> None:
    sort_options = cfg["sort_options"]
    current_sort = ss["sort_by_role"].get(role, cfg["default_sort"])
    sort_by = st.selectbox(
        "Sort by",
        sort_options,
        index=sort_options.index(current_sort) if current_sort in sort_options else 0,
        format_func=lambda k: personas.SORT_LABELS.get(k, k),
        key=f"sort_{role}",
    )
    ss["sort_by_role"][role] = sort_by
    projects = personas.sort_projects(projects, sort_by)

    summary = personas.summarize(projects)
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Projects", summary["count"])
    m2.metric("Total Value", personas.format_money(summary["total_value"]))
    m3.metric("Avg. ROI", personas.format_pct(summary["average_roi"]))
    m4.metric("Active", summary["active"])

    if not projects:
        st.info("No projects match these filters. Try widening the criteria.")
        return

    st.dataframe(
        projects_frame(projects),
        use_container_width=True,
        hide_index=True,
        column_config={
            "id": "ID",
            "name": "Project",
            "city": "City",
            "district": "District",
            "sector": "Sector",
            "type": "Type",
            "status": "Status",
            "investment": st.column_config.NumberColumn("Investment", format="$%.1fM"),
            "roi": st.column_config.NumberColumn("ROI", format="%.1f%%"),
            "completion": "Completion",
        },
    )

    names = {p["id"]: p["name"] for p in projects}
    selected = st.selectbox(
        "Open project profile",
        options=[None] + list(names),
        format_func=lambda x: "-- Select --" if x is None else names[x],
        key=f"open_project_{role}",
    )
    if selected is None:
        return
    view_col, compare_col = st.columns(2)
    if view_col.button("View Profile", key=f"view_profile_{role}", type="primary"):
        ss["selected_project_id"] = selected
        go_to("Project")
    in_comparison = selected in ss["comparison_ids"]
    if compare_col.button("Remove from comparison" if in_comparison else "Add to comparison",
                          key=f"compare_{role}"):
        toggle_comparison(selected)


def toggle_comparison(project_id: int) -> None:
    ids = ss["comparison_ids"]
    if project_id not in ids and len(ids) >= personas.MAX_COMPARISON:
        st.warning(f"You can compare up to {personas.MAX_COMPARISON} projects at a time.")
        return
    ss["comparison_ids"] = personas.toggle_id(ids, project_id, personas.MAX_COMPARISON)
    st.rerun()


def render_dashboard() -> None:
    if not ss.get("selected_role"):
        st.info("Choose a persona first.")
        render_role_selection()
        return

    role = current_role()
    cfg = personas.get_role_config(role)

    if ss.pop("_reset_filters_for", None) == role:
        reset_filter_widgets(role)
    pending = ss.pop("_apply_search_for", None)
    if pending and pending[0] == role:
        apply_saved_search(role, pending[1])

    st.title(f"{cfg['title']} Dashboard")
    st.caption(cfg["dashboard_title"])

    render_market_indicators()

    options = load_filter_options()
    draft = render_filter_form(role, cfg, options, ss["global_filters"])
    ss["filters_by_role"][role] = draft

    params = personas.build_query_params(draft, ss["global_filters"])
    if IS_DEV:
        print(f"[DASHBOARD] role={role} params={params}")

    st.markdown("### 🏗️ Projects")
    render_results(role, cfg, load_projects(params))

    render_saved_searches(role, params)

    render_trending_sectors()


# --------------------------------------------------------------------
# Project profile
# --------------------------------------------------------------------


def _render_overview(project: Dict[str, Any]) -> None:
    st.markdown("#### Project Description")
    st.write(project.get("description") or "No description available.")
    c1, c2, c3 = st.columns(3)
    c1.metric("Location", project.get("location") or project.get("district") or "n/a")
    c2.metric("City", project.get("city") or "n/a")
    c3.metric("Country", project.get("country") or "n/a")
    if project.get("features"):
        st.markdown("#### Features")
        st.write(" · ".join(project["features"]))
    tags = [label for key, label in (("isLuxury", "Luxury"), ("isWaterfront", "Waterfront"),
                                      ("isSustainable", "Sustainable")) if project.get(key)]
    if tags:
        st.caption("Tags: " + ", ".join(tags))


def _render_financials(project: Dict[str, Any]) -> None:
    c1, c2, c3 = st.columns(3)
    c1.metric("Investment", personas.format_money(project.get("investment")))
    c2.metric("Expected ROI", personas.format_pct(project.get("expectedRoi")))
    c3.metric("Current ROI", personas.format_pct(project.get("currentRoi")))
    st.caption(f"Contract type: {project.get('contractType') or 'n/a'}")


def _render_timeline(project: Dict[str, Any]) -> None:
    c1, c2 = st.columns(2)
    c1.metric("Status", project.get("status") or "n/a")
    c2.metric("Target Completion", project.get("completionDate") or "TBD")


def _render_specs(project: Dict[str, Any]) -> None:
    specs = {
        "Sub-sector": project.get("subSector"),
        "Project type": project.get("projectType"),
        "Size (sq ft)": project.get("size"),
        "Built-up area (sq ft)": project.get("builtUpArea"),
        "Floors": project.get("floors"),
        "Capacity": project.get("capacity"),
    }
    rows = [{"Attribute": k, "Value": v} for k, v in specs.items() if v is not None]
    if rows:
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
    else:
        st.info("No specifications published yet.")


def _render_market_context(project: Dict[str, Any]) -> None:
    peers = load_projects({"sector": project.get("sector")})
    peers = [p for p in peers if p.get("id") != project.get("id")]
    if not peers:
        st.info("No comparable projects in this sector yet.")
        return
    st.markdown(f"#### Other {project.get('sector')} projects")
    st.dataframe(projects_frame(peers), use_container_width=True, hide_index=True)


# Role-specific tabs share a few renderers; unknown tabs fall back to specs
TAB_RENDERERS = {
    "overview": _render_overview,
    "financials": _render_financials,
    "timeline": _render_timeline,
    "analysis": _render_market_context,
    "roi-projections": _render_financials,
    "market-comparison": _render_market_context,
    "market-analysis": _render_market_context,
    "timeline-details": _render_timeline,
}


def render_project_profile() -> None:
    project_id = ss.get("selected_project_id")
    if project_id is None:
        st.info("Select a project from your dashboard.")
        if st.button("← Back to Dashboard", key="profile_back_empty"):
            go_to("Dashboard")
        return

    resp = api_request("GET", f"/api/projects/{project_id}")
    if resp is None:
        return
    if resp.status_code == 404:
        st.warning("This project no longer exists.")
        return
    if resp.status_code != 200:
        st.error(error_message(resp, "Failed to load project"))
        return
    project = resp.json()

    if st.button("← Back to Dashboard", key="profile_back"):
        go_to("Dashboard")

    st.title(project.get("name", "Project"))
    st.caption(f"{project.get('sector')} · {project.get('projectType')} · {project.get('city')}, "
               f"{project.get('country')}")
    if project.get("imageUrl"):
        st.image(project["imageUrl"], use_container_width=True)

    favorites: List[int] = ss["favorite_projects"]
    is_favorite = project_id in favorites
    fav_col, compare_col = st.columns(2)
    if fav_col.button("★ Remove from favorites" if is_favorite else "☆ Add to favorites", key="toggle_favorite"):
        ss["favorite_projects"] = personas.toggle_id(favorites, project_id)
        save_preferences(favoriteProjects=ss["favorite_projects"])
        st.rerun()
    in_comparison = project_id in ss["comparison_ids"]
    if compare_col.button("⚖️ Remove from comparison" if in_comparison else "⚖️ Add to comparison",
                          key="toggle_comparison"):
        toggle_comparison(project_id)

    tabs = personas.get_role_config(current_role())["profile_tabs"]
    for tab, container in zip(tabs, st.tabs([personas.tab_label(t) for t in tabs])):
        with container:
            TAB_RENDERERS.get(tab, _render_specs)(project)


# --------------------------------------------------------------------
# Comparison
# --------------------------------------------------------------------


def render_comparison() -> None:
    st.title("Project Comparison")
    ids = ss["comparison_ids"]
    if not ids:
        st.info("Add projects to the comparison from the dashboard or a project profile.")
        return

    by_id = {p["id"]: p for p in load_projects({})}
    projects = [by_id[i] for i in ids if i in by_id]
    # Drop ids that no longer resolve to a project
    ss["comparison_ids"] = [p["id"] for p in projects]
    if not projects:
        st.info("The selected projects are no longer available.")
        return

    st.dataframe(pd.DataFrame(personas.comparison_rows(projects)), use_container_width=True, hide_index=True)

    cols = st.columns(len(projects) + 1)
    for col, project in zip(cols, projects):
        if col.button(f"Remove {project['name']}", key=f"compare_remove_{project['id']}"):
            ss["comparison_ids"] = personas.toggle_id(ss["comparison_ids"], project["id"])
            st.rerun()
    if cols[-1].button("Clear all", key="compare_clear"):
        ss["comparison_ids"] = []
        st.rerun()


# --------------------------------------------------------------------
# Login / Register
# --------------------------------------------------------------------


def complete_sign_in(resp, success_message: str) -> None:
    token = extract_session_token(resp)
    user = resp.json().get("user", {})
    if not token:
        st.error("Sign-in failed: no session returned by the backend.")
        return
    set_auth(token, user)
    ss["_clear_auth_fields"] = True
    print(f"[AUTH] Signed in: role={user.get('selectedRole')}")
    st.success(success_message)
    go_to("Dashboard")


def render_login() -> None:
    # Widget keys can only be cleared before the widgets exist
    if ss.pop("_clear_auth_fields", None):
        for key in ("login_email", "login_password", "register_password", "register_confirm"):
            ss.pop(key, None)

    if is_authenticated():
        st.success("You are already logged in.")
        return

    login_col, register_col = st.columns(2)

    with login_col:
        st.header("Login")
        with st.form("login_form"):
            email = st.text_input("Email", key="login_email")
            password = st.text_input("Password", type="password", key="login_password")
            submitted = st.form_submit_button("Login")

        if submitted:
            if not email or not password:
                st.error("Please enter email and password.")
            else:
                resp = api_request("POST", "/api/auth/login", json={"email": email, "password": password},
                                   timeout=10)
                if resp is not None and resp.status_code == 200:
                    complete_sign_in(resp, "Welcome back!")
                elif resp is not None:
                    st.error(error_message(resp, "Login failed"))

    with register_col:
        st.header("Create Account")
        with st.form("register_form"):
            first_name = st.text_input("First name", key="register_first_name")
            last_name = st.text_input("Last name", key="register_last_name")
            reg_email = st.text_input("Email", key="register_email")
            phone = st.text_input("Phone (optional)", key="register_phone")
            roles = personas.ROLES
            default_role = ss.get("selected_role") or "investor"
            role = st.selectbox("I am a...", roles, index=roles.index(default_role),
                                format_func=lambda r: personas.get_role_config(r)["title"],
                                key="register_role")
            reg_password = st.text_input("Password", type="password", key="register_password",
                                         help="At least 8 characters")
            confirm = st.text_input("Confirm password", type="password", key="register_confirm")
            reg_submitted = st.form_submit_button("Register")

        if reg_submitted:
            if reg_password != confirm:
                st.error("Passwords don't match")
            else:
                body = {
                    "email": reg_email,
                    "firstName": first_name,
                    "lastName": last_name,
                    "phoneNumber": phone or None,
                    "password": reg_password,
                    "confirmPassword": confirm,
                    "selectedRole": role,
                }
                resp = api_request("POST", "/api/auth/register", json=body, timeout=10)
                if resp is not None and resp.status_code == 201:
                    ss["selected_role"] = role
                    complete_sign_in(resp, "Account created!")
                elif resp is not None:
                    st.error(error_message(resp, "Registration failed"))

    st.caption(f"Sessions last {SESSION_DAYS} days or until you log out.")


# --------------------------------------------------------------------
# Account settings
# --------------------------------------------------------------------


def render_account() -> None:
    if not require_auth():
        return

    user = get_current_user() or {}
    st.title("Account Settings")

    st.subheader("Profile")
    with st.form("profile_form"):
        c1, c2 = st.columns(2)
        first_name = c1.text_input("First name", value=user.get("firstName", ""))
        last_name = c2.text_input("Last name", value=user.get("lastName", ""))
        email = st.text_input("Email", value=user.get("email", ""))
        phone = st.text_input("Phone", value=user.get("phoneNumber") or "")
        roles = personas.ROLES
        current = user.get("selectedRole") if user.get("selectedRole") in roles else "investor"
        role = st.selectbox("Role", roles, index=roles.index(current),
                            format_func=lambda r: personas.get_role_config(r)["title"])
        notifications = st.checkbox("Email notifications", value=bool(user.get("emailNotifications", True)))
        save_profile = st.form_submit_button("Save Profile")

    if save_profile:
        body = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "phoneNumber": phone or None,
            "selectedRole": role,
            "emailNotifications": notifications,
        }
        resp = api_request("PUT", "/api/account/profile", json=body, timeout=10)
        if resp is not None and resp.status_code == 200:
            update_current_user(resp.json()["user"])
            ss["selected_role"] = role
            st.success("Profile updated.")
        elif resp is not None and is_authenticated():
            st.error(error_message(resp, "Profile update failed"))

    st.subheader("Change Password")
    with st.form("password_form", clear_on_submit=True):
        current_password = st.text_input("Current password", type="password")
        new_password = st.text_input("New password", type="password", help="At least 8 characters")
        confirm_password = st.text_input("Confirm new password", type="password")
        change = st.form_submit_button("Update Password")

    if change:
        if new_password != confirm_password:
            st.error("Passwords don't match")
        else:
            body = {
                "currentPassword": current_password,
                "newPassword": new_password,
                "confirmPassword": confirm_password,
            }
            resp = api_request("PUT", "/api/account/password", json=body, timeout=10)
            if resp is not None and resp.status_code == 200:
                st.success("Password updated.")
            elif resp is not None and is_authenticated():
                # Still signed in: a 401 here is about the current password, not the session
                st.error(error_message(resp, "Password update failed"))


# --------------------------------------------------------------------
# Main
# --------------------------------------------------------------------


def main() -> None:
    init_auth_state()
    rehydrate_session()
    load_preferences()

    if not ss.get("nav_page"):
        ss["nav_page"] = "Dashboard" if ss.get("selected_role") else "Role Selection"

    nav_page = ss.get("nav_page")
    print(f"[ROUTING] page={nav_page} | token_present={is_authenticated()} | role={ss.get('selected_role')}")

    render_sidebar()

    if nav_page == "Role Selection":
        render_role_selection()
    elif nav_page == "Dashboard":
        render_dashboard()
    elif nav_page == "Project":
        render_project_profile()
    elif nav_page == "Compare":
        render_comparison()
    elif nav_page == "Account":
        render_account()
    elif nav_page == "Login":
        render_login()
    else:
        ss["nav_page"] = "Role Selection"
        render_role_selection()


if __name__ == "__main__":
    main()
