# frontend/test_personas.py
# Unit tests for persona config and display helpers (no Streamlit context needed)

import pytest

from frontend.personas import (
    MAX_COMPARISON,
    ROLE_CONFIGS,
    ROLES,
    SORT_LABELS,
    add_saved_search,
    build_query_params,
    cities_for_country,
    comparison_rows,
    decode_search,
    default_filters,
    describe_search,
    districts_for_city,
    encode_search,
    format_money,
    format_pct,
    get_role_config,
    merge_global_filters,
    relevant_roi,
    sort_projects,
    summarize,
    tab_label,
    toggle_id,
)

PROJECTS = [
    {"id": 1, "name": "azure Residences", "status": "Under Construction", "investment": 28,
     "expectedRoi": 16.2, "createdAt": "2024-01-01T00:00:00+00:00"},
    {"id": 2, "name": "Coastal Resort", "status": "Completed", "investment": 125,
     "expectedRoi": 30.0, "currentRoi": 14.6, "createdAt": "2024-03-01T00:00:00+00:00"},
    {"id": 3, "name": "Green Valley", "status": "Planning", "investment": 52,
     "createdAt": "2024-02-01T00:00:00+00:00"},
]


def ids(projects):
    return [p["id"] for p in projects]


def test_every_role_has_a_complete_config():
    assert set(ROLE_CONFIGS) == set(ROLES)
    for cfg in ROLE_CONFIGS.values():
        assert cfg["default_sort"] in cfg["sort_options"]
        assert set(cfg["sort_options"]) <= set(SORT_LABELS)
        assert cfg["profile_tabs"][:3] == ["overview", "financials", "timeline"]
        assert cfg["statuses"]


def test_unknown_role_falls_back_to_investor():
    assert get_role_config("architect") is ROLE_CONFIGS["investor"]
    assert get_role_config(None) is ROLE_CONFIGS["investor"]


def test_status_vocabulary_differs_per_role():
    assert "Tender Open" in ROLE_CONFIGS["contractor"]["statuses"]
    assert "Tender Open" not in ROLE_CONFIGS["investor"]["statuses"]


class TestBuildQueryParams:
    def test_default_draft_sends_nothing(self):
        assert build_query_params(default_filters()) == {}

    def test_maps_names_and_drops_sentinels(self):
        draft = default_filters()
        draft.update({
            "country": "Saudi Arabia",
            "city": "All Cities",
            "project_type": "Residential",
            "min_investment": 10.0,
            "search": "  tower ",
        })
        assert build_query_params(draft) == {
            "country": "Saudi Arabia",
            "projectType": "Residential",
            "minInvestment": 10.0,
            "search": "tower",
        }

    def test_zero_is_a_real_bound(self):
        draft = default_filters()
        draft["max_investment"] = 0.0
        assert build_query_params(draft) == {"maxInvestment": 0.0}

    @pytest.mark.parametrize("choice,expected", [("Yes", "true"), ("No", "false"), (True, "true"),
                                                 (False, "false")])
    def test_boolean_facets(self, choice, expected):
        draft = default_filters()
        draft["is_luxury"] = choice
        assert build_query_params(draft) == {"isLuxury": expected}

    def test_any_boolean_is_dropped(self):
        draft = default_filters()
        draft["is_waterfront"] = "Any"
        assert "isWaterfront" not in build_query_params(draft)


class TestGlobalFilters:
    def test_set_global_values_override_the_draft(self):
        draft = default_filters()
        draft.update({"country": "Qatar", "city": "Doha"})
        merged = merge_global_filters(draft, {"country": "UAE", "sector": "Hospitality"})
        assert merged["country"] == "UAE"
        assert merged["sector"] == "Hospitality"
        assert merged["city"] == "Doha"
        assert draft["country"] == "Qatar"

    def test_unset_global_values_keep_the_draft(self):
        draft = default_filters()
        draft["country"] = "Qatar"
        merged = merge_global_filters(draft, {"country": "All Countries", "sector": ""})
        assert merged == draft

    def test_merged_into_query_params(self):
        draft = default_filters()
        draft["project_type"] = "Residential"
        params = build_query_params(draft, {"country": "Saudi Arabia", "sector": "All Sectors"})
        assert params == {"country": "Saudi Arabia", "projectType": "Residential"}

    def test_no_global_filters(self):
        draft = default_filters()
        draft["sector"] = "Real Estate"
        assert build_query_params(draft, None) == build_query_params(draft) == {"sector": "Real Estate"}


class TestSavedSearches:
    def test_saved_search_restores_the_draft(self):
        draft = default_filters()
        draft.update({"country": "Saudi Arabia", "min_investment": 0.0, "is_luxury": "No", "search": "tower"})
        entry = encode_search(build_query_params(draft))
        assert decode_search(entry) == draft

    def test_unknown_and_malformed_params_are_ignored(self):
        restored = decode_search("color=red&minRoi=lots&city=Dubai")
        expected = default_filters()
        expected["city"] = "Dubai"
        assert restored == expected

    def test_describe(self):
        assert describe_search("") == "All projects"
        assert describe_search(encode_search({"country": "UAE", "minRoi": 10.0})) == "country: UAE · minRoi: 10.0"

    def test_add_moves_duplicates_to_the_end_and_caps(self):
        assert add_saved_search(["a=1", "b=2"], "a=1") == ["b=2", "a=1"]
        assert add_saved_search(["a=1"], "") == ["a=1"]
        assert add_saved_search(["a=1", "b=2", "c=3"], "d=4", limit=3) == ["b=2", "c=3", "d=4"]


class TestComparison:
    def test_toggle_adds_and_removes(self):
        assert toggle_id([1, 2], 3) == [1, 2, 3]
        assert toggle_id([1, 2, 3], 2) == [1, 3]

    def test_toggle_respects_limit_when_adding_only(self):
        full = list(range(MAX_COMPARISON))
        assert toggle_id(full, 99, MAX_COMPARISON) == full
        assert toggle_id(full, 0, MAX_COMPARISON) == full[1:]

    def test_rows_put_projects_side_by_side(self):
        rows = comparison_rows(PROJECTS[:2])
        assert rows[0]["Attribute"] == "Country"
        assert set(rows[0]) == {"Attribute", "azure Residences (#1)", "Coastal Resort (#2)"}
        by_attribute = {row["Attribute"]: row for row in rows}
        assert by_attribute["Investment"]["Coastal Resort (#2)"] == "$125.0M"
        # Completed projects compare on their current ROI
        assert by_attribute["ROI"]["Coastal Resort (#2)"] == "14.6%"
        assert by_attribute["Status"]["azure Residences (#1)"] == "Under Construction"
        assert by_attribute["City"]["azure Residences (#1)"] == "n/a"


class TestSortProjects:
    def test_roi_uses_relevant_roi_and_puts_missing_last(self):
        # Coastal Resort is completed so its currentRoi (14.6) ranks below 16.2
        assert ids(sort_projects(PROJECTS, "roi")) == [1, 2, 3]

    def test_value_descending(self):
        assert ids(sort_projects(PROJECTS, "value")) == [2, 3, 1]

    def test_name_is_case_insensitive(self):
        assert ids(sort_projects(PROJECTS, "name")) == [1, 2, 3]

    def test_newest_first(self):
        assert ids(sort_projects(PROJECTS, "newest")) == [2, 3, 1]

    def test_unknown_key_keeps_server_order(self):
        assert ids(sort_projects(PROJECTS, "deadline")) == [1, 2, 3]

    def test_sorting_never_drops_or_mutates(self):
        before = [dict(p) for p in PROJECTS]
        for key in SORT_LABELS:
            assert sorted(ids(sort_projects(PROJECTS, key))) == [1, 2, 3]
        assert PROJECTS == before


def test_relevant_roi():
    assert relevant_roi(PROJECTS[0]) == 16.2
    assert relevant_roi(PROJECTS[1]) == 14.6
    assert relevant_roi(PROJECTS[2]) is None
    assert relevant_roi({"status": "Completed / Operational", "expectedRoi": 9.0}) is None


def test_location_cascade():
    options = {
        "cities": ["Dubai", "Riyadh"],
        "districts": ["Olaya", "DIFC"],
        "countryToCities": {"Saudi Arabia": ["Riyadh", "Jeddah"]},
        "cityToDistricts": {"Riyadh": ["Olaya"]},
    }
    assert cities_for_country(options, "All Countries") == ["Dubai", "Riyadh"]
    assert cities_for_country(options, "Saudi Arabia") == ["Riyadh", "Jeddah"]
    assert cities_for_country(options, "Qatar") == []
    assert districts_for_city(options, "Riyadh") == ["Olaya"]
    assert districts_for_city(options, "All Cities") == ["Olaya", "DIFC"]


def test_formatting():
    assert format_money(28) == "$28.0M"
    assert format_money(1250) == "$1.2B"
    assert format_money(None) == "n/a"
    assert format_pct(16.25) == "16.2%"
    assert format_pct(float("nan")) == "n/a"
    assert tab_label("roi-projections") == "Roi Projections"


def test_summarize():
    summary = summarize(PROJECTS)
    assert summary["count"] == 3
    assert summary["total_value"] == 205
    assert summary["average_roi"] == pytest.approx((16.2 + 14.6) / 2)
    assert summary["active"] == 1
    assert summarize([])["average_roi"] is None
