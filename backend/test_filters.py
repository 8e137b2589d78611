"""
backend/test_filters.py

Unit tests for the project filter engine (pure functions, no app/DB).

Run: pytest backend/test_filters.py -v
"""

import pytest

from backend.filters import ProjectFilters, distinct, filter_projects, is_unset, matches
from backend.storage import ProjectStore


@pytest.fixture
def projects(project_factory):
    store = ProjectStore([
        project_factory(name="Azure Residences", country="United Arab Emirates", city="Dubai",
                        district="Downtown Dubai", project_type="Residential", status="Under Construction",
                        investment=28, expected_roi=16.2, is_luxury=True),
        project_factory(name="Olaya Towers", country="Saudi Arabia", city="Riyadh", district="Olaya",
                        status="Nearing Completion", investment=210, expected_roi=18.3),
        project_factory(name="Coastal Resort", country="United Arab Emirates", city="Dubai",
                        district="Jumeirah", sector="Hospitality", project_type="Resort",
                        status="Completed", investment=125, expected_roi=30.0, current_roi=14.6,
                        is_luxury=True, is_waterfront=True),
        project_factory(name="Green Valley", country="United Arab Emirates", city="Dubai",
                        district="Dubai South", project_type="Residential", investment=52,
                        is_sustainable=True),
    ])
    return store.get_projects()


def names(projects):
    return [p.name for p in projects]


class TestSentinels:
    @pytest.mark.parametrize("value", [None, "", "   ", "all", "All", "ALL", "All Sectors",
                                       "All Types", "All Cities", "All Districts", "All Status"])
    def test_unset_values(self, value):
        assert is_unset(value)

    @pytest.mark.parametrize("value", ["Dubai", "Allianz Tower", "Small", "Planning"])
    def test_real_values(self, value):
        assert not is_unset(value)

    def test_sentinels_do_not_constrain(self, projects):
        filters = ProjectFilters(country="all", sector="All Sectors", project_type="All Types",
                                 city="All Cities", district="All Districts", status="All Status")
        assert filter_projects(projects, filters) == projects


class TestMatching:
    def test_empty_filter_returns_everything_in_order(self, projects):
        assert filter_projects(projects, ProjectFilters()) == projects
        assert filter_projects(projects, None) == projects

    def test_country_is_case_insensitive_substring(self, projects):
        result = filter_projects(projects, ProjectFilters(country="saudi"))
        assert names(result) == ["Olaya Towers"]

    def test_city_is_exact(self, projects):
        assert filter_projects(projects, ProjectFilters(city="dubai")) == []
        assert len(filter_projects(projects, ProjectFilters(city="Dubai"))) == 3

    def test_combined_criteria_must_all_hold(self, projects):
        filters = ProjectFilters(city="Dubai", project_type="Residential", is_luxury=True)
        assert names(filter_projects(projects, filters)) == ["Azure Residences"]

    def test_investment_bounds_are_inclusive(self, projects):
        filters = ProjectFilters(min_investment=52, max_investment=125)
        assert names(filter_projects(projects, filters)) == ["Coastal Resort", "Green Valley"]

    def test_single_bound_leaves_other_side_open(self, projects):
        assert names(filter_projects(projects, ProjectFilters(min_investment=200))) == ["Olaya Towers"]
        assert names(filter_projects(projects, ProjectFilters(max_investment=28))) == ["Azure Residences"]

    def test_zero_max_is_a_real_bound(self, projects):
        assert filter_projects(projects, ProjectFilters(max_investment=0)) == []

    def test_boolean_facets_are_tri_state(self, projects):
        assert len(filter_projects(projects, ProjectFilters(is_luxury=None))) == 4
        assert names(filter_projects(projects, ProjectFilters(is_luxury=True))) == [
            "Azure Residences", "Coastal Resort"]
        assert names(filter_projects(projects, ProjectFilters(is_luxury=False))) == [
            "Olaya Towers", "Green Valley"]
        assert names(filter_projects(projects, ProjectFilters(is_waterfront=True))) == ["Coastal Resort"]
        assert names(filter_projects(projects, ProjectFilters(is_sustainable=True))) == ["Green Valley"]

    def test_search_matches_name_substring(self, projects):
        assert names(filter_projects(projects, ProjectFilters(search="resort"))) == ["Coastal Resort"]

    def test_roi_bounds_use_display_relevant_roi(self, projects):
        # Coastal Resort is completed: its currentRoi (14.6) counts, not expectedRoi (30.0)
        result = filter_projects(projects, ProjectFilters(min_roi=25))
        assert result == []
        result = filter_projects(projects, ProjectFilters(min_roi=14, max_roi=17))
        assert names(result) == ["Azure Residences", "Coastal Resort"]

    def test_roi_bound_excludes_projects_without_roi(self, projects):
        result = filter_projects(projects, ProjectFilters(max_roi=100))
        assert "Green Valley" not in names(result)

    def test_no_match_is_empty_list(self, projects):
        assert filter_projects(projects, ProjectFilters(country="Qatar")) == []

    def test_filtering_is_idempotent(self, projects):
        filters = ProjectFilters(city="Dubai", min_investment=30)
        once = filter_projects(projects, filters)
        twice = filter_projects(once, filters)
        assert once == twice
        assert filter_projects(projects, filters) == once

    def test_matches_does_not_mutate(self, projects):
        before = [p.model_dump() for p in projects]
        for p in projects:
            matches(p, ProjectFilters(country="uae", is_luxury=True))
        assert [p.model_dump() for p in projects] == before


def test_distinct_keeps_first_seen_order():
    assert distinct(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
