"""
backend/test_storage.py

Storage layer tests: in-memory project store and SQLite identity tables.

Run: pytest backend/test_storage.py -v
"""

from datetime import timedelta

import pytest

from backend.errors import ConflictError
from backend.filters import ProjectFilters
from backend.models import MarketIndicatorCreate, Session, utc_now
from backend.seed import SEED_PROJECTS
from backend.storage import ProjectStore, SqliteStorage


class TestProjectStore:
    def test_seeded_ids_are_sequential(self, storage):
        projects = storage.get_projects()
        assert [p.id for p in projects] == list(range(1, len(SEED_PROJECTS) + 1))

    def test_create_then_get_round_trips(self, project_factory):
        store = ProjectStore()
        data = project_factory(
            description="Twin towers",
            sub_sector="Office",
            contract_type="EPC",
            expected_roi=12.5,
            size=1000.0,
            capacity=20,
            floors=12,
            built_up_area=800.0,
            features=["Gym", "Gym", "Pool"],
            is_sustainable=True,
        )
        created = store.create_project(data)
        fetched = store.get_project(created.id)
        assert fetched is not None
        assert fetched.model_dump(exclude={"id", "created_at"}) == data.model_dump()
        # Features keep order and duplicates
        assert fetched.features == ["Gym", "Gym", "Pool"]

    def test_unknown_project_is_none(self, storage):
        assert storage.get_project(9999) is None

    def test_negative_investment_rejected(self, project_factory):
        with pytest.raises(ValueError):
            project_factory(investment=-1)

    def test_scenario_country_substring(self, project_factory):
        store = ProjectStore([
            project_factory(name="Riyadh Tower", country="Saudi Arabia", city="Riyadh"),
            project_factory(name="Dubai Tower", country="United Arab Emirates"),
        ])
        result = store.get_projects(ProjectFilters(country="saudi"))
        assert [p.name for p in result] == ["Riyadh Tower"]

    def test_market_indicators_only_active(self):
        store = ProjectStore(indicators=[
            MarketIndicatorCreate(title="On", description="d", type="trend", value="+1%", value_label="x"),
            MarketIndicatorCreate(title="Off", description="d", type="alert", value="-1%", value_label="x",
                                  is_active=False),
        ])
        assert [i.title for i in store.get_market_indicators()] == ["On"]


class TestUsers:
    def test_create_and_lookup_by_email(self, storage):
        user = storage.create_user(
            email="Someone@Example.com",
            first_name="Sara",
            last_name="Nasser",
            password_hash="hash",
            selected_role="developer",
        )
        assert user.email == "someone@example.com"
        assert storage.get_user_by_email("SOMEONE@example.com").id == user.id
        assert storage.get_user(user.id).selected_role.value == "developer"
        assert user.email_notifications is True

    def test_duplicate_email_conflicts(self, storage):
        storage.create_user(email="dup@example.com", first_name="A", last_name="B",
                            password_hash="h1", selected_role="investor")
        with pytest.raises(ConflictError):
            storage.create_user(email="dup@example.com", first_name="C", last_name="D",
                                password_hash="h2", selected_role="supplier")
        assert storage.get_user_by_email("dup@example.com").password_hash == "h1"

    def test_update_user_is_partial(self, storage):
        user = storage.create_user(email="p@example.com", first_name="A", last_name="B",
                                   password_hash="h", selected_role="investor")
        updated = storage.update_user(user.id, phone_number="+971-555-0100", email_notifications=False)
        assert updated.phone_number == "+971-555-0100"
        assert updated.email_notifications is False
        assert updated.first_name == "A"
        assert updated.updated_at >= user.updated_at

    def test_update_missing_user_returns_none(self, storage):
        assert storage.update_user("missing", first_name="X") is None
        assert storage.update_user_password("missing", "h") is False

    def test_public_view_has_no_hash(self, storage):
        user = storage.create_user(email="h@example.com", first_name="A", last_name="B",
                                   password_hash="secret-hash", selected_role="consultant")
        public = user.to_public().model_dump(by_alias=True)
        assert "passwordHash" not in public
        assert "password_hash" not in public


class TestSessions:
    def make_user(self, storage):
        return storage.create_user(email="s@example.com", first_name="A", last_name="B",
                                   password_hash="h", selected_role="contractor")

    def test_session_token_and_expiry(self, storage):
        user = self.make_user(storage)
        session = storage.create_session(user.id)
        assert len(session.id) == 64
        int(session.id, 16)
        lifetime = session.expires_at - session.created_at
        assert lifetime == timedelta(days=30)
        assert storage.get_valid_session(session.id) == session

    def test_expired_session_is_lazily_deleted(self, storage):
        user = self.make_user(storage)
        now = utc_now()
        expired = Session(id="e" * 64, user_id=user.id, expires_at=now - timedelta(seconds=1),
                          created_at=now - timedelta(days=30))
        storage.insert_session(expired)

        assert storage.get_session(expired.id) is not None
        assert storage.get_valid_session(expired.id) is None
        assert storage.get_session(expired.id) is None

    def test_delete_is_idempotent(self, storage):
        user = self.make_user(storage)
        session = storage.create_session(user.id)
        storage.delete_session(session.id)
        storage.delete_session(session.id)
        assert storage.get_session(session.id) is None

    def test_sessions_are_independent(self, storage):
        user = self.make_user(storage)
        first = storage.create_session(user.id)
        second = storage.create_session(user.id)
        assert first.id != second.id
        assert storage.get_valid_session(first.id) is not None
        assert storage.get_valid_session(second.id) is not None


class TestPreferences:
    def test_upsert_creates_then_patches(self, storage):
        created = storage.upsert_user_preferences("browser-1", selected_role="investor")
        assert created.selected_role.value == "investor"
        assert created.saved_searches == []
        assert created.favorite_projects == []

        patched = storage.upsert_user_preferences("browser-1", favorite_projects=[3, 1])
        assert patched.id == created.id
        assert patched.selected_role.value == "investor"
        assert patched.favorite_projects == [3, 1]

    def test_create_after_concurrent_create_patches_existing_row(self, storage):
        # Both writers saw no row; the second insert hits the unique constraint
        first = storage.create_user_preferences("browser-2", selected_role="supplier")
        second = storage.create_user_preferences("browser-2", favorite_projects=[5])
        assert second.id == first.id
        assert second.selected_role.value == "supplier"
        assert second.favorite_projects == [5]

    def test_missing_preferences_is_none(self, storage):
        assert storage.get_user_preferences("nobody") is None


def test_memory_database_path_rejected():
    with pytest.raises(ValueError):
        SqliteStorage(":memory:")
