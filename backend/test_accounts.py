"""
backend/test_accounts.py

Account lifecycle tests against storage directly (no HTTP).

Run: pytest backend/test_accounts.py -v
"""

from datetime import timedelta

import pytest

from backend import accounts
from backend.errors import AuthError, ConflictError
from backend.models import Session, utc_now
from backend.schemas_auth import ChangePasswordRequest, UpdateProfileRequest
from backend.security import verify_password


@pytest.fixture
def registered(storage, register_request_factory):
    user, session = accounts.register_user(storage, register_request_factory())
    return user, session


class TestRegister:
    def test_register_creates_user_and_session(self, storage, registered):
        user, session = registered
        assert user.email == "a@example.com"
        assert session.user_id == user.id
        assert storage.get_valid_session(session.id) is not None

    def test_password_is_hashed(self, storage, registered):
        user, _ = registered
        stored = storage.get_user(user.id)
        assert stored.password_hash != "correct-horse-1"
        assert stored.password_hash.startswith("$2")
        assert verify_password("correct-horse-1", stored.password_hash)

    def test_duplicate_email_leaves_original_untouched(self, storage, registered, register_request_factory):
        user, _ = registered
        original_hash = storage.get_user(user.id).password_hash

        with pytest.raises(ConflictError) as exc:
            accounts.register_user(storage, register_request_factory(
                email="A@Example.com", password="other-pass-2", confirm_password="other-pass-2"))

        assert exc.value.status_code == 400
        assert storage.get_user(user.id).password_hash == original_hash
        # Old credentials still work
        accounts.login_user(storage, "a@example.com", "correct-horse-1")

    def test_password_mismatch_rejected_at_schema(self, register_request_factory):
        with pytest.raises(ValueError, match="Passwords don't match"):
            register_request_factory(confirm_password="something-else")

    def test_short_password_rejected_at_schema(self, register_request_factory):
        with pytest.raises(ValueError):
            register_request_factory(password="short", confirm_password="short")

    def test_unknown_role_rejected_at_schema(self, register_request_factory):
        with pytest.raises(ValueError):
            register_request_factory(selected_role="architect")


class TestLogin:
    def test_login_issues_fresh_session(self, storage, registered):
        _, first = registered
        user, second = accounts.login_user(storage, "A@EXAMPLE.COM", "correct-horse-1")
        assert second.id != first.id
        # Existing sessions are not revoked by a new login
        assert storage.get_valid_session(first.id) is not None
        assert storage.get_valid_session(second.id) is not None

    def test_unknown_email_and_wrong_password_look_the_same(self, storage, registered):
        with pytest.raises(AuthError) as unknown:
            accounts.login_user(storage, "nobody@example.com", "correct-horse-1")
        with pytest.raises(AuthError) as wrong:
            accounts.login_user(storage, "a@example.com", "wrong-password")

        assert unknown.value.message == wrong.value.message == accounts.INVALID_CREDENTIALS
        assert unknown.value.status_code == wrong.value.status_code == 401


class TestSessionLifecycle:
    def test_authenticate_valid_token(self, storage, registered):
        user, session = registered
        resolved_user, resolved_session = accounts.authenticate(storage, session.id)
        assert resolved_user.id == user.id
        assert resolved_session.id == session.id

    @pytest.mark.parametrize("token", [None, "", "not-a-real-token"])
    def test_authenticate_rejects_missing_or_unknown(self, storage, token):
        with pytest.raises(AuthError):
            accounts.authenticate(storage, token)

    def test_authenticate_rejects_expired_and_deletes_it(self, storage, registered):
        user, _ = registered
        now = utc_now()
        expired = Session(id="f" * 64, user_id=user.id, expires_at=now - timedelta(seconds=1),
                          created_at=now - timedelta(days=30))
        storage.insert_session(expired)

        with pytest.raises(AuthError):
            accounts.authenticate(storage, expired.id)
        assert storage.get_session(expired.id) is None

    def test_logout_is_idempotent(self, storage, registered):
        _, session = registered
        accounts.logout(storage, session.id)
        accounts.logout(storage, session.id)
        accounts.logout(storage, None)
        with pytest.raises(AuthError):
            accounts.authenticate(storage, session.id)


class TestProfile:
    def test_partial_update(self, storage, registered):
        user, _ = registered
        updated = accounts.update_profile(
            storage, user.id, UpdateProfileRequest(first_name="Layla", selected_role="supplier"))
        assert updated.first_name == "Layla"
        assert updated.last_name == "Haddad"
        assert updated.selected_role.value == "supplier"

    def test_null_does_not_clear_required_fields(self, storage, registered):
        user, _ = registered
        updated = accounts.update_profile(storage, user.id, UpdateProfileRequest(first_name=None))
        assert updated.first_name == "Amal"

    def test_email_taken_by_someone_else(self, storage, registered, register_request_factory):
        accounts.register_user(storage, register_request_factory(email="b@example.com"))
        user, _ = registered
        with pytest.raises(ConflictError):
            accounts.update_profile(storage, user.id, UpdateProfileRequest(email="b@example.com"))
        assert storage.get_user(user.id).email == "a@example.com"

    def test_keeping_own_email_is_fine(self, storage, registered):
        user, _ = registered
        updated = accounts.update_profile(storage, user.id, UpdateProfileRequest(email="a@example.com"))
        assert updated.email == "a@example.com"


class TestChangePassword:
    def test_wrong_current_password_changes_nothing(self, storage, registered):
        user, _ = registered
        before = storage.get_user(user.id).password_hash

        with pytest.raises(AuthError, match="Current password is incorrect"):
            accounts.change_password(storage, user.id, "not-my-password", "brand-new-pass")

        assert storage.get_user(user.id).password_hash == before

    def test_new_password_only_verifies_after_change(self, storage, registered):
        user, _ = registered
        assert not verify_password("brand-new-pass", storage.get_user(user.id).password_hash)

        accounts.change_password(storage, user.id, "correct-horse-1", "brand-new-pass")

        stored = storage.get_user(user.id).password_hash
        assert verify_password("brand-new-pass", stored)
        assert not verify_password("correct-horse-1", stored)

    def test_confirmation_must_match(self):
        with pytest.raises(ValueError, match="Passwords don't match"):
            ChangePasswordRequest(current_password="x", new_password="brand-new-pass",
                                  confirm_password="brand-new-pasz")
