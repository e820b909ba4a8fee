"""Unit tests for the local login session."""
import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from llamachat.session import SESSION_KEY, UserSession, open_session_store


class TestUserSession:
    """Tests for login/logout without storage."""

    def test_defaults(self):
        """Test that a fresh session is logged out."""
        session = UserSession()

        assert session.username == ""
        assert session.is_logged_in is False

    def test_login(self):
        """Test that a non-empty username logs in."""
        session = UserSession()

        assert session.login("alice") is True
        assert session.username == "alice"
        assert session.is_logged_in is True

    @pytest.mark.parametrize("username", [" bob ", "   ", "\t"])
    def test_login_keeps_username_as_typed(self, username):
        """Test that any non-empty username, whitespace included, is kept verbatim."""
        session = UserSession()

        assert session.login(username) is True
        assert session.username == username
        assert session.is_logged_in is True

    def test_empty_login_is_noop(self):
        """Test that an empty username changes nothing."""
        session = UserSession()

        assert session.login("") is False
        assert session.username == ""
        assert session.is_logged_in is False

    def test_logout(self):
        """Test that logout clears the username and the flag."""
        session = UserSession()
        session.login("alice")

        session.logout()

        assert session.username == ""
        assert session.is_logged_in is False

    def test_observers_see_username_on_login(self):
        """Test that is_logged_in observers can already read the username."""
        session = UserSession()
        seen = []
        session.bind(is_logged_in=lambda instance, value: seen.append((value, instance.username)))

        session.login("carol")
        session.logout()

        assert seen == [(True, "carol"), (False, "")]

    @given(st.text(min_size=1))
    def test_any_nonempty_username_logs_in(self, username):
        """Property test: every non-empty username is accepted unchanged."""
        session = UserSession()

        assert session.login(username) is True
        assert session.username == username
        assert session.is_logged_in is True


class TestSessionStorage:
    """Tests for persisting the session in a JsonStore."""

    def test_login_survives_restart(self, session_path):
        """Test that a new session restores the saved login."""
        UserSession(store=open_session_store(session_path)).login("alice")

        restored = UserSession(store=open_session_store(session_path))

        assert restored.username == "alice"
        assert restored.is_logged_in is True

    def test_logout_survives_restart(self, session_path):
        """Test that a logout is saved as well."""
        session = UserSession(store=open_session_store(session_path))
        session.login("alice")
        session.logout()

        restored = UserSession(store=open_session_store(session_path))

        assert restored.username == ""
        assert restored.is_logged_in is False

    def test_stored_keys(self, session_path):
        """Test the on-disk layout of the session entry."""
        store = open_session_store(session_path)
        UserSession(store=store).login("dave")

        assert store.get(SESSION_KEY) == {"username": "dave", "is_logged_in": True}

    def test_missing_file_starts_logged_out(self, session_path):
        """Test that no session file means logged out."""
        session = UserSession(store=open_session_store(session_path))

        assert session.is_logged_in is False

    def test_corrupt_file_is_replaced(self, session_path):
        """Test that an unreadable session file is discarded."""
        with open(session_path, "w") as fd:
            fd.write("{not json")

        store = open_session_store(session_path)
        session = UserSession(store=store)

        assert session.is_logged_in is False
        session.login("erin")
        assert open_session_store(session_path).get(SESSION_KEY)["username"] == "erin"

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture], max_examples=20)
    @given(st.text(min_size=1))
    def test_any_username_round_trips_through_store(self, session_path, username):
        """Property test: the stored username is restored unchanged."""
        UserSession(store=open_session_store(session_path)).login(username)

        restored = UserSession(store=open_session_store(session_path))

        assert restored.username == username
