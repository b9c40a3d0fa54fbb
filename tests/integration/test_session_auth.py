import pytest

from finance_dashboard.auth.session import SessionFileAuth

@pytest.fixture
def auth(store, tmp_path) -> SessionFileAuth:
    return SessionFileAuth(store, tmp_path / "nested" / "session.json")

@pytest.mark.integration
class TestSessionFileAuth:

    def test_signed_out_by_default(self, auth):
        assert auth.get_current_user() is None

    def test_sign_in_persists_session(self, auth, store, tmp_path):
        user = auth.sign_in("  Me@Example.com ")

        assert user.email == "me@example.com"
        assert auth.session_path.exists()
        # a fresh provider reads the same session
        assert SessionFileAuth(store, auth.session_path).get_current_user() == user

    def test_sign_out(self, auth):
        auth.sign_in("me@example.com")

        auth.sign_out()

        assert auth.get_current_user() is None
        assert not auth.session_path.exists()

    def test_sign_out_when_signed_out(self, auth):
        auth.sign_out()

        assert auth.get_current_user() is None

    def test_invalid_email(self, auth):
        with pytest.raises(ValueError, match="Invalid email"):
            auth.sign_in("not-an-email")

    def test_corrupt_session_reads_as_signed_out(self, auth):
        auth.session_path.parent.mkdir(parents=True)
        auth.session_path.write_text("{not json")

        assert auth.get_current_user() is None

    def test_session_for_unknown_user(self, auth):
        auth.session_path.parent.mkdir(parents=True)
        auth.session_path.write_text('{"user_id": "ghost"}')

        assert auth.get_current_user() is None
