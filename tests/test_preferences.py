"""Tests for the session-held theme preference"""


class TestThemePreference:
    def test_default_theme(self, client):
        assert client.get("/preferences/theme").json() == {"theme": "light"}

    def test_theme_persists_in_session(self, client):
        response = client.put("/preferences/theme", json={"theme": "dark"})
        assert response.status_code == 200
        assert client.get("/preferences/theme").json() == {"theme": "dark"}

    def test_unknown_theme_rejected(self, client):
        assert client.put("/preferences/theme", json={"theme": "neon"}).status_code == 422
