"""Tests for the venty-auth CLI."""

import json

import pytest
from click.testing import CliRunner

from venty_auth.cli import cli
from venty_auth.config import get_settings
from venty_auth.models.user import ProviderLink, User
from venty_auth.services.user_store import UserStore


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def users_file(tmp_path, monkeypatch):
    """Point the CLI at a temporary store holding two users."""
    path = tmp_path / "users.json"
    UserStore(path).save(
        [
            User(
                user_id="u_1",
                email="ada@example.com",
                name="Ada",
                providers=[ProviderLink("google", "g-1"), ProviderLink("email", "ada@example.com")],
                password_hash="salt:hash",
            ),
            User(
                user_id="u_2",
                email="grace@example.com",
                providers=[ProviderLink("facebook", "f-1")],
            ),
        ]
    )
    monkeypatch.setenv("USERS_FILE", str(path))
    monkeypatch.setenv("JWT_SECRET", "cli-secret")
    for name in ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "FACEBOOK_APP_ID", "FACEBOOK_APP_SECRET"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


class TestUsersList:
    """Tests for users list."""

    def test_list_json(self, runner, users_file):
        """Test listing users as JSON."""
        result = runner.invoke(cli, ["--json", "users", "list"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["success"] is True
        assert [u["userId"] for u in data["data"]] == ["u_1", "u_2"]
        assert data["data"][0]["providers"] == "google, email"

    def test_list_filtered_by_provider(self, runner, users_file):
        """Test --provider keeps only linked users."""
        result = runner.invoke(cli, ["--json", "users", "list", "--provider", "facebook"])

        data = json.loads(result.output)
        assert [u["userId"] for u in data["data"]] == ["u_2"]

    def test_list_pretty(self, runner, users_file):
        """Test the table output mentions each user."""
        result = runner.invoke(cli, ["users", "list"])

        assert result.exit_code == 0
        assert "u_1" in result.output
        assert "u_2" in result.output

    def test_list_corrupt_store(self, runner, users_file):
        """Test a corrupt store exits non-zero with its error code."""
        users_file.write_text("{broken")

        result = runner.invoke(cli, ["--json", "users", "list"])

        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "store_corrupted"


class TestUsersShow:
    """Tests for users show."""

    def test_show_hides_password_hash(self, runner, users_file):
        """Test a user is shown without the hash."""
        result = runner.invoke(cli, ["--json", "users", "show", "u_1"])

        assert result.exit_code == 0
        user = json.loads(result.output)["data"]
        assert user["email"] == "ada@example.com"
        assert user["hasPassword"] is True
        assert "passwordHash" not in user
        assert "salt:hash" not in result.output

    def test_show_unknown_user(self, runner, users_file):
        """Test an unknown id exits non-zero."""
        result = runner.invoke(cli, ["--json", "users", "show", "u_missing"])

        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "user_not_found"


class TestConfigCheck:
    """Tests for config check."""

    def test_check_reports_providers(self, runner, users_file):
        """Test provider status is reported."""
        result = runner.invoke(cli, ["--json", "config", "check"])

        assert result.exit_code == 0
        report = json.loads(result.output)["data"]
        assert report["jwt"] == "ok"
        assert report["google"] == "disabled"
        assert report["facebook"] == "disabled"

    def test_check_without_secret(self, runner, users_file, monkeypatch):
        """Test a missing JWT_SECRET fails the check."""
        monkeypatch.setenv("JWT_SECRET", "")
        get_settings.cache_clear()

        result = runner.invoke(cli, ["--json", "config", "check"])

        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "jwt_secret_missing"


def test_version(runner):
    """Test --version prints the program name."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "venty-auth" in result.output
