"""Tests for the ``users`` CLI commands."""

import pytest
from typer.testing import CliRunner

from src.bookshelf.cli import user_commands
from src.bookshelf.cli.user_commands import users_app
from src.bookshelf.entities import UserRepository

runner = CliRunner()


@pytest.fixture
def cli_db(monkeypatch, db_service):
    """Point the CLI at the in-memory test database."""
    monkeypatch.setattr(user_commands, "_db_session", db_service.session_scope)
    return db_service


class TestAddUser:
    def test_adds_user(self, cli_db, db_session):
        result = runner.invoke(
            users_app, ["add", "alice", "-e", "alice@mail.com", "-p", "secret1"]
        )

        assert result.exit_code == 0
        assert "Created user 'alice'" in result.output
        assert UserRepository(db_session).get_by_email("alice@mail.com") is not None

    @pytest.mark.parametrize("email", ["not-an-email", "alice@", "@mail.com"])
    def test_invalid_email_is_rejected(self, cli_db, db_session, email):
        result = runner.invoke(users_app, ["add", "alice", "-e", email, "-p", "secret1"])

        assert result.exit_code == 1
        assert "Invalid email address" in result.output
        assert UserRepository(db_session).count() == 0

    def test_short_password_is_rejected(self, cli_db, db_session):
        result = runner.invoke(
            users_app, ["add", "alice", "-e", "alice@mail.com", "-p", "123"]
        )

        assert result.exit_code == 1
        assert UserRepository(db_session).count() == 0
