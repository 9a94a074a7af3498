"""Unit tests for the SessionContext and its file-backed credential store."""

import json
from pathlib import Path

from schoolboard.application.services import SessionContext
from schoolboard.infrastructure.storage.file_credential_store import FileCredentialStore


def test_hydrate_restores_persisted_credentials(tmp_path: Path):
    path = tmp_path / "credentials.json"
    path.write_text(
        json.dumps(
            {
                "accessToken": "access",
                "refreshToken": "refresh",
                "user": {"username": "principal1", "role": "principal"},
            }
        )
    )
    session = SessionContext(FileCredentialStore(path))

    assert session.hydrate() is True
    assert session.access_token == "access"
    assert session.refresh_token == "refresh"
    assert session.role == "principal"


def test_hydrate_without_file_leaves_session_anonymous(tmp_path: Path):
    session = SessionContext(FileCredentialStore(tmp_path / "missing.json"))
    assert session.hydrate() is False
    assert session.is_authenticated is False
    assert session.role is None


def test_hydrate_ignores_corrupt_file(tmp_path: Path):
    path = tmp_path / "credentials.json"
    path.write_text("{not json")
    session = SessionContext(FileCredentialStore(path))
    assert session.hydrate() is False


def test_login_persists_and_logout_wipes(tmp_path: Path):
    path = tmp_path / "nested" / "credentials.json"
    session = SessionContext(FileCredentialStore(path))
    logged_out: list[bool] = []
    session.on_logout(lambda: logged_out.append(True))

    session.login("access", "refresh", {"username": "teacher1", "role": "teacher"})
    assert json.loads(path.read_text())["accessToken"] == "access"

    session.update_access_token("access-2")
    assert json.loads(path.read_text())["accessToken"] == "access-2"

    session.logout()
    assert session.is_authenticated is False
    assert session.user is None
    assert not path.exists()
    assert logged_out == [True]
