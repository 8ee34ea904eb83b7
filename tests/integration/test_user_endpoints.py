from __future__ import annotations

from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from apps.api.main import create_app
from bcrypt_password.config.settings import Settings


def _settings(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    filename: str,
    **extra_env: str,
) -> Settings:
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / filename}")
    monkeypatch.setenv("PASSWORD_BCRYPT_COST", "4")
    monkeypatch.delenv("BOOTSTRAP_ADMIN_EMAIL", raising=False)
    monkeypatch.delenv("BOOTSTRAP_ADMIN_PASSWORD", raising=False)
    monkeypatch.delenv("BOOTSTRAP_ADMIN_PASSWORD_FILE", raising=False)
    for key, value in extra_env.items():
        monkeypatch.setenv(key, value)
    return Settings(_env_file=None)


def _client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    filename: str,
    **extra_env: str,
) -> TestClient:
    return TestClient(create_app(settings=_settings(monkeypatch, tmp_path, filename, **extra_env)))


def _login(client: TestClient, *, email: str, password: str) -> int:
    response = client.post("/auth/login", json={"email": email, "password": password})
    return response.status_code


def test_create_user_echoes_plaintext_and_never_the_hash(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    with _client(monkeypatch, tmp_path, "create.db") as client:
        response = client.post(
            "/users",
            json={"Email": "Reader@Example.org", "Password": "fortest"},
        )

    assert response.status_code == 201
    body = response.json()
    assert body["Email"] == "reader@example.org"
    assert body["Password"] == "fortest"
    assert body["Role"] == "reader"
    assert body["IsActive"] is True
    assert "$2b$" not in response.text


def test_created_user_can_log_in(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    with _client(monkeypatch, tmp_path, "login.db") as client:
        created = client.post("/users", json={"Email": "a@example.org", "Password": "fortest"})
        ok = client.post("/auth/login", json={"email": "a@example.org", "password": "fortest"})
        wrong = _login(client, email="a@example.org", password="fortest2")
        unknown = _login(client, email="b@example.org", password="fortest")

    assert ok.status_code == 200
    assert ok.json() == {"user_id": created.json()["Id"], "role": "reader"}
    assert wrong == 401
    assert unknown == 401


def test_user_without_password_cannot_log_in_with_empty_password(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    with _client(monkeypatch, tmp_path, "no_password.db") as client:
        created = client.post("/users", json={"Email": "a@example.org", "Password": ""})
        login = _login(client, email="a@example.org", password="")

    assert created.status_code == 201
    assert created.json()["Password"] == ""
    assert login == 401


@pytest.mark.parametrize(
    "payload",
    [
        {"Email": "a@example.org", "Password": 123456},
        {"Email": "a@example.org", "Password": None},
        {"Email": "a@example.org", "Password": ["secret-1"]},
        {"Email": "a@example.org", "Password": "abc"},
        {"Email": "a@example.org", "Password": "x" * 73},
    ],
)
def test_create_user_rejects_invalid_password_payloads(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    payload: dict[str, object],
) -> None:
    with _client(monkeypatch, tmp_path, "invalid.db") as client:
        response = client.post("/users", json=payload)

    assert response.status_code == 422
    assert "abc" not in response.text
    assert "xxxxxx" not in response.text


def test_create_user_with_duplicate_email_conflicts(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    with _client(monkeypatch, tmp_path, "duplicate.db") as client:
        first = client.post("/users", json={"Email": "a@example.org", "Password": "secret-1"})
        second = client.post("/users", json={"Email": "A@example.org", "Password": "secret-2"})

    assert first.status_code == 201
    assert second.status_code == 409


def test_change_password_replaces_credentials(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    with _client(monkeypatch, tmp_path, "change.db") as client:
        created = client.post("/users", json={"Email": "a@example.org", "Password": "old-pass"})
        user_id = created.json()["Id"]
        changed = client.put(f"/users/{user_id}/password", json={"Password": "new-pass"})
        old_login = _login(client, email="a@example.org", password="old-pass")
        new_login = _login(client, email="a@example.org", password="new-pass")

    assert changed.status_code == 204
    assert old_login == 401
    assert new_login == 200


def test_clearing_password_locks_out_login(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    with _client(monkeypatch, tmp_path, "clear.db") as client:
        created = client.post("/users", json={"Email": "a@example.org", "Password": "old-pass"})
        user_id = created.json()["Id"]
        cleared = client.put(f"/users/{user_id}/password", json={"Password": ""})
        old_login = _login(client, email="a@example.org", password="old-pass")
        empty_login = _login(client, email="a@example.org", password="")

    assert cleared.status_code == 204
    assert old_login == 401
    assert empty_login == 401


def test_change_password_for_unknown_user_is_not_found(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    with _client(monkeypatch, tmp_path, "unknown.db") as client:
        response = client.put(f"/users/{uuid4()}/password", json={"Password": "new-pass"})

    assert response.status_code == 404


def test_list_users_never_renders_stored_passwords(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    with _client(monkeypatch, tmp_path, "list.db") as client:
        client.post("/users", json={"Email": "a@example.org", "Password": "secret-a"})
        response = client.get("/users")

    assert response.status_code == 200
    assert [user["Password"] for user in response.json()] == [""]
    assert "$2b$" not in response.text


def test_startup_bootstrap_creates_admin_from_env(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    with _client(
        monkeypatch,
        tmp_path,
        "bootstrap.db",
        BOOTSTRAP_ADMIN_EMAIL="admin@example.org",
        BOOTSTRAP_ADMIN_PASSWORD="initial-secret",
    ) as client:
        response = client.post(
            "/auth/login",
            json={"email": "admin@example.org", "password": "initial-secret"},
        )

    assert response.status_code == 200
    assert response.json()["role"] == "admin"


def test_login_with_unencodable_password_is_unauthorized(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    with _client(monkeypatch, tmp_path, "surrogate_login.db") as client:
        client.post("/users", json={"Email": "a@example.org", "Password": "fortest"})
        response = client.post(
            "/auth/login",
            content=b'{"email": "a@example.org", "password": "\\ud800"}',
            headers={"Content-Type": "application/json"},
        )

    assert response.status_code == 401


def test_create_user_with_unencodable_password_is_rejected(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    with _client(monkeypatch, tmp_path, "surrogate_create.db") as client:
        response = client.post(
            "/users",
            content=b'{"Email": "a@example.org", "Password": "\\ud800abcdef"}',
            headers={"Content-Type": "application/json"},
        )

    assert response.status_code == 422
