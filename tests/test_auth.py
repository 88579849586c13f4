"""Local email/password sign-in and the current-user contract."""

from __future__ import annotations

import sqlite3

import pytest
from werkzeug.security import check_password_hash

from database.db_manager import DatabaseManager
from database.user_dao import UserDAO
from services.auth_service import AuthService
from utils.errors import NotAuthenticatedError
from viewmodels.auth_viewmodel import AuthError, SignedIn, SignedOut, AuthViewModel

from conftest import PASSWORD


def test_register_signs_in(auth) -> None:
    result = auth.register("  Alice@Example.com ", PASSWORD)
    assert result.ok
    assert result.value.email == "alice@example.com"
    assert auth.current_user_id() == result.value.id


def test_duplicate_email_rejected(auth, user) -> None:
    auth.logout()
    result = auth.register("alice@example.com", PASSWORD)
    assert not result.ok
    assert "already exists" in result.error


def test_login_and_wrong_password(auth, user) -> None:
    auth.logout()
    assert auth.login("alice@example.com", "wrong-password").error == "Invalid email or password."
    assert auth.current_user is None
    result = auth.login("ALICE@example.com", PASSWORD)
    assert result.ok
    assert result.value.id == user.id


def test_password_is_stored_as_salted_hash(db, user) -> None:
    _, stored = UserDAO(db).get_credentials("alice@example.com")
    assert stored != PASSWORD
    assert check_password_hash(stored, PASSWORD)
    columns = {row[1] for row in db.get_connection().execute("PRAGMA table_info(users)")}
    assert "salt" not in columns


def test_legacy_salt_column_is_dropped(tmp_path) -> None:
    path = str(tmp_path / "legacy.db")
    conn = sqlite3.connect(path)
    conn.execute(
        "CREATE TABLE users (id TEXT PRIMARY KEY, email TEXT NOT NULL UNIQUE,"
        " password_hash TEXT NOT NULL, salt TEXT NOT NULL,"
        " created_at TEXT NOT NULL DEFAULT (datetime('now')))"
    )
    conn.commit()
    conn.close()

    db = DatabaseManager(path)
    db.initialize()
    auth = AuthService(UserDAO(db), db)
    assert auth.register("erin@example.com", PASSWORD).ok
    db.close()


def test_current_user_id_requires_sign_in(auth, user) -> None:
    auth.logout()
    with pytest.raises(NotAuthenticatedError, match="User not logged in"):
        auth.current_user_id()


def test_session_is_restored_on_next_start(db, auth, user) -> None:
    fresh = AuthService(UserDAO(db), db)
    assert fresh.current_user is None
    assert fresh.restore_session() == user
    assert fresh.current_user_id() == user.id


def test_signed_out_session_is_not_restored(db, auth, user) -> None:
    auth.logout()
    fresh = AuthService(UserDAO(db), db)
    assert fresh.restore_session() is None


def test_listeners_see_sign_in_and_out(auth) -> None:
    seen = []
    auth.add_listener(seen.append)
    user = auth.register("carol@example.com", PASSWORD).value
    auth.logout()
    assert seen == [user, None]


def test_viewmodel_password_mismatch_never_calls_provider(db, auth) -> None:
    vm = AuthViewModel(auth)
    assert isinstance(vm.state, SignedOut)
    state = vm.register("dave@example.com", PASSWORD, PASSWORD + "x")
    assert state == AuthError("Passwords do not match")
    assert UserDAO(db).get_credentials("dave@example.com") is None


def test_viewmodel_login_flow(auth, user) -> None:
    auth.logout()
    vm = AuthViewModel(auth)
    assert isinstance(vm.login("alice@example.com", "nope"), AuthError)
    assert vm.login("alice@example.com", PASSWORD) == SignedIn(user)
    assert vm.signed_in
    assert isinstance(vm.logout(), SignedOut)
    assert auth.current_user is None
