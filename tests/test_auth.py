"""Tests for bearer-token authentication."""

from app.models.user import User
from app.utils.auth import create_access_token


def _user(db, username="S-1001", role="student"):
    user = User(username=username, password_hash="not-used", role=role)
    db.add(user)
    db.commit()
    return user


def test_me_returns_token_owner(client, db):
    user = _user(db)

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {create_access_token(user)}"})

    assert resp.status_code == 200
    assert resp.json() == {"id": user.id, "username": "S-1001", "role": "student"}


def test_garbage_token_is_rejected(client, db):
    resp = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401


def test_token_is_invalid_after_role_change(client, db):
    user = _user(db)
    token = create_access_token(user)
    user.role = "admin"
    db.commit()

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401


def test_expired_token_is_rejected(client, db):
    user = _user(db)
    token = create_access_token(user, expires_minutes=-1)

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401
