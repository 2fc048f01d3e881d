import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from barbershop.api.routes import auth, users
from barbershop.core import security
from barbershop.db import models
from barbershop.db.session import get_db
from barbershop.services.admin import ensure_admin_exists


@pytest.fixture()
def auth_client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    test_app = FastAPI()
    test_app.include_router(auth.router, prefix="/api/v1")
    test_app.include_router(users.router, prefix="/api/v1")
    test_app.dependency_overrides[get_db] = override_get_db

    with session_factory() as db:
        ensure_admin_exists(db, "Admin@ChaxxBarbers.com", "strong_password")

    with TestClient(test_app) as client:
        yield client

    test_app.dependency_overrides.clear()


def login(client, password="strong_password"):
    return client.post(
        "/api/v1/auth/login",
        data={"username": "admin@chaxxbarbers.com", "password": password},
    )


def test_creates_default_admin(db_session):
    ensure_admin_exists(db_session, "owner@example.com", "strong_password")

    created = db_session.query(models.User).filter_by(email="owner@example.com").one()

    assert created.name == "Admin"
    assert security.verify_password("strong_password", created.password_hash)


def test_updates_password_for_existing_admin(db_session):
    ensure_admin_exists(db_session, "owner@example.com", "old_password")

    ensure_admin_exists(db_session, "owner@example.com", "new_password")

    admins = db_session.query(models.User).filter_by(email="owner@example.com").all()
    assert len(admins) == 1
    assert security.verify_password("new_password", admins[0].password_hash)


def test_login_returns_token_usable_for_protected_routes(auth_client):
    response = login(auth_client)

    assert response.status_code == 200
    token = response.json()["access_token"]
    me = auth_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "admin@chaxxbarbers.com"


def test_login_rejects_wrong_password(auth_client):
    response = login(auth_client, password="nope")

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_protected_routes_require_token(auth_client):
    assert auth_client.get("/api/v1/users").status_code == 401
    bad = auth_client.get("/api/v1/users", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401


def test_create_user_rejects_duplicate_email(auth_client):
    headers = {"Authorization": f"Bearer {login(auth_client).json()['access_token']}"}

    created = auth_client.post(
        "/api/v1/users", json={"name": "Barber", "email": "Barber@Example.com"}, headers=headers
    )
    duplicate = auth_client.post(
        "/api/v1/users", json={"name": "Other", "email": "barber@example.com"}, headers=headers
    )
    listed = auth_client.get("/api/v1/users", headers=headers)

    assert created.status_code == 201
    assert created.json()["email"] == "barber@example.com"
    assert "password_hash" not in created.json()
    assert duplicate.status_code == 409
    assert [user["email"] for user in listed.json()] == ["admin@chaxxbarbers.com", "barber@example.com"]
