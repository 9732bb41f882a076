from datetime import timedelta

from seatbook.core.config import settings
from seatbook.core.security import create_access_token, decode_token

API = "/api/v1"


def test_login_and_profile(client, admin_headers):
    response = client.get(f"{API}/auth/me", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"username": settings.ADMIN_USERNAME, "role": "admin"}


def test_login_rejects_wrong_password(client):
    response = client.post(
        f"{API}/auth/login",
        data={"username": settings.ADMIN_USERNAME, "password": "wrong"},
    )
    assert response.status_code == 401


def test_login_rejects_unknown_user(client):
    response = client.post(
        f"{API}/auth/login",
        data={"username": "someone", "password": settings.ADMIN_PASSWORD},
    )
    assert response.status_code == 401


def test_expired_token_is_rejected(client):
    token = create_access_token(settings.ADMIN_USERNAME, expires_delta=timedelta(minutes=-1))
    assert decode_token(token) is None

    response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_other_subject_is_rejected(client):
    token = create_access_token("intruder")
    response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_root(client):
    assert client.get("/").json() == {"Hello": "Seatbook"}
