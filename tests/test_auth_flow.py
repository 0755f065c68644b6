from datetime import datetime, timezone

from jose import jwt


def _register(client, *, email: str, password: str = "Testpass123!", role: str | None = "user", company: str | None = None):
    body = {"email": email, "password": password}
    if role is not None:
        body["role"] = role
    if company is not None:
        body["companyName"] = company
    return client.post("/api/auth/register", json=body)


def _login(client, *, email: str, password: str):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _claims(token: str) -> dict:
    from backend.app.config import SECRET_KEY
    from backend.app.utils.jwt import ALGORITHM

    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])


def test_register_employer_success(client):
    r = _register(client, email="hr@acme.com", role="employer", company="Acme")
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["success"] is True
    assert data["user"] == {"id": data["user"]["id"], "email": "hr@acme.com", "role": "employer", "companyName": "Acme"}
    assert "password" not in data["user"]
    claims = _claims(data["token"])
    assert claims["email"] == "hr@acme.com"
    assert claims["role"] == "employer"
    assert claims["sub"] == str(data["user"]["id"])


def test_token_is_valid_for_24_hours(client):
    token = _register(client, email="window@example.com").json()["token"]
    claims = _claims(token)
    remaining = claims["exp"] - datetime.now(timezone.utc).timestamp()
    assert 23 * 3600 < remaining <= 24 * 3600


def test_register_defaults_to_user_role(client):
    r = _register(client, email="seeker@example.com", role=None)
    assert r.status_code == 201, r.text
    assert r.json()["user"]["role"] == "user"
    assert r.json()["user"]["companyName"] is None


def test_company_name_is_dropped_for_non_employers(client):
    r = _register(client, email="admin@example.com", role="admin", company="Ignored Inc")
    assert r.status_code == 201, r.text
    assert r.json()["user"]["companyName"] is None


def test_employer_without_company_name_fails(client):
    for company in (None, "", "   "):
        r = _register(client, email="nocompany@example.com", role="employer", company=company)
        assert r.status_code == 400, r.text
        assert r.json()["success"] is False
        assert "company" in r.json()["message"].lower()


def test_invalid_role_fails(client):
    r = _register(client, email="boss@example.com", role="superuser")
    assert r.status_code == 400, r.text
    assert "role" in r.json()["message"].lower()


def test_duplicate_email_fails(client):
    assert _register(client, email="dup@example.com").status_code == 201
    r = _register(client, email="dup@example.com")
    assert r.status_code == 400, r.text
    assert r.json()["message"] == "User already exists"


def test_register_missing_fields_is_bad_request(client):
    r = client.post("/api/auth/register", json={"email": "half@example.com"})
    assert r.status_code == 400, r.text
    assert r.json()["success"] is False


def test_login_returns_fresh_token_with_same_identity(client):
    reg = _register(client, email="cand@example.com", role="user").json()
    r = _login(client, email="cand@example.com", password="Testpass123!")
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["success"] is True
    assert data["user"]["email"] == "cand@example.com"
    claims = _claims(data["token"])
    assert claims["role"] == "user"
    assert claims["email"] == "cand@example.com"
    assert claims["sub"] == str(reg["user"]["id"])


def test_login_failures_are_indistinguishable(client):
    _register(client, email="known@example.com")
    wrong_password = _login(client, email="known@example.com", password="nope")
    unknown_user = _login(client, email="ghost@example.com", password="Testpass123!")
    assert wrong_password.status_code == 400
    assert unknown_user.status_code == 400
    assert wrong_password.json() == unknown_user.json()
    assert "token" not in wrong_password.json()


def test_profile_requires_token(client):
    r = client.get("/api/auth/profile")
    assert r.status_code == 401, r.text
    assert r.json()["success"] is False


def test_profile_rejects_garbage_token(client):
    r = client.get("/api/auth/profile", headers=_auth_headers("not-a-jwt"))
    assert r.status_code == 401, r.text


def test_profile_excludes_password(client):
    token = _register(client, email="me@acme.com", role="employer", company="Acme").json()["token"]
    r = client.get("/api/auth/profile", headers=_auth_headers(token))
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["email"] == "me@acme.com"
    assert data["companyName"] == "Acme"
    assert data["createdAt"]
    assert "password" not in data


def test_profile_of_removed_user_is_not_found(client, db_session):
    from backend.app.models.user import User

    token = _register(client, email="gone@example.com").json()["token"]
    db_session.query(User).filter(User.email == "gone@example.com").delete()
    db_session.commit()

    r = client.get("/api/auth/profile", headers=_auth_headers(token))
    assert r.status_code == 404, r.text


def test_change_password(client):
    token = _register(client, email="rotate@example.com").json()["token"]

    bad = client.put(
        "/api/auth/password",
        headers=_auth_headers(token),
        json={"currentPassword": "wrong", "newPassword": "N3wpass!"},
    )
    assert bad.status_code == 400, bad.text

    ok = client.put(
        "/api/auth/password",
        headers=_auth_headers(token),
        json={"currentPassword": "Testpass123!", "newPassword": "N3wpass!"},
    )
    assert ok.status_code == 200, ok.text

    assert _login(client, email="rotate@example.com", password="Testpass123!").status_code == 400
    assert _login(client, email="rotate@example.com", password="N3wpass!").status_code == 200


def test_password_is_stored_hashed(client, db_session):
    from backend.app.models.user import User

    _register(client, email="hashed@example.com")
    user = db_session.query(User).filter(User.email == "hashed@example.com").one()
    assert user.password != "Testpass123!"
    assert user.password.startswith("$2")
