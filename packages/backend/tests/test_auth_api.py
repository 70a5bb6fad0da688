"""Auth API tests — signup, login, protected /me.

Learn: Tests cover:
1. Signup + duplicate prevention + policy errors
2. Login → bearer token
3. Protected /me endpoint with valid, missing and bad tokens
4. The same flow against the SQL stores
"""

import uuid

import pytest

from memoapp.auth.token import TokenService


def _email(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


# ═══════════════════════════════════════════════════════════
# Signup
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_signup(client):
    """Create a new account."""
    email = _email("signup")
    r = await client.post(
        "/api/v1/auth/signup", json={"email": email, "password": "password123"}
    )
    assert r.status_code == 201
    account = r.json()
    assert account["email"] == email
    assert "id" in account
    assert "created_at" in account
    assert "password" not in account
    assert "password_hash" not in account


@pytest.mark.asyncio
async def test_signup_duplicate_email(client):
    """Can't sign up with the same email twice."""
    body = {"email": _email("dup"), "password": "password123"}

    r1 = await client.post("/api/v1/auth/signup", json=body)
    assert r1.status_code == 201

    r2 = await client.post("/api/v1/auth/signup", json=body)
    assert r2.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize("email", ["not-an-email", "a@b", "a b@example.com", "@example.com"])
async def test_signup_invalid_email(client, email):
    r = await client.post(
        "/api/v1/auth/signup", json={"email": email, "password": "password123"}
    )
    assert r.status_code == 422
    assert r.json()["detail"] == "Invalid email format"


@pytest.mark.asyncio
@pytest.mark.parametrize("password", ["abc1", "passwordonly", "1234567890"])
async def test_signup_weak_password(client, password):
    r = await client.post(
        "/api/v1/auth/signup", json={"email": _email("weak"), "password": password}
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_signup_unencodable_password(client):
    """A lone surrogate escape in the JSON body is a policy error, not a crash."""
    r = await client.post(
        "/api/v1/auth/signup",
        content=b'{"email": "lone@example.com", "password": "password1\\ud800"}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_signup_missing_field(client):
    r = await client.post("/api/v1/auth/signup", json={"email": _email("nofield")})
    assert r.status_code == 422


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_success(client, token_service):
    """Login with valid credentials returns a bearer token."""
    email = _email("login")
    await client.post(
        "/api/v1/auth/signup", json={"email": email, "password": "password123"}
    )

    r = await client.post(
        "/api/v1/auth/login", json={"email": email, "password": "password123"}
    )
    assert r.status_code == 200
    data = r.json()
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == 3600
    assert token_service.verify(data["token"]).sub > 0


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    email = _email("wrong")
    await client.post(
        "/api/v1/auth/signup", json={"email": email, "password": "password123"}
    )

    r = await client.post(
        "/api/v1/auth/login", json={"email": email, "password": "password999"}
    )
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_unknown_email_same_response(client):
    """Unknown email is indistinguishable from a wrong password."""
    r = await client.post(
        "/api/v1/auth/login",
        json={"email": _email("ghost"), "password": "password123"},
    )
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_auth_responses_not_cached(client):
    r = await client.post(
        "/api/v1/auth/login",
        json={"email": _email("cache"), "password": "password123"},
    )
    assert r.headers["Cache-Control"] == "no-store"


# ═══════════════════════════════════════════════════════════
# Protected endpoints
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_token(client):
    email = _email("me")
    r = await client.post(
        "/api/v1/auth/signup", json={"email": email, "password": "password123"}
    )
    account_id = r.json()["id"]
    headers = await _login(client, email)

    r = await client.get("/api/v1/auth/me", headers=headers)
    assert r.status_code == 200
    data = r.json()
    assert data["user_id"] == account_id
    assert data["expires_at"] - data["issued_at"] == 3600


@pytest.mark.asyncio
async def test_me_without_token(client):
    """Protected endpoint requires auth."""
    r = await client.get("/api/v1/auth/me")
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "authorization",
    ["Bearer ", "Basic dXNlcjpwYXNz", "Bearer invalid-token", "bearer x.y.z"],
)
async def test_me_with_bad_header(client, authorization):
    r = await client.get("/api/v1/auth/me", headers={"Authorization": authorization})
    assert r.status_code == 401
    assert r.json()["detail"] == "Authentication required"


@pytest.mark.asyncio
async def test_token_from_another_secret_rejected(client):
    other = TokenService.from_secret(b"not-the-server-secret-not-the-server!")
    r = await client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {other.generate(1)}"},
    )
    assert r.status_code == 401


async def _login(client, email: str, password: str = "password123") -> dict:
    r = await client.post(
        "/api/v1/auth/login", json={"email": email, "password": password}
    )
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


# ═══════════════════════════════════════════════════════════
# SQL backend
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_sql_signup_login_me(sql_client, signup_and_login):
    email = _email("sql")
    headers = await signup_and_login(sql_client, email)

    r = await sql_client.get("/api/v1/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["user_id"] >= 1


@pytest.mark.asyncio
async def test_sql_duplicate_signup(sql_client):
    body = {"email": _email("sqldup"), "password": "password123"}
    assert (await sql_client.post("/api/v1/auth/signup", json=body)).status_code == 201
    assert (await sql_client.post("/api/v1/auth/signup", json=body)).status_code == 409

    # the session is still usable after the constraint violation
    r = await sql_client.post(
        "/api/v1/auth/login", json={"email": body["email"], "password": "password123"}
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_sql_wrong_password(sql_client, signup_and_login):
    email = _email("sqlwrong")
    await signup_and_login(sql_client, email)

    r = await sql_client.post(
        "/api/v1/auth/login", json={"email": email, "password": "password000"}
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_sql_login_unencodable_email(sql_client):
    r = await sql_client.post(
        "/api/v1/auth/login",
        content=b'{"email": "a\\udc00@example.com", "password": "password123"}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 401
