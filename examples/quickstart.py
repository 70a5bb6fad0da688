#!/usr/bin/env python3
"""
memoapp Quickstart — accounts, tokens and notes in one script.

Signs up two users → logs in → creates/updates/lists notes → shows that
one user cannot touch the other's notes.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
  MEMO_JWT_SECRET=change-me uvicorn memoapp.main:app --port 8000
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api/v1"


def signup_and_login(client: httpx.Client, email: str, password: str) -> dict:
    resp = client.post("/auth/signup", json={"email": email, "password": password})
    assert resp.status_code == 201, f"Signup failed: {resp.text}"
    account = resp.json()
    print(f"   Account #{account['id']}: {account['email']}")

    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, f"Login failed: {resp.text}"
    token = resp.json()
    print(f"   Token valid for {token['expires_in']}s")
    return {"Authorization": f"Bearer {token['token']}"}


def main():
    run_id = uuid.uuid4().hex[:6]
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking backend health...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"Backend not reachable at {BASE}")
        sys.exit(1)
    health = resp.json()
    print(f"  Database: {health['database']}")
    print(f"  Redis:    {health['redis']}")

    # ── Accounts ──────────────────────────────────────────────────
    print("\n1. Signing up alice and bob...")
    alice = signup_and_login(client, f"alice-{run_id}@example.com", "alice-pass-1")
    bob = signup_and_login(client, f"bob-{run_id}@example.com", "bob-pass-22")

    print("\n2. Duplicate signup is refused...")
    resp = client.post(
        "/auth/signup",
        json={"email": f"alice-{run_id}@example.com", "password": "another-pass-3"},
    )
    print(f"   {resp.status_code}: {resp.json()['detail']}")

    print("\n3. Who am I?")
    me = client.get("/auth/me", headers=alice).json()
    print(f"   user #{me['user_id']}, token expires at {me['expires_at']}")

    # ── Notes ─────────────────────────────────────────────────────
    print("\n4. Alice writes a note...")
    resp = client.post(
        "/notes", json={"title": "Groceries", "content": "milk, eggs"}, headers=alice
    )
    assert resp.status_code == 201, f"Failed: {resp.text}"
    note = resp.json()
    print(f"   Note #{note['id']}: {note['title']}")

    print("\n5. Alice updates it...")
    resp = client.put(f"/notes/{note['id']}", json={"content": "milk, eggs, bread"}, headers=alice)
    print(f"   Content: {resp.json()['content']}")

    print("\n6. Bob tries to read and delete it...")
    url = f"/notes/{note['id']}"
    print(f"   GET    → {client.get(url, headers=bob).status_code}")
    print(f"   DELETE → {client.delete(url, headers=bob).status_code}")

    print("\n7. Listing notes...")
    print(f"   alice: {len(client.get('/notes', headers=alice).json())}")
    print(f"   bob:   {len(client.get('/notes', headers=bob).json())}")

    print("\n8. No token, no notes...")
    print(f"   GET /notes → {client.get('/notes').status_code}")

    print("\n✓ Done.")


if __name__ == "__main__":
    main()
