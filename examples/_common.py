"""
Shared helpers for filekeep examples.

Handles the health check and sign-up + sign-in so each example can
focus on its own workflow. The session lives in the httpx client's
cookie jar, exactly like a browser.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api/v1"
PASSWORD = "demo-password-123"


def check_backend() -> None:
    """Verify the backend is reachable and healthy."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  filekeep serve --reload")
        sys.exit(1)

    health = resp.json()
    print(f"Backend: {health['status']} (database: {health['database']})")
    if health["database"] != "ok":
        sys.exit(1)


def signed_in_client(label: str) -> httpx.Client:
    """Register a fresh user, sign in, and return a client holding the session cookie."""
    email = f"{label}-{uuid.uuid4().hex[:8]}@example.com"
    client = httpx.Client(base_url=BASE, timeout=10)

    resp = client.post("/users/signup", json={"email": email, "password": PASSWORD, "name": label})
    if resp.status_code != 201:
        print(f"ERROR: Sign-up failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    resp = client.post("/users/signin", json={"email": email, "password": PASSWORD})
    if resp.status_code != 200:
        print(f"ERROR: Sign-in failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    print(f"  {label}: signed in as {email}")
    return client
