#!/usr/bin/env python3
"""
filekeep quickstart — one user's full session lifecycle.

Sign up → sign in → create a file → rename → write content → list →
sign out → confirm the session is gone.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
"""

from _common import check_backend, signed_in_client


def main():
    check_backend()

    print("\n1. Signing in...")
    client = signed_in_client("demo")

    print("\n2. Creating a file...")
    resp = client.post("/files")
    assert resp.status_code == 201, f"Failed: {resp.text}"
    f = resp.json()
    print(f"   {f['id'][:8]}...  {f['title']}")

    print("\n3. Renaming and writing content...")
    resp = client.patch(f"/files/{f['id']}", json={"title": "Groceries"})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    resp = client.put(f"/files/{f['id']}/content", json={"content": "milk\neggs\nbread"})
    assert resp.status_code == 200, f"Failed: {resp.text}"

    print("\n4. Listing files...")
    for row in client.get("/files").json():
        print(f"   {row['id'][:8]}...  {row['title']}  ({len(row['content'])} chars)")

    print("\n5. Signing out...")
    client.get("/users/signout")
    resp = client.get("/files")
    print(f"   GET /files after sign-out → {resp.status_code} {resp.json()['detail']}")


if __name__ == "__main__":
    main()
