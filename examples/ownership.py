#!/usr/bin/env python3
"""
filekeep ownership demo — two users, one file.

Alice creates a file. Bob is signed in too, knows the file id, and
still gets 403 for read, rename, and delete.
Run with: python examples/ownership.py
"""

from _common import check_backend, signed_in_client


def main():
    check_backend()

    print("\nSigning in two users...")
    alice = signed_in_client("alice")
    bob = signed_in_client("bob")

    f = alice.post("/files").json()
    print(f"\nAlice created {f['id'][:8]}...")

    attempts = [
        ("GET", f"/files/{f['id']}", None),
        ("PATCH", f"/files/{f['id']}", {"title": "Bob's now"}),
        ("DELETE", f"/files/{f['id']}", None),
    ]
    for method, path, body in attempts:
        resp = bob.request(method, path, json=body)
        print(f"  Bob {method:6} {path[:20]}... → {resp.status_code}")
        assert resp.status_code == 403

    resp = alice.get(f"/files/{f['id']}")
    print(f"\nAlice still reads her file → {resp.status_code} ({resp.json()['title']})")


if __name__ == "__main__":
    main()
