#!/usr/bin/env python3
"""
DocVault Demo - Shows certificate-gated inserts, queries and history.

Uses the library directly against a temporary store with encryption on.
Requires git on PATH.
"""

import json
import os
import tempfile

from dbaas.docvault import DocVault
from dbaas.docvault.errors import FieldNotFoundError, UnauthorizedError
from dbaas.docvault.query import and_, condition


def main():
    print("=" * 60)
    print("DocVault Demo - Encrypted, versioned documents")
    print("=" * 60)
    print()

    with tempfile.TemporaryDirectory() as data_dir:
        print(f"[Setup] Using data directory: {data_dir}")
        db = DocVault(data_dir, encryption_key=os.urandom(32))

        # 1. Issue a certificate
        print("\n[Step 1] Issuing certificate for alice...")
        cert, _key = db.generate_certificate("alice")
        print(f"  Authenticated as: {db.authenticate(cert)}")

        # 2. Insert documents
        print("\n[Step 2] Creating documents...")
        db.create("user1", {"name": "Alice", "age": 25, "city": "New York"})
        db.create("user2", {"name": "Bob", "age": 30, "city": "San Francisco"})
        print(f"  Documents: {db.list()}")

        with open(os.path.join(data_dir, "user1.json"), "rb") as f:
            raw = f.read()
        print(f"  user1.json on disk: {raw[:24].hex()}... ({len(raw)} bytes)")

        # 3. Query
        print("\n[Step 3] Finding age >= 25 AND city contains 'York'...")
        flt = and_(condition("age", "gte", 25), condition("city", "contains", "York"))
        for doc in db.find(flt):
            print(f"  {doc.id}: {json.dumps(doc.data)}")

        print("\n[Step 4] Querying a field one document lacks...")
        db.create("user3", {"name": "Carol"})
        try:
            db.find(condition("age", "gt", 1))
        except FieldNotFoundError as e:
            print(f"  Query aborted: {e}")

        # 5. Update and delete
        print("\n[Step 5] Updating user2 and deleting user3...")
        updated = db.update("user2", {"name": "Bob", "age": 31, "city": "Oakland"})
        print(f"  user2 now: {json.dumps(updated.data)}")
        db.delete("user3")

        # 6. Audit trail
        print("\n[Step 6] History:")
        for commit in db.history():
            print(f"  {commit.sha[:10]} {commit.message}")

        # 7. Revoke
        print("\n[Step 7] Revoking alice...")
        db.revoke_certificate("alice")
        try:
            db.authenticate(cert)
        except UnauthorizedError as e:
            print(f"  Rejected: {e}")

    print("\nDone.")


if __name__ == "__main__":
    main()
