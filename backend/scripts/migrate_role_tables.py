"""
Complaint Portal - Migration: collections admin / client / fournisseurs -> users
Chaque document reçoit le champ role. Les mots de passe en clair sont hashés.
Run: cd backend && python scripts/migrate_role_tables.py
"""

import asyncio
import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import client, db, hash_password, is_password_hashed, now_iso
from models.auth import Role, normalize_email

LEGACY_COLLECTIONS = {
    "admin": Role.ADMIN.value,
    "client": Role.CLIENT.value,
    "fournisseurs": Role.FOURNISSEUR.value,
}


async def migrate(db):
    report = {"migrated": 0, "skipped": 0, "hashed": 0}

    for collection, role in LEGACY_COLLECTIONS.items():
        async for legacy in db[collection].find({}, {"_id": 0}):
            email = normalize_email(legacy.get("email") or "")
            if not email:
                report["skipped"] += 1
                continue

            if await db.users.find_one({"email": email, "role": role}):
                report["skipped"] += 1
                continue

            password = legacy.get("password") or ""
            if password and not is_password_hashed(password):
                password = hash_password(password)
                report["hashed"] += 1

            now = now_iso()
            await db.users.insert_one({
                # les ids existants sont gardés: complaints.client_id / fournisseur_id y pointent
                "id": str(legacy.get("id") or uuid.uuid4()),
                "email": email,
                "password": password,
                "role": role,
                "first_login": bool(legacy.get("first_login", True)),
                "created_at": legacy.get("created_at") or now,
                "updated_at": now,
            })
            report["migrated"] += 1

    print("\n════════════════════════════════════")
    print("  MIGRATION REPORT")
    print("════════════════════════════════════")
    print(f"  Migrated:          {report['migrated']}")
    print(f"  Skipped:           {report['skipped']}")
    print(f"  Passwords hashed:  {report['hashed']}")
    print("════════════════════════════════════")

    return report


async def main():
    await migrate(db)
    client.close()


if __name__ == "__main__":
    asyncio.run(main())
