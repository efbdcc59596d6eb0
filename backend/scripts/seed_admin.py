"""
Complaint Portal - Seed Admin
Les comptes admin ne sont pas créés par l'API: ce script les provisionne.
Run: cd backend && python scripts/seed_admin.py admin@example.com 'S3cure!Pass'
Reset password: python scripts/seed_admin.py admin@example.com 'N3w!Pass' --reset
"""

import asyncio
import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import client, db, hash_password, now_iso
from models.auth import Role, normalize_email


async def seed_admin(db, email: str, password: str, reset: bool = False) -> str:
    """Crée l'admin (ou met à jour son mot de passe avec reset=True). Retourne son id."""
    email = normalize_email(email)
    existing = await db.users.find_one({"email": email, "role": Role.ADMIN.value}, {"_id": 0})

    if existing:
        if reset:
            await db.users.update_one(
                {"id": existing["id"]},
                {"$set": {"password": hash_password(password), "updated_at": now_iso()}}
            )
            print(f"  Updated: {email} (admin)")
        else:
            print(f"  Exists: {email} (admin), use --reset to change its password")
        return existing["id"]

    now = now_iso()
    doc = {
        "id": str(uuid.uuid4()),
        "email": email,
        "password": hash_password(password),
        "role": Role.ADMIN.value,
        "first_login": False,
        "created_at": now,
        "updated_at": now,
    }
    await db.users.insert_one(doc)
    print(f"  Created: {email} (admin)")
    return doc["id"]


async def main():
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) != 2:
        print(__doc__)
        sys.exit(1)

    await seed_admin(db, args[0], args[1], reset="--reset" in sys.argv)
    client.close()


if __name__ == "__main__":
    asyncio.run(main())
