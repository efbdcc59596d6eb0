"""
Complaint Portal - Gestion des comptes client / fournisseur
Les comptes admin sont provisionnés par scripts/seed_admin.py.
"""

import logging
import uuid
from typing import Dict, Any, List

from pymongo.errors import DuplicateKeyError

from config import DEFAULT_PASSWORD, hash_password, now_iso
from models.auth import Role, MANAGED_ROLES, normalize_email
from services.errors import ValidationError
from services.event_logger import log_event

logger = logging.getLogger("users")


async def list_users(db) -> List[dict]:
    """Clients et fournisseurs fusionnés, avec leur rôle"""
    users = await db.users.find(
        {"role": {"$in": MANAGED_ROLES}},
        {"_id": 0, "id": 1, "email": 1, "created_at": 1, "role": 1}
    ).to_list(None)

    # clients d'abord, puis fournisseurs
    order = {role: i for i, role in enumerate(MANAGED_ROLES)}
    return sorted(users, key=lambda u: order[u["role"]])


async def list_fournisseurs(db) -> List[dict]:
    return await db.users.find(
        {"role": Role.FOURNISSEUR.value},
        {"_id": 0, "id": 1, "email": 1}
    ).to_list(None)


async def create_user(db, email: str, role: str, created_by: str = "admin") -> Dict[str, Any]:
    """Nouveau compte avec le mot de passe par défaut, changement forcé au premier login"""
    if not email or not role:
        raise ValidationError("Missing required fields")
    if role not in MANAGED_ROLES:
        raise ValidationError(f"Invalid role: {role}. Valides: {MANAGED_ROLES}")

    email = normalize_email(email)

    existing = await db.users.find_one({"email": email, "role": role})
    if existing:
        raise ValidationError("User already exists")

    now = now_iso()
    new_user = {
        "id": str(uuid.uuid4()),
        "email": email,
        "password": hash_password(DEFAULT_PASSWORD),
        "role": role,
        "first_login": True,
        "created_at": now,
        "updated_at": now,
    }

    try:
        await db.users.insert_one(new_user)
    except DuplicateKeyError:
        raise ValidationError("User already exists")

    await log_event(db, "create_user", "user", new_user["id"], user=created_by,
                    details={"email": email, "role": role})
    logger.info(f"User {email} ({role}) created")

    new_user.pop("password", None)
    new_user.pop("_id", None)
    return new_user


async def delete_user(db, user_id: str, role: str, deleted_by: str = "admin") -> Dict[str, Any]:
    """Suppression définitive. Les réclamations liées ne sont pas touchées."""
    if not user_id or not role:
        raise ValidationError("Missing user ID or role")
    if role not in MANAGED_ROLES:
        raise ValidationError(f"Invalid role: {role}. Valides: {MANAGED_ROLES}")

    result = await db.users.delete_one({"id": user_id, "role": role})
    if result.deleted_count:
        await log_event(db, "delete_user", "user", user_id, user=deleted_by, details={"role": role})
        logger.info(f"User {user_id} ({role}) deleted")

    return {"success": True, "message": "User deleted successfully"}

