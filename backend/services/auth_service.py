"""
Complaint Portal - Auth Service
Login par rôle + changement de mot de passe.

Le token est auto-émis et n'est pas vérifié par les autres endpoints:
aucune écriture de session en base.
"""

import logging
from typing import Dict, Any

from config import (
    DEFAULT_PASSWORD,
    hash_password,
    is_password_hashed,
    verify_password,
    generate_token,
    now_iso,
)
from models.auth import validate_role, normalize_email
from services.errors import ValidationError, AuthError, NotFoundError
from services.event_logger import log_event
from services.passwords import check_password_strength, PASSWORD_POLICY_MESSAGE

logger = logging.getLogger("auth")

INVALID_CREDENTIALS = "Invalid credentials"

# Mot de passe initial historique, en plus de DEFAULT_PASSWORD
INITIAL_PASSWORD = "password"


async def find_user(db, email: str, role: str, include_password: bool = False):
    """Un seul utilisateur par (email, role)"""
    projection = {"_id": 0} if include_password else {"_id": 0, "password": 0}
    return await db.users.find_one(
        {"email": normalize_email(email), "role": role},
        projection
    )


def requires_password_change(user: dict, password: str) -> bool:
    return bool(user.get("first_login")) or password in (INITIAL_PASSWORD, DEFAULT_PASSWORD)


async def login(db, email: str, password: str, role: str) -> Dict[str, Any]:
    if not email or not password or not role:
        raise ValidationError("Missing required fields")

    if not validate_role(role):
        raise ValidationError("Invalid role")

    user = await find_user(db, email, role, include_password=True)

    if not user or not verify_password(password, user.get("password", "")):
        logger.info(f"Failed login for {normalize_email(email)} ({role})")
        raise AuthError(INVALID_CREDENTIALS)

    # Migration: ancien mot de passe en clair -> hash
    if not is_password_hashed(user["password"]):
        await db.users.update_one(
            {"id": user["id"]},
            {"$set": {"password": hash_password(password), "updated_at": now_iso()}}
        )
        logger.info(f"Upgraded plaintext password for user {user['id']}")

    logger.info(f"Login {user['email']} ({role})")

    return {
        "success": True,
        "user": {
            "id": user["id"],
            "email": user["email"],
            "role": role,
            "first_login": bool(user.get("first_login")),
        },
        "token": generate_token(user["id"]),
        "requirePasswordChange": requires_password_change(user, password),
    }


async def change_password(
    db,
    email: str,
    current_password: str,
    new_password: str,
    role: str
) -> Dict[str, Any]:
    if not email or not current_password or not new_password or not role:
        raise ValidationError("Missing required fields")

    if not check_password_strength(new_password):
        raise ValidationError(PASSWORD_POLICY_MESSAGE)

    if not validate_role(role):
        raise ValidationError("Invalid role")

    user = await find_user(db, email, role, include_password=True)
    if not user:
        raise NotFoundError("User not found")

    if not verify_password(current_password, user.get("password", "")):
        raise AuthError("Current password is incorrect")

    # Une seule écriture: nouveau hash + first_login désactivé
    await db.users.update_one(
        {"id": user["id"]},
        {"$set": {
            "password": hash_password(new_password),
            "first_login": False,
            "updated_at": now_iso(),
        }}
    )

    await log_event(db, "change_password", "user", user["id"], user=user["email"])
    logger.info(f"Password changed for {user['email']} ({role})")

    return {"success": True, "message": "Password updated successfully"}
