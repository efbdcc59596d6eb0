"""
Configuration et utilitaires partagés
"""

import os
import base64
import hashlib
import hmac
import secrets
import time
from datetime import datetime, timezone
from typing import Optional, Tuple
from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv
from pathlib import Path

# Charger .env
ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

# MongoDB
MONGO_URL = os.environ.get('MONGO_URL', 'mongodb://localhost:27017')
DB_NAME = os.environ.get('DB_NAME', 'complaints_portal')

client = AsyncIOMotorClient(MONGO_URL)
db = client[DB_NAME]

CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')
API_PREFIX = os.environ.get('API_PREFIX', '')

# Mot de passe attribué aux comptes créés par un admin
DEFAULT_PASSWORD = os.environ.get('DEFAULT_PASSWORD', 'password')
PASSWORD_HASH_ITERATIONS = int(os.environ.get('PASSWORD_HASH_ITERATIONS', '260000'))

HASH_SCHEME = "pbkdf2_sha256"


def get_db():
    """FastAPI dependency returning the Mongo database."""
    return db


# ==================== HELPERS ====================

def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Hash PBKDF2-SHA256 salé: pbkdf2_sha256$<iterations>$<salt>$<hex>"""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), PASSWORD_HASH_ITERATIONS
    ).hex()
    return f"{HASH_SCHEME}${PASSWORD_HASH_ITERATIONS}${salt}${digest}"


def is_password_hashed(stored: str) -> bool:
    return bool(stored) and stored.startswith(f"{HASH_SCHEME}$")


def verify_password(password: str, stored: str) -> bool:
    """
    Compare en temps constant.
    Les valeurs legacy en clair sont encore acceptées (re-hash au login).
    """
    if not stored:
        return False
    if not is_password_hashed(stored):
        return hmac.compare_digest(stored.encode(), password.encode())
    try:
        _, iterations, salt, digest = stored.split("$", 3)
        candidate = hashlib.pbkdf2_hmac(
            "sha256", password.encode(), salt.encode(), int(iterations)
        ).hex()
    except ValueError:
        return False
    return hmac.compare_digest(candidate, digest)


def generate_token(user_id: str) -> str:
    """Token opaque non signé: base64("{user_id}:{epoch_ms}")"""
    raw = f"{user_id}:{int(time.time() * 1000)}"
    return base64.b64encode(raw.encode()).decode()


def decode_token(token: str) -> Optional[Tuple[str, int]]:
    """Retourne (user_id, issued_at_ms) ou None si le token est illisible"""
    try:
        raw = base64.b64decode(token.encode(), validate=True).decode()
        user_id, issued_at = raw.rsplit(":", 1)
        return user_id, int(issued_at)
    except (ValueError, UnicodeDecodeError):
        return None


def now_iso() -> str:
    """Retourne la date/heure actuelle en ISO"""
    return datetime.now(timezone.utc).isoformat()
