"""
Fixtures partagées: base Mongo en mémoire + client HTTP sur l'app ASGI.
"""

import os

# Hash rapide pour les tests, doit être posé avant l'import de config
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

import uuid

import httpx
import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from config import get_db, hash_password, now_iso
from server import app


@pytest.fixture
def db():
    client = AsyncMongoMockClient()
    return client[f"test_{uuid.uuid4().hex[:8]}"]


@pytest_asyncio.fixture
async def api(db):
    app.dependency_overrides[get_db] = lambda: db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    async def _make(email, role, password="Secret1!", first_login=False, hashed=True):
        doc = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": hash_password(password) if hashed else password,
            "role": role,
            "first_login": first_login,
            "created_at": now_iso(),
            "updated_at": now_iso(),
        }
        await db.users.insert_one(doc)
        doc.pop("_id", None)
        return doc
    return _make


@pytest.fixture
def make_complaint(db):
    async def _make(client_id, created_at, status="pending", fournisseur_id=None, **fields):
        doc = {
            "id": str(uuid.uuid4()),
            "title": "Colis abîmé",
            "description": "Carton écrasé à la livraison",
            "client_id": client_id,
            "fournisseur_id": fournisseur_id,
            "status": status,
            "created_at": created_at,
            "updated_at": created_at,
            **fields,
        }
        await db.complaints.insert_one(doc)
        doc.pop("_id", None)
        return doc
    return _make
