"""
Complaint Portal - Routes Users
Gestion des comptes client / fournisseur par l'admin.
"""

from fastapi import APIRouter, Depends

from config import get_db
from models.auth import UserCreate
from services import users as user_service
from services.errors import ValidationError

router = APIRouter(tags=["Users"])


@router.get("/users")
async def list_users(db=Depends(get_db)):
    return {"success": True, "data": await user_service.list_users(db)}


@router.post("/users")
async def create_user(data: UserCreate, db=Depends(get_db)):
    """Mot de passe par défaut, changement forcé au premier login."""
    user = await user_service.create_user(db, data.email, data.role)
    return {"success": True, "data": user}


@router.delete("/users/{user_id}/{role}")
async def delete_user(user_id: str, role: str, db=Depends(get_db)):
    return await user_service.delete_user(db, user_id, role)


@router.delete("/users/{user_id}")
async def delete_user_without_role(user_id: str):
    raise ValidationError("Missing user ID or role")


@router.get("/fournisseurs")
async def list_fournisseurs(db=Depends(get_db)):
    """Fournisseurs disponibles pour l'assignation."""
    return {"success": True, "data": await user_service.list_fournisseurs(db)}
