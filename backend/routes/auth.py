"""
Complaint Portal - Routes Auth
Login par rôle / changement de mot de passe.
"""

from fastapi import APIRouter, Depends

from config import get_db
from models.auth import UserLogin, PasswordChange
from services import auth_service

router = APIRouter(tags=["Auth"])


@router.post("/auth-login")
async def login(data: UserLogin, db=Depends(get_db)):
    """Connexion admin / client / fournisseur."""
    return await auth_service.login(db, data.email, data.password, data.role)


@router.post("/change-password")
async def change_password(data: PasswordChange, db=Depends(get_db)):
    """Changement de mot de passe (obligatoire au premier login)."""
    return await auth_service.change_password(
        db, data.email, data.currentPassword, data.newPassword, data.role
    )
