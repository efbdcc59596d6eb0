"""
Complaint Portal - Modeles Auth & Utilisateurs
Un seul type User, le role sert de discriminant.
"""

from enum import Enum
from pydantic import BaseModel, field_validator
from typing import Optional


class Role(str, Enum):
    ADMIN = "admin"
    CLIENT = "client"
    FOURNISSEUR = "fournisseur"


VALID_ROLES = [r.value for r in Role]

# Roles qu'un admin peut créer / supprimer
MANAGED_ROLES = [Role.CLIENT.value, Role.FOURNISSEUR.value]


def validate_role(role: Optional[str]) -> bool:
    return role in VALID_ROLES


def normalize_email(email: str) -> str:
    return email.lower().strip()


# Champs optionnels: l'absence est signalée par le service (400), pas par pydantic
class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class PasswordChange(BaseModel):
    email: Optional[str] = None
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None
    role: Optional[str] = None


class UserCreate(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None

    @field_validator("email")
    @classmethod
    def clean_email(cls, v):
        return normalize_email(v) if v else v

