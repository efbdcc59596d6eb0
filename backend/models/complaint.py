"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Complaint Portal - Modèles Complaint                                        ║
║                                                                              ║
║  Les champs descriptifs sont libres: tout ce que le formulaire envoie est    ║
║  stocké tel quel (extra="allow").                                            ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    RESOLVED = "resolved"


VALID_STATUSES = [s.value for s in ComplaintStatus]

# Délai de rapport 8D: 3 jours, 5 jours, 8D sous 4 semaines
REPORT_DEADLINES = ["", "3D", "5D", "8D"]

# Schéma simple
SIMPLE_REQUIRED_FIELDS = ["title", "description"]

# Schéma étendu (formulaire de réclamation complet)
EXTENDED_REQUIRED_FIELDS = [
    "claimnumber",
    "articlenumber",
    "articledescription",
    "deliverynotenumber",
    "supplier",
    "totalquantity",
    "defectivequantity",
    "contactname",
    "contactemail",
    "contactphone",
    "errordescription",
]


class ComplaintCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    client_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    fournisseur_id: Optional[str] = None
    reportdeadline: Optional[str] = None
    errorpictures: Optional[List[str]] = None

    @field_validator("reportdeadline")
    @classmethod
    def validate_report_deadline(cls, v):
        if v is not None and v not in REPORT_DEADLINES:
            raise ValueError(f"reportdeadline invalide: {v}. Valides: {REPORT_DEADLINES}")
        return v


class ComplaintUpdate(BaseModel):
    id: Optional[str] = None
    status: Optional[str] = None
    fournisseur_id: Optional[str] = None
    remarks: Optional[str] = None

