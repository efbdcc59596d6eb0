"""
Complaint Portal - Complaint Lifecycle Service
list (filtré par rôle) / create / update (statut, assignation) / delete
"""

import logging
import uuid
from typing import Dict, Any, List, Optional

from pymongo import ReturnDocument

from config import now_iso
from models.auth import Role, validate_role
from models.complaint import (
    ComplaintStatus,
    SIMPLE_REQUIRED_FIELDS,
    EXTENDED_REQUIRED_FIELDS,
)
from services.complaint_state_machine import next_status
from services.errors import ValidationError, NotFoundError, ConflictError
from services.event_logger import log_event, get_events

logger = logging.getLogger("complaints")


# ==================== HELPERS ====================

def role_filter(role: str, user_id: str) -> Dict[str, Any]:
    """admin voit tout, client ses réclamations, fournisseur celles qui lui sont assignées"""
    if role == Role.CLIENT.value:
        return {"client_id": user_id}
    if role == Role.FOURNISSEUR.value:
        return {"fournisseur_id": user_id}
    return {}


def _has_value(payload: dict, field: str) -> bool:
    """Présence d'un champ, insensible à la casse (claimNumber == claimnumber)"""
    for key, value in payload.items():
        if key.lower() == field and value not in (None, ""):
            return True
    return False


def has_descriptive_fields(payload: dict) -> bool:
    if all(_has_value(payload, f) for f in SIMPLE_REQUIRED_FIELDS):
        return True
    return all(_has_value(payload, f) for f in EXTENDED_REQUIRED_FIELDS)


async def attach_emails(db, complaints: List[dict]) -> List[dict]:
    """Ajoute client: {email} et fournisseur: {email} pour l'affichage"""
    user_ids = set()
    for c in complaints:
        if c.get("client_id"):
            user_ids.add(c["client_id"])
        if c.get("fournisseur_id"):
            user_ids.add(c["fournisseur_id"])

    emails = {}
    if user_ids:
        users = await db.users.find(
            {"id": {"$in": list(user_ids)}},
            {"_id": 0, "id": 1, "email": 1, "role": 1}
        ).to_list(len(user_ids) * 2)
        emails = {(u["id"], u.get("role")): u["email"] for u in users}

    for c in complaints:
        client_email = emails.get((c.get("client_id"), Role.CLIENT.value))
        fournisseur_email = emails.get((c.get("fournisseur_id"), Role.FOURNISSEUR.value))
        c["client"] = {"email": client_email} if client_email else None
        c["fournisseur"] = {"email": fournisseur_email} if fournisseur_email else None

    return complaints


async def _user_exists(db, user_id: str, role: str) -> bool:
    return await db.users.find_one({"id": user_id, "role": role}, {"_id": 0, "id": 1}) is not None


# ==================== OPERATIONS ====================

async def list_complaints(db, role: str, user_id: str) -> List[dict]:
    if not role or not user_id:
        raise ValidationError("Missing role or userId")
    if not validate_role(role):
        raise ValidationError("Invalid role")

    complaints = await db.complaints.find(
        role_filter(role, user_id),
        {"_id": 0}
    ).sort("created_at", -1).to_list(None)

    return await attach_emails(db, complaints)


async def get_complaint(db, complaint_id: str) -> dict:
    complaint = await db.complaints.find_one({"id": complaint_id}, {"_id": 0})
    if not complaint:
        raise NotFoundError("Complaint not found")
    return complaint


async def create_complaint(db, payload: Dict[str, Any]) -> dict:
    """
    Crée une réclamation. Les champs descriptifs sont transmis tels quels.
    Rien n'est écrit si la validation échoue.
    """
    client_id = payload.get("client_id")
    if not client_id or not has_descriptive_fields(payload):
        raise ValidationError(
            "Missing required fields (client_id and title/description "
            "or the full complaint form)"
        )

    status = payload.get("status") or ComplaintStatus.PENDING.value
    if status != ComplaintStatus.PENDING.value:
        raise ValidationError("New complaints must start as pending")

    if payload.get("fournisseur_id"):
        raise ValidationError("A complaint is assigned after creation")

    if not await _user_exists(db, client_id, Role.CLIENT.value):
        raise ValidationError("Client not found")

    now = now_iso()
    complaint = {
        **payload,
        "id": str(uuid.uuid4()),
        "client_id": client_id,
        "fournisseur_id": None,
        "status": status,
        "created_at": now,
        "updated_at": now,
    }

    await db.complaints.insert_one(complaint)
    complaint.pop("_id", None)

    await log_event(db, "create_complaint", "complaint", complaint["id"], user=client_id)
    logger.info(f"Complaint {complaint['id']} created by client {client_id}")

    return complaint


async def update_complaint(
    db,
    complaint_id: str,
    changes: Dict[str, Any],
    user: Optional[str] = None
) -> dict:
    """
    Mise à jour partielle. Seuls les champs fournis sont modifiés.
    La transition de statut passe par la state machine.
    """
    if not complaint_id:
        raise ValidationError("Missing complaint ID")

    complaint = await get_complaint(db, complaint_id)

    fournisseur_supplied = "fournisseur_id" in changes
    new_status, new_fournisseur, action = next_status(
        complaint,
        requested_status=changes.get("status"),
        fournisseur_id=changes.get("fournisseur_id"),
        fournisseur_supplied=fournisseur_supplied,
    )

    if new_fournisseur != complaint.get("fournisseur_id"):
        if not await _user_exists(db, new_fournisseur, Role.FOURNISSEUR.value):
            raise ValidationError("Fournisseur not found")

    update_data = {}
    if action:
        update_data["status"] = new_status
        update_data["fournisseur_id"] = new_fournisseur
    if changes.get("remarks") is not None:
        update_data["remarks"] = changes["remarks"]

    if not update_data:
        return (await attach_emails(db, [complaint]))[0]

    update_data["updated_at"] = now_iso()

    # Filtre sur l'état lu (statut + fournisseur): une écriture concurrente donne un 409
    updated = await db.complaints.find_one_and_update(
        {
            "id": complaint_id,
            "status": complaint.get("status"),
            "fournisseur_id": complaint.get("fournisseur_id"),
        },
        {"$set": update_data},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise ConflictError("Complaint was modified concurrently, please retry")
    updated.pop("_id", None)

    if action:
        await log_event(
            db, action, "complaint", complaint_id,
            user=user or "system",
            details={
                "old_status": complaint.get("status"),
                "new_status": new_status,
                "old_fournisseur_id": complaint.get("fournisseur_id"),
                "fournisseur_id": new_fournisseur,
            }
        )

    return (await attach_emails(db, [updated]))[0]


async def delete_complaint(db, complaint_id: str, user: Optional[str] = None) -> Dict[str, Any]:
    """Suppression définitive. Un id inconnu n'est pas une erreur."""
    if not complaint_id:
        raise ValidationError("Missing complaint ID")

    result = await db.complaints.delete_one({"id": complaint_id})

    if result.deleted_count:
        await log_event(db, "delete_complaint", "complaint", complaint_id, user=user or "system")
        logger.info(f"Complaint {complaint_id} deleted")
    else:
        logger.info(f"Delete on unknown complaint {complaint_id}")

    return {"success": True, "message": "Complaint deleted successfully"}


async def complaint_stats(db, role: str, user_id: str) -> Dict[str, int]:
    """Compteurs par statut pour les tableaux de bord"""
    if not role or not user_id:
        raise ValidationError("Missing role or userId")
    if not validate_role(role):
        raise ValidationError("Invalid role")

    base = role_filter(role, user_id)
    stats = {}
    for status in ComplaintStatus:
        stats[status.value] = await db.complaints.count_documents({**base, "status": status.value})
    stats["total"] = sum(stats.values())
    return stats


async def complaint_events(db, complaint_id: str) -> List[dict]:
    return await get_events(db, "complaint", complaint_id)
