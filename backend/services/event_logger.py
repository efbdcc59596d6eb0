"""
Complaint Portal - Event Logger

Audit trail des actions sensibles (assignation, changement de statut,
suppression, gestion des comptes).
Une seule fonction à appeler depuis n'importe quel service.
"""

import uuid
from config import now_iso


async def log_event(
    db,
    action: str,
    entity_type: str,
    entity_id: str,
    user: str = "system",
    details: dict = None,
):
    """
    Write a single event to the event_log collection.

    Args:
        action: e.g. create_complaint, assign_complaint, resolve_complaint
        entity_type: complaint | user
        entity_id: ID of the primary entity
        user: id or email of the actor when known
        details: free-form dict (old_status, new_status, fournisseur_id, ...)
    """
    event = {
        "id": str(uuid.uuid4()),
        "action": action,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "user": user,
        "details": details or {},
        "created_at": now_iso(),
    }
    await db.event_log.insert_one(event)
    event.pop("_id", None)
    return event


async def get_events(db, entity_type: str, entity_id: str, limit: int = 100):
    """Événements d'une entité, plus récents d'abord"""
    return await db.event_log.find(
        {"entity_type": entity_type, "entity_id": entity_id},
        {"_id": 0}
    ).sort("created_at", -1).to_list(limit)
