"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Complaint Portal - Complaint State Machine                                  ║
║                                                                              ║
║  pending --assign--> assigned --resolve--> resolved --reopen--> assigned     ║
║                                                                              ║
║  SEUL CE MODULE décide du statut suivant d'une réclamation.                  ║
║                                                                              ║
║  INVARIANTS:                                                                 ║
║  - status in (assigned, resolved) IMPLIQUE fournisseur_id non vide           ║
║  - status="pending" IMPLIQUE fournisseur_id vide                             ║
║  - aucun état terminal: resolved peut toujours être rouvert                  ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import logging
from typing import Optional, Tuple

from models.complaint import ComplaintStatus, VALID_STATUSES
from services.errors import ComplaintTransitionError

logger = logging.getLogger("complaint_state_machine")


# ════════════════════════════════════════════════════════════════════════════
# VALID STATE TRANSITIONS
# ════════════════════════════════════════════════════════════════════════════

VALID_COMPLAINT_TRANSITIONS = {
    "pending": ["assigned"],
    "assigned": ["assigned", "resolved"],  # assigned -> assigned = réassignation
    "resolved": ["assigned"],  # reopen
}

TRANSITION_ACTIONS = {
    ("pending", "assigned"): "assign_complaint",
    ("assigned", "assigned"): "reassign_complaint",
    ("assigned", "resolved"): "resolve_complaint",
    ("resolved", "assigned"): "reopen_complaint",
}


def check_complaint_invariants(status: str, fournisseur_id: Optional[str]) -> bool:
    if status not in VALID_STATUSES:
        raise ComplaintTransitionError(f"Invalid status: {status}")

    if status == ComplaintStatus.PENDING.value and fournisseur_id:
        raise ComplaintTransitionError("A pending complaint cannot have a fournisseur")

    if status != ComplaintStatus.PENDING.value and not fournisseur_id:
        raise ComplaintTransitionError(f"Status '{status}' requires a fournisseur")

    return True


def validate_complaint_transition(complaint_id: str, from_status: str, to_status: str) -> bool:
    valid_next = VALID_COMPLAINT_TRANSITIONS.get(from_status, [])

    if to_status not in valid_next:
        raise ComplaintTransitionError(
            f"Invalid transition: complaint {complaint_id} cannot go from "
            f"'{from_status}' to '{to_status}'"
        )

    return True


def next_status(
    complaint: dict,
    requested_status: Optional[str] = None,
    fournisseur_id: Optional[str] = None,
    fournisseur_supplied: bool = False,
) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Fonction de transition unique.

    Args:
        complaint: document courant (status, fournisseur_id)
        requested_status: statut demandé, None si seul fournisseur_id est fourni
        fournisseur_id: nouveau fournisseur demandé
        fournisseur_supplied: True si la clé fournisseur_id était dans la requête
            (permet de distinguer "absent" de null)

    Returns:
        (new_status, new_fournisseur_id, action)
        action vaut None quand la requête ne change rien.

    Raises:
        ComplaintTransitionError
    """
    current = complaint.get("status", ComplaintStatus.PENDING.value)
    current_fournisseur = complaint.get("fournisseur_id")
    complaint_id = complaint.get("id", "?")

    if requested_status is not None and requested_status not in VALID_STATUSES:
        raise ComplaintTransitionError(f"Invalid status: {requested_status}")

    if fournisseur_supplied and not fournisseur_id:
        raise ComplaintTransitionError("fournisseur_id cannot be cleared")

    # Seul fournisseur_id fourni = assignation
    target = requested_status or (
        ComplaintStatus.ASSIGNED.value if fournisseur_supplied else current
    )
    target_fournisseur = fournisseur_id if fournisseur_supplied else current_fournisseur

    if target == current and target_fournisseur == current_fournisseur:
        return current, current_fournisseur, None

    validate_complaint_transition(complaint_id, current, target)

    # resolve ne change pas le fournisseur
    if target == ComplaintStatus.RESOLVED.value and target_fournisseur != current_fournisseur:
        raise ComplaintTransitionError("Cannot change fournisseur while resolving")

    check_complaint_invariants(target, target_fournisseur)

    action = TRANSITION_ACTIONS[(current, target)]
    logger.info(f"[STATE_MACHINE] Complaint {complaint_id}: {current} -> {target} ({action})")
    return target, target_fournisseur, action
