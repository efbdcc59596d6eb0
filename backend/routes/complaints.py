"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Complaint Portal - Routes Complaints                                        ║
║                                                                              ║
║  admin: toutes les réclamations, assignation                                 ║
║  client: ses réclamations, création, suppression                             ║
║  fournisseur: réclamations assignées, résolution                             ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from config import get_db
from models import ComplaintCreate, ComplaintUpdate
from services import complaints as complaint_service
from services.errors import ValidationError

router = APIRouter(prefix="/complaints", tags=["Complaints"])


@router.get("")
async def list_complaints(
    role: Optional[str] = Query(None, description="admin | client | fournisseur"),
    userId: Optional[str] = Query(None),
    db=Depends(get_db)
):
    """Réclamations visibles par le rôle, plus récentes d'abord."""
    data = await complaint_service.list_complaints(db, role, userId)
    return {"success": True, "data": data}


@router.get("/stats")
async def complaint_stats(
    role: Optional[str] = Query(None),
    userId: Optional[str] = Query(None),
    db=Depends(get_db)
):
    data = await complaint_service.complaint_stats(db, role, userId)
    return {"success": True, "data": data}


@router.post("")
async def create_complaint(data: ComplaintCreate, db=Depends(get_db)):
    """Tous les champs envoyés par le formulaire sont conservés."""
    complaint = await complaint_service.create_complaint(
        db, data.model_dump(exclude_unset=True)
    )
    return {"success": True, "data": complaint}


@router.put("")
async def update_complaint(data: ComplaintUpdate, db=Depends(get_db)):
    """Assignation / changement de statut."""
    complaint = await complaint_service.update_complaint(
        db, data.id, data.model_dump(exclude_unset=True, exclude={"id"})
    )
    return {"success": True, "data": complaint}


@router.get("/{complaint_id}/events")
async def complaint_events(complaint_id: str, db=Depends(get_db)):
    await complaint_service.get_complaint(db, complaint_id)
    data = await complaint_service.complaint_events(db, complaint_id)
    return {"success": True, "data": data}


@router.delete("/{complaint_id}")
async def delete_complaint(complaint_id: str, db=Depends(get_db)):
    return await complaint_service.delete_complaint(db, complaint_id)


@router.delete("")
async def delete_complaint_without_id():
    raise ValidationError("Missing complaint ID")
