"""
Complaint Portal - API Backend
Réclamations client -> admin -> fournisseur

Démarre avec:
    uvicorn server:app --host 0.0.0.0 --port 8001 --reload
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from config import CORS_ORIGINS, API_PREFIX, client
from services.errors import ServiceError

# Configuration logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("complaints_portal")

# Créer l'app
app = FastAPI(
    title="Complaint Portal",
    description="Gestion des réclamations clients / fournisseurs",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ==================== ERREURS ====================

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(e.get("type") == "missing" for e in errors):
        return error_response(400, "Missing required fields")
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return error_response(400, f"Invalid field {location}: {first.get('msg', 'invalid value')}")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return error_response(405, "Method not allowed")
    if exc.status_code == 404:
        return error_response(404, "Not found")
    return error_response(exc.status_code, str(exc.detail))


def cors_headers(request: Request) -> dict:
    """
    Les 500 sont rendues par ServerErrorMiddleware, hors de CORSMiddleware:
    les en-têtes CORS sont donc ajoutés ici.
    """
    origin = request.headers.get("origin")
    if not origin:
        return {}
    if "*" in CORS_ORIGINS:
        return {"Access-Control-Allow-Origin": "*"}
    if origin in CORS_ORIGINS:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    # Le détail reste dans les logs, jamais dans la réponse
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
        headers=cors_headers(request),
    )


# ==================== IMPORT DES ROUTES ====================

from routes import auth, complaints, users  # noqa: E402

app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(complaints.router, prefix=API_PREFIX)
app.include_router(users.router, prefix=API_PREFIX)


# ==================== ROUTE RACINE ====================

@app.get("/")
async def root():
    return {
        "name": "Complaint Portal API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs"
    }


# ==================== STARTUP ====================

@app.on_event("startup")
async def startup():
    logger.info("Complaint Portal démarré")

    from config import db

    await db.users.create_index([("email", 1), ("role", 1)], unique=True)
    await db.users.create_index("id", unique=True)
    await db.complaints.create_index("id", unique=True)
    await db.complaints.create_index("client_id")
    await db.complaints.create_index("fournisseur_id")
    await db.complaints.create_index("created_at")
    await db.event_log.create_index([("entity_type", 1), ("entity_id", 1)])

    logger.info("Index MongoDB créés")


@app.on_event("shutdown")
async def shutdown_db_client():
    client.close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
