"""
Complaint Portal - Service errors

Les services lèvent ces exceptions, server.py les convertit en
{"success": false, "message": ...} avec le bon status HTTP.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceError):
    """Entrée manquante ou invalide"""
    status_code = 400


class AuthError(ServiceError):
    """Identifiants invalides"""
    status_code = 401


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """Le document a changé entre la lecture et l'écriture"""
    status_code = 409


class ComplaintTransitionError(ValidationError):
    """Transition de statut refusée par la state machine"""
    pass
