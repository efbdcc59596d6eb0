"""
Complaint Portal - Client HTTP

Appelle l'API pour les tableaux de bord admin / client / fournisseur.
Une erreur réseau ne lève jamais: elle est loggée et renvoyée comme
{"success": False, "message": ...}, l'appelant garde son état précédent.
"""

import logging
from typing import Optional, Dict, Any, List

import httpx

from portal.session import SessionStore

logger = logging.getLogger("portal.api")

NETWORK_ERROR = "Network error. Please try again."


class PortalClient:

    def __init__(
        self,
        base_url: str,
        session: SessionStore,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self.session = session
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def close(self):
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._http.request(method, path, **kwargs)
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"{method} {path} failed: {e}")
            return {"success": False, "message": NETWORK_ERROR}

    # ==================== AUTH ====================

    async def login(self, email: str, password: str, role: str) -> Dict[str, Any]:
        data = await self._request(
            "POST", "/auth-login",
            json={"email": email, "password": password, "role": role}
        )

        if data.get("success") and data.get("user") and data.get("token"):
            if data.get("requirePasswordChange"):
                self.session.begin_password_change(data["token"], data["user"])
            else:
                self.session.save(data["token"], data["user"])

        return data

    async def change_password(self, current_password: str, new_password: str) -> bool:
        user = self.session.user
        if not user:
            return False

        data = await self._request(
            "POST", "/change-password",
            json={
                "email": user["email"],
                "currentPassword": current_password,
                "newPassword": new_password,
                "role": user["role"],
            }
        )
        if data.get("success"):
            self.session.mark_password_changed()
            return True
        return False

    def logout(self):
        self.session.clear()

    # ==================== COMPLAINTS ====================

    async def list_complaints(self) -> List[dict]:
        user = self.session.user
        if not user:
            return []
        data = await self._request(
            "GET", "/complaints",
            params={"role": user["role"], "userId": user["id"]}
        )
        return data.get("data", []) if data.get("success") else []

    async def complaint_stats(self) -> Dict[str, int]:
        user = self.session.user
        if not user:
            return {}
        data = await self._request(
            "GET", "/complaints/stats",
            params={"role": user["role"], "userId": user["id"]}
        )
        return data.get("data", {}) if data.get("success") else {}

    async def create_complaint(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        user = self.session.user
        payload = {**fields, "client_id": user["id"] if user else None, "status": "pending"}
        return await self._request("POST", "/complaints", json=payload)

    async def update_complaint(self, complaint_id: str, **changes) -> Dict[str, Any]:
        return await self._request("PUT", "/complaints", json={"id": complaint_id, **changes})

    async def assign(self, complaint_id: str, fournisseur_id: str) -> Dict[str, Any]:
        return await self.update_complaint(
            complaint_id, fournisseur_id=fournisseur_id, status="assigned"
        )

    async def resolve(self, complaint_id: str) -> Dict[str, Any]:
        return await self.update_complaint(complaint_id, status="resolved")

    async def reopen(self, complaint_id: str) -> Dict[str, Any]:
        return await self.update_complaint(complaint_id, status="assigned")

    async def delete_complaint(self, complaint_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/complaints/{complaint_id}")

    # ==================== USERS (admin) ====================

    async def list_users(self) -> List[dict]:
        data = await self._request("GET", "/users")
        return data.get("data", []) if data.get("success") else []

    async def create_user(self, email: str, role: str) -> Dict[str, Any]:
        return await self._request("POST", "/users", json={"email": email, "role": role})

    async def delete_user(self, user_id: str, role: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/users/{user_id}/{role}")

    async def list_fournisseurs(self) -> List[dict]:
        data = await self._request("GET", "/fournisseurs")
        return data.get("data", []) if data.get("success") else []
