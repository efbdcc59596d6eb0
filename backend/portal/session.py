"""
Complaint Portal - Session côté client

Stockage durable: un fichier JSON avec deux clés, "authToken" et "user".
SessionStore est le seul à lire / écrire ce fichier.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any

logger = logging.getLogger("portal.session")

TOKEN_KEY = "authToken"
USER_KEY = "user"


class SessionStore:
    """
    Cycle de vie explicite:
        store = SessionStore(path)
        store.load()       # hydrate depuis le disque au démarrage
        store.save(...)    # après un login complet
        store.clear()      # logout
    """

    def __init__(self, path):
        self.path = Path(path)
        self._token: Optional[str] = None
        self._user: Optional[Dict[str, Any]] = None
        self._requires_password_change = False

    # ---------- getters en lecture seule ----------

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return dict(self._user) if self._user else None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def requires_password_change(self) -> bool:
        return self._requires_password_change

    # ---------- lifecycle ----------

    def load(self) -> bool:
        """Lit la session persistée. Contenu illisible -> les deux clés sont effacées."""
        if not self.path.exists():
            return False

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            token = raw.get(TOKEN_KEY)
            user = json.loads(raw[USER_KEY]) if raw.get(USER_KEY) else None
        except (ValueError, TypeError, AttributeError, KeyError) as e:
            logger.warning(f"Corrupted session file {self.path}: {e}")
            self.clear()
            return False

        if not token or not isinstance(user, dict):
            self.clear()
            return False

        self._token = token
        self._user = user
        return True

    def begin_password_change(self, token: str, user: Dict[str, Any]):
        """Login réussi mais changement de mot de passe exigé: rien n'est persisté."""
        self._token = token
        self._user = dict(user)
        self._requires_password_change = True

    def mark_password_changed(self):
        """Persiste la session en attente avec first_login=False."""
        if not self._user or not self._token:
            return
        self.save(self._token, {**self._user, "first_login": False})

    def save(self, token: str, user: Dict[str, Any]):
        self._token = token
        self._user = dict(user)
        self._requires_password_change = False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({TOKEN_KEY: token, USER_KEY: json.dumps(self._user)}),
            encoding="utf-8"
        )

    def clear(self):
        self._token = None
        self._user = None
        self._requires_password_change = False
        if self.path.exists():
            self.path.unlink()
