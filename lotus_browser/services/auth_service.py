from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from lotus_browser.core.records import now_iso
from lotus_browser.services.storage import SlotStorage

logger = logging.getLogger(__name__)

USER_SLOT = "lotus-user"


@dataclass(frozen=True)
class AuthResult:
    success: bool
    user: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class AuthService:
    """
    Mock sign-in. There is no account backend: signing in or registering
    just records a user in the `lotus-user` slot, and signing out clears it.
    Passwords are accepted but never checked or stored.
    """

    def __init__(self, storage: SlotStorage, *, slot: str = USER_SLOT):
        self.storage = storage
        self.slot = slot

    def current_user(self) -> Optional[Dict[str, Any]]:
        try:
            raw = self.storage.get_item(self.slot)
        except Exception:
            logger.exception("Failed to read user slot")
            return None
        if not raw:
            return None
        try:
            user = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Failed to parse user data")
            return None
        return user if isinstance(user, dict) else None

    def is_authenticated(self) -> bool:
        return self.current_user() is not None

    def login(self, email: str, password: str) -> AuthResult:
        email = (email or "").strip()
        if not email or not password:
            return AuthResult(success=False, error="Email and password are required.")
        return self._sign_in(email, email.split("@")[0])

    def register(self, email: str, password: str, name: str) -> AuthResult:
        email = (email or "").strip()
        if not email or not password:
            return AuthResult(success=False, error="Email and password are required.")
        return self._sign_in(email, (name or "").strip() or email.split("@")[0])

    def logout(self) -> None:
        try:
            self.storage.remove_item(self.slot)
        except Exception:
            logger.exception("Failed to clear user slot")

    def _sign_in(self, email: str, name: str) -> AuthResult:
        user = {
            "id": int(time.time() * 1000),
            "email": email,
            "name": name,
            "createdAt": now_iso(),
        }
        try:
            self.storage.set_item(self.slot, json.dumps(user))
        except Exception as e:
            logger.exception("Failed to store user")
            return AuthResult(success=False, error=str(e))

        logger.info("User signed in", extra={"email": email})
        return AuthResult(success=True, user=user)


def display_name(user: Optional[Dict[str, Any]]) -> str:
    if not user:
        return ""
    return str(user.get("name") or user.get("email") or "")
