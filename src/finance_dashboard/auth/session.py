import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from loguru import logger

from finance_dashboard.domain.models import User
from finance_dashboard.repositories.base import TransactionStore

class AuthProvider(ABC):
    """Source of the currently signed-in user"""

    @abstractmethod
    def get_current_user(self) -> Optional[User]:
        """Return the signed-in user, or None"""
        pass

    @abstractmethod
    def sign_in(self, email: str) -> User:
        pass

    @abstractmethod
    def sign_out(self) -> None:
        pass

class SessionFileAuth(AuthProvider):
    """
    Keeps the signed-in user in a small JSON session file.

    The session only stores the user ID; the user row itself lives in the
    transaction store, so a session for a deleted user reads as signed out.
    """

    def __init__(self, store: TransactionStore, session_path: Path | str):
        self.store = store
        self.session_path = Path(session_path)

    def get_current_user(self) -> Optional[User]:
        if not self.session_path.exists():
            return None

        try:
            with open(self.session_path) as f:
                session = json.load(f)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable session file {}", self.session_path)
            return None

        user_id = session.get("user_id")
        if not user_id:
            return None
        return self.store.get_user(user_id)

    def sign_in(self, email: str) -> User:
        """
        Start a session for the given email.

        Raises:
            ValueError: If the email is blank or malformed
        """
        email = email.strip().lower()
        if "@" not in email:
            raise ValueError(f"Invalid email address: '{email}'")

        user = self.store.get_or_create_user(email)
        self.session_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.session_path, "w") as f:
            json.dump({"user_id": user.id, "email": user.email}, f)

        logger.info("Signed in as {}", user.email)
        return user

    def sign_out(self) -> None:
        if self.session_path.exists():
            self.session_path.unlink()
        logger.info("Signed out")
