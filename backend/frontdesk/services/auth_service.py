"""Local staff login.

Credentials live in the local store so the desk can sign in while offline.
There are no tokens: the signed-in user is a single persisted session entry.
"""

import logging
from typing import List, Optional

from frontdesk.core.exceptions import ValidationError
from frontdesk.core.security import get_password_hash, verify_password
from frontdesk.schemas.auth import User, UserCreate
from frontdesk.services.local_store import LocalStore, StorageKeys

logger = logging.getLogger(__name__)

DEFAULT_USERS = [
    {"username": "admin", "password": "admin123", "name": "Administrator", "role": "Admin"},
    {"username": "receptionist", "password": "recept123", "name": "Front Desk", "role": "Receptionist"},
]


class AuthService:
    def __init__(self, store: LocalStore, keys: Optional[StorageKeys] = None):
        self.store = store
        self.keys = keys or StorageKeys()

    def initialize_users(self) -> None:
        """Seed the default accounts on a fresh install."""
        if self.store.get(self.keys.auth_users) is not None:
            return
        self.store.set(
            self.keys.auth_users,
            [
                {
                    "username": user["username"],
                    "password_hash": get_password_hash(user["password"]),
                    "name": user["name"],
                    "role": user["role"],
                }
                for user in DEFAULT_USERS
            ],
        )
        logger.info(f"Seeded {len(DEFAULT_USERS)} default staff accounts")

    def _accounts(self) -> List[dict]:
        self.initialize_users()
        return self.store.get(self.keys.auth_users, [])

    def list_users(self) -> List[User]:
        return [User(username=a["username"], name=a["name"], role=a["role"]) for a in self._accounts()]

    def login(self, username: str, password: str) -> Optional[User]:
        account = next((a for a in self._accounts() if a["username"] == username), None)
        if account is None or not verify_password(password, account["password_hash"]):
            logger.info(f"Failed login for '{username}'")
            return None
        user = User(username=account["username"], name=account["name"], role=account["role"])
        self.store.set(self.keys.auth_session, user.model_dump())
        logger.info(f"{user.username} signed in")
        return user

    def current_user(self) -> Optional[User]:
        session = self.store.get(self.keys.auth_session)
        return User.model_validate(session) if session else None

    def logout(self) -> None:
        self.store.delete(self.keys.auth_session)

    def add_user(self, data: UserCreate) -> User:
        accounts = self._accounts()
        if any(a["username"] == data.username for a in accounts):
            raise ValidationError(f"Username '{data.username}' is already taken", field="username")
        accounts.append(
            {
                "username": data.username,
                "password_hash": get_password_hash(data.password),
                "name": data.name,
                "role": data.role,
            }
        )
        self.store.set(self.keys.auth_users, accounts)
        return User(username=data.username, name=data.name, role=data.role)
