from __future__ import annotations

import copy
import re
import threading
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Literal

from mockdb_shared.errors import ToolValidationError

UserStatus = Literal["active", "inactive"]

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_USER_STATUSES = ("active", "inactive")


class UpdatableField(str, Enum):
    NAME = "name"
    EMAIL = "email"
    STATUS = "status"

    @classmethod
    def parse(cls, raw: str) -> UpdatableField | None:
        try:
            return cls(raw)
        except ValueError:
            return None


@dataclass
class User:
    id: str
    name: str
    email: str
    status: UserStatus

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Product:
    id: str
    name: str
    price: float
    stock: int
    tags: list[str] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.tags is None:
            del data["tags"]
        return data


# Seed content. Never mutated: every load deep-copies it.
SEED_USERS: tuple[User, ...] = (
    User(id="u1", name="Ada Lovelace", email="ada@example.com", status="active"),
    User(id="u2", name="Alan Turing", email="alan@example.com", status="inactive"),
)

SEED_PRODUCTS: tuple[Product, ...] = (
    Product(id="p1", name="iPhone 15", price=999, stock=5, tags=["phone"]),
    Product(id="p2", name="Pixel 8", price=799, stock=7, tags=["phone"]),
)


class MockDatabase:
    """
    In-memory table of users and products.

    Every value returned is an independent copy, so callers can never alias
    the live rows. Operations hold a single store-wide lock; concurrent updates
    to one user resolve last-write-wins.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: list[User] = []
        self._products: list[Product] = []
        self._load_seeds()

    def _load_seeds(self) -> None:
        self._users = copy.deepcopy(list(SEED_USERS))
        self._products = copy.deepcopy(list(SEED_PRODUCTS))

    def _find_user(self, user_id: str) -> User | None:
        for user in self._users:
            if user.id == user_id:
                return user
        return None

    # -----------------------------
    # Snapshots
    # -----------------------------
    def snapshot(self) -> dict[str, list[dict[str, Any]]]:
        with self._lock:
            return {
                "users": [u.to_dict() for u in self._users],
                "products": [p.to_dict() for p in self._products],
            }

    def reset_db(self) -> dict[str, list[dict[str, Any]]]:
        with self._lock:
            self._load_seeds()
            return self.snapshot()

    # -----------------------------
    # Users
    # -----------------------------
    def search_user(self, user_id: str) -> User | None:
        with self._lock:
            user = self._find_user(user_id)
            return copy.deepcopy(user) if user else None

    def search_users_by_name(self, query: str) -> list[User]:
        """Case-insensitive substring match. A blank query matches nobody."""
        q = query.strip().lower()
        if not q:
            return []
        with self._lock:
            return [copy.deepcopy(u) for u in self._users if q in u.name.lower()]

    def update_user_record(self, user_id: str, field: UpdatableField, value: str) -> User | None:
        """
        Set one field on a user in place and return a copy of the updated user.

        Returns None when the user does not exist.

        Raises:
            ToolValidationError: If the email or status value is malformed.
        """
        with self._lock:
            target = self._find_user(user_id)
            if target is None:
                return None

            if field is UpdatableField.NAME:
                target.name = value
            elif field is UpdatableField.EMAIL:
                if not _EMAIL_PATTERN.match(value):
                    raise ToolValidationError("Invalid email format")
                target.email = value
            elif field is UpdatableField.STATUS:
                if value not in _USER_STATUSES:
                    raise ToolValidationError("Invalid status. Allowed: active, inactive")
                target.status = value  # type: ignore[assignment]
            else:
                raise ToolValidationError(f"Unsupported field: {field}")

            return copy.deepcopy(target)

    def list_users(self) -> list[User]:
        with self._lock:
            return copy.deepcopy(self._users)

    # -----------------------------
    # Products
    # -----------------------------
    def search_product(self, name: str, price: float | None = None) -> list[Product]:
        """
        Case-insensitive substring match on the product name.

        An empty name matches every product, unlike `search_users_by_name`.
        When `price` is given only products with exactly that price are kept.
        """
        q = name.lower()
        with self._lock:
            matches = [p for p in self._products if q in p.name.lower()]
            if price is not None:
                matches = [p for p in matches if p.price == price]
            return copy.deepcopy(matches)

    def list_products(self) -> list[Product]:
        with self._lock:
            return copy.deepcopy(self._products)
