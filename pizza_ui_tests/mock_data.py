"""Seed records for the mock JWT Pizza backend.

Every factory returns fresh objects so that each scenario starts from the same
state and nothing leaks between fixtures.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

RoleName = Literal["diner", "franchisee", "admin"]

# Every seeded (and registered) account accepts this password
MOCK_PASSWORD = "a"

SEEDED_TOKENS: Dict[str, str] = {
    "diner": "token-diner",
    "franchisee": "token-franchisee",
    "admin": "token-admin",
}


@dataclass
class Role:
    """Role assignment, optionally scoped to an owned object (franchise id)."""

    role: RoleName
    object_id: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"role": self.role}
        if self.object_id is not None:
            data["objectId"] = self.object_id
        return data


@dataclass
class User:
    id: int
    name: str
    email: str
    roles: List[Role] = field(default_factory=list)

    def has_role(self, role: str) -> bool:
        return any(r.role == role for r in self.roles)

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "roles": [r.to_json() for r in self.roles],
        }


@dataclass
class Store:
    id: str
    name: str
    total_revenue: float = 0

    def to_json(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "totalRevenue": self.total_revenue}


@dataclass
class Franchise:
    """Franchise with its admin emails and stores (in display order)."""

    id: str
    name: str
    admins: List[str] = field(default_factory=list)
    stores: List[Store] = field(default_factory=list)

    def is_admin(self, email: str) -> bool:
        return email in self.admins

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "admins": [{"email": email} for email in self.admins],
            "stores": [s.to_json() for s in self.stores],
        }


@dataclass(frozen=True)
class MenuItem:
    title: str
    description: str
    image: str
    price: float

    def to_json(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "price": self.price,
        }


@dataclass
class MockUsers:
    diner: User
    franchisee: User
    admin: User

    def get(self, role: str) -> User:
        if role not in SEEDED_TOKENS:
            raise KeyError(f"No seeded user for role '{role}'")
        return getattr(self, role)

    def all(self) -> List[User]:
        return [self.diner, self.franchisee, self.admin]


def default_users() -> MockUsers:
    return MockUsers(
        diner=User(id=1, name="Kevin Costa", email="diner@jwt.com", roles=[Role("diner")]),
        franchisee=User(
            id=2,
            name="Fran Chisee",
            email="fran@jwt.com",
            roles=[Role("franchisee", object_id="99")],
        ),
        admin=User(id=3, name="Admin User", email="admin@jwt.com", roles=[Role("admin")]),
    )


def default_menu() -> List[MenuItem]:
    return [
        MenuItem("Veggie", "A garden of delight", "/pizza1.png", 0.0042),
        MenuItem("Pepperoni", "Spicy treat", "/pizza2.png", 0.0042),
        MenuItem("Hawaiian", "Sweet and savory", "/pizza3.png", 0.0042),
        MenuItem("Cheese", "Classic comfort", "/pizza4.png", 0.0042),
    ]


def default_franchises(users: MockUsers) -> List[Franchise]:
    return [
        Franchise(
            id="1",
            name="Papa's Palace",
            admins=[users.admin.email],
            stores=[Store("4", "SLC"), Store("5", "Provo")],
        ),
        Franchise(
            id="99",
            name="FranCo Franchise",
            admins=[users.franchisee.email],
            stores=[Store("9", "Ogden")],
        ),
    ]


def default_orders(users: MockUsers, menu: List[MenuItem]) -> Dict[int, List[Dict[str, Any]]]:
    """Order history keyed by user id, most recent first."""
    return {
        users.diner.id: [
            {
                "id": "o-1",
                "franchiseId": "1",
                "storeId": "4",
                "date": "2026-02-01",
                "items": [
                    {"menuId": 0, "description": menu[0].title, "price": menu[0].price},
                    {"menuId": 1, "description": menu[1].title, "price": menu[1].price},
                ],
            }
        ]
    }
