"""
Principal kinds the gateway can authenticate.

The set is closed: a login resolves to exactly one ``UserPrincipal`` or
``DeliveryAgentPrincipal``. ``SellerProfile`` is never a login principal on its
own; it is an optional enrichment joined onto a user whose role is ``seller``.
"""
from dataclasses import dataclass, replace
from typing import Optional, Union

CUSTOMER = "customer"
SELLER = "seller"
DELIVERY_AGENT = "deliveryAgent"
ADMIN = "admin"

TOKEN_ROLES = frozenset({CUSTOMER, SELLER, DELIVERY_AGENT, ADMIN})
REGISTRABLE_ROLES = frozenset({CUSTOMER, SELLER, DELIVERY_AGENT})


@dataclass(frozen=True)
class SellerProfile:
    restaurant_name: str
    station: str
    is_active: bool
    is_approved: bool

    @classmethod
    def from_document(cls, doc: dict) -> "SellerProfile":
        return cls(
            restaurant_name=doc.get("restaurantName"),
            station=doc.get("station"),
            is_active=doc.get("isActive", True),
            is_approved=doc.get("isApproved", False),
        )

    def public(self) -> dict:
        return {
            "restaurantName": self.restaurant_name,
            "station": self.station,
            "isActive": self.is_active,
            "isApproved": self.is_approved,
        }


@dataclass(frozen=True)
class UserPrincipal:
    id: str
    name: str
    email: str
    role: str
    seller: Optional[SellerProfile] = None

    @classmethod
    def from_document(cls, doc: dict) -> "UserPrincipal":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name"),
            email=doc.get("email"),
            role=doc.get("role", CUSTOMER),
        )

    def with_seller(self, profile: SellerProfile) -> "UserPrincipal":
        return replace(self, seller=profile)

    def public(self) -> dict:
        data = {"id": self.id, "name": self.name, "email": self.email, "role": self.role}
        if self.seller is not None:
            data.update(self.seller.public())
        return data


@dataclass(frozen=True)
class DeliveryAgentPrincipal:
    id: str
    name: str
    email: str
    role: str = DELIVERY_AGENT

    @classmethod
    def from_document(cls, doc: dict) -> "DeliveryAgentPrincipal":
        return cls(id=str(doc["_id"]), name=doc.get("name"), email=doc.get("email"))

    def public(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role}


Principal = Union[UserPrincipal, DeliveryAgentPrincipal]
