import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from app.auth.crud import CredentialStore, PasswordHasher
from app.auth.errors import ConflictError, ValidationError
from app.auth.principals import (
    CUSTOMER,
    DELIVERY_AGENT,
    REGISTRABLE_ROLES,
    SELLER,
    DeliveryAgentPrincipal,
    Principal,
    SellerProfile,
    UserPrincipal,
)
from app.auth.validation import EMAIL_REGEX, MIN_PASSWORD_LENGTH, sanitize_email
from utils.jwt import TokenIssuer

MIN_NAME_LENGTH = 2


@dataclass(frozen=True)
class Registration:
    principal: Principal
    role: str
    token: str
    message: str


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        value = value.strip()
    return value or None


def validate_registration(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check a registration payload and return it normalized.

    Only the structural email pattern applies here; the login-time domain
    allow-list is deliberately not re-applied.
    """
    name = _text(data.get("name"))
    email = sanitize_email(_text(data.get("email")))
    password = _text(data.get("password"))
    role = _text(data.get("role")) or CUSTOMER

    if not name or not email or not password:
        raise ValidationError("Name, email, and password are required")
    if not all(isinstance(v, str) for v in (name, email, password)):
        raise ValidationError("Name, email, and password must be text")

    if len(name) < MIN_NAME_LENGTH:
        raise ValidationError(f"Name must be at least {MIN_NAME_LENGTH} characters", field="name")

    if not EMAIL_REGEX.match(email):
        raise ValidationError("Invalid email format", field="email")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )

    if role not in REGISTRABLE_ROLES:
        raise ValidationError("Invalid role", field="role")

    cleaned = {"name": name, "email": email, "password": password, "role": role}

    if role == SELLER:
        restaurant_name = _text(data.get("restaurantName"))
        station = _text(data.get("station"))
        if not restaurant_name or not station:
            raise ValidationError("Restaurant name and station are required for sellers")
        cleaned.update(restaurantName=restaurant_name, station=station)

    if role == DELIVERY_AGENT:
        cleaned["phone"] = _text(data.get("phone"))

    return cleaned


class RegistrationGuard:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.logger = logger or logging.getLogger(__name__)

    async def register(self, data: Mapping[str, Any]) -> Registration:
        cleaned = validate_registration(data)
        if cleaned["role"] == DELIVERY_AGENT:
            return await self._register_delivery_agent(cleaned)
        return await self._register_user(cleaned)

    async def _register_delivery_agent(self, data: Dict[str, Any]) -> Registration:
        if await self.store.deliveries.find_by_email(data["email"]):
            raise ConflictError(self.store.deliveries.duplicate_message)

        doc = await self.store.deliveries.create({
            "name": data["name"],
            "email": data["email"],
            "passwordHash": await self.hasher.hash(data["password"]),
            "phone": data.get("phone"),
            "isAvailable": False,
        })

        agent = DeliveryAgentPrincipal.from_document(doc)
        self.logger.info("Registered delivery agent %s", agent.id)
        return Registration(
            principal=agent,
            role=DELIVERY_AGENT,
            token=self.issuer.issue(agent, DELIVERY_AGENT),
            message="Delivery agent registered successfully",
        )

    async def _register_user(self, data: Dict[str, Any]) -> Registration:
        if await self.store.users.find_by_email(data["email"]):
            raise ConflictError(self.store.users.duplicate_message)

        doc = await self.store.users.create({
            "name": data["name"],
            "email": data["email"],
            "passwordHash": await self.hasher.hash(data["password"]),
            "role": data["role"],
        })
        user = UserPrincipal.from_document(doc)

        if user.role == SELLER:
            user = user.with_seller(await self._create_seller_profile(doc, data))

        self.logger.info("Registered %s %s", user.role, user.id)
        return Registration(
            principal=user,
            role=user.role,
            token=self.issuer.issue(user, user.role),
            message="Registration successful",
        )

    async def _create_seller_profile(self, user_doc: dict, data: Dict[str, Any]) -> SellerProfile:
        # The user and the profile are two writes; undo the first if the second fails.
        try:
            profile = await self.store.sellers.create({
                "userId": user_doc["_id"],
                "name": data["name"],
                "email": data["email"],
                "restaurantName": data["restaurantName"],
                "station": data["station"],
                "isActive": True,
                "isApproved": False,
            })
        except Exception:
            self.logger.error(
                "Seller profile creation failed, removing user %s", user_doc["_id"], exc_info=True
            )
            await self.store.users.delete(user_doc["_id"])
            raise
        return SellerProfile.from_document(profile)
