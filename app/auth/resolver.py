"""
Login resolution across the principal stores.

Lookups run strictly in order and stop at the first one that decides:

1. delivery agents, authenticated only when the delivery password matches,
   otherwise the attempt falls through;
2. users, where a missing account and a wrong password are rejected with the
   same generic reason;
3. seller enrichment for users whose role is ``seller``, best effort only.
"""
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Mapping, Optional, Tuple, Union

from app.auth.crud import CredentialStore, PasswordHasher
from app.auth.errors import INVALID_CREDENTIALS
from app.auth.principals import (
    DELIVERY_AGENT,
    SELLER,
    DeliveryAgentPrincipal,
    Principal,
    SellerProfile,
    UserPrincipal,
)


@dataclass(frozen=True)
class Authenticated:
    principal: Principal
    role: str


@dataclass(frozen=True)
class Rejected:
    reason: str = INVALID_CREDENTIALS


AuthOutcome = Union[Authenticated, Rejected]

Lookup = Callable[[str, str], Awaitable[Optional[AuthOutcome]]]


class PrincipalResolver:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.hasher = hasher
        self.logger = logger or logging.getLogger(__name__)
        self.lookups: Tuple[Lookup, ...] = (self._try_delivery_agent, self._try_user)

    async def resolve_login(self, credentials: Mapping[str, str]) -> AuthOutcome:
        """Resolve sanitized, already-validated credentials to one principal."""
        email = credentials["email"]
        password = credentials["password"]

        for lookup in self.lookups:
            outcome = await lookup(email, password)
            if outcome is not None:
                return outcome

        return Rejected()

    async def _try_delivery_agent(self, email: str, password: str) -> Optional[AuthOutcome]:
        doc = await self.store.deliveries.find_by_email(email)
        if doc is None:
            return None
        if not await self.hasher.verify(password, doc.get("passwordHash")):
            return None
        return Authenticated(DeliveryAgentPrincipal.from_document(doc), DELIVERY_AGENT)

    async def _try_user(self, email: str, password: str) -> Optional[AuthOutcome]:
        doc = await self.store.users.find_by_email(email)
        if doc is None:
            # keep response time close to the wrong-password path
            await self.hasher.dummy_verify()
            return Rejected()

        if not await self.hasher.verify(password, doc.get("passwordHash")):
            return Rejected()

        user = UserPrincipal.from_document(doc)
        if user.role == SELLER:
            user = await self._enrich_seller(user)
        return Authenticated(user, user.role)

    async def _enrich_seller(self, user: UserPrincipal) -> UserPrincipal:
        try:
            doc = await self.store.sellers.find_by_email(user.email)
        except Exception:
            self.logger.warning("Seller profile lookup failed for user %s", user.id, exc_info=True)
            return user

        if doc is None:
            self.logger.warning("Seller %s has no seller profile", user.id)
            return user
        return user.with_seller(SellerProfile.from_document(doc))
