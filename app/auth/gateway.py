import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from app.auth.crud import CredentialStore, PasswordHasher
from app.auth.registration import RegistrationGuard
from app.auth.reset import PasswordResetFlow
from app.auth.resolver import PrincipalResolver
from app.config import Settings
from utils.jwt import TokenIssuer
from utils.mailer import Mailer


@dataclass
class AuthGateway:
    """Components shared by the auth routes for the application's lifetime."""

    store: CredentialStore
    issuer: TokenIssuer
    resolver: PrincipalResolver
    registration: RegistrationGuard
    reset: PasswordResetFlow


def build_gateway(
    settings: Settings,
    db,
    mailer: Optional[Mailer] = None,
    logger: Optional[logging.Logger] = None,
    clock: Callable[[], datetime] = datetime.utcnow,
) -> AuthGateway:
    logger = logger or logging.getLogger("trainfood.auth")
    store = CredentialStore(db)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    issuer = TokenIssuer(settings)
    mailer = mailer or Mailer(settings, logger=logger.getChild("mail"))

    return AuthGateway(
        store=store,
        issuer=issuer,
        resolver=PrincipalResolver(store, hasher, logger=logger.getChild("resolver")),
        registration=RegistrationGuard(store, hasher, issuer, logger=logger.getChild("register")),
        reset=PasswordResetFlow(
            store, hasher, mailer, settings, logger=logger.getChild("reset"), clock=clock
        ),
    )
