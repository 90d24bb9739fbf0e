from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.auth.errors import AuthenticationError
from app.auth.principals import TOKEN_ROLES, Principal
from app.config import Settings

# =========================
# TOKEN ISSUER
# =========================


class TokenIssuer:
    """
    Mints and checks HS256 bearer tokens carrying ``{sub, role}``.

    Tokens are never stored; verification is stateless. A missing signing
    secret is rejected when ``Settings`` is built, so issuing cannot fail on
    configuration at request time.
    """

    def __init__(self, settings: Settings):
        self.secret_key = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.expire_minutes = settings.jwt_expire_minutes

    def issue(self, principal: Principal, role: str, now: Optional[datetime] = None) -> str:
        if role not in TOKEN_ROLES:
            raise ValueError(f"Cannot issue a token for role {role!r}")

        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": principal.id,
            "role": role,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    # =========================
    # TOKEN DECODE
    # =========================

    def decode(self, token: str) -> dict:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            raise AuthenticationError("Invalid token") from exc

        if not payload.get("sub") or payload.get("role") not in TOKEN_ROLES:
            raise AuthenticationError("Invalid token")
        return payload
