# backend/app/auth/deps.py
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.errors import AuthenticationError
from app.auth.gateway import AuthGateway
from app.auth.principals import DELIVERY_AGENT, DeliveryAgentPrincipal, Principal, UserPrincipal

security = HTTPBearer(auto_error=False)


def get_gateway(request: Request) -> AuthGateway:
    return request.app.state.gateway


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    gateway: AuthGateway = Depends(get_gateway),
) -> Principal:
    if credentials is None:
        raise AuthenticationError("Invalid token")

    payload = gateway.issuer.decode(credentials.credentials)

    if payload["role"] == DELIVERY_AGENT:
        doc = await gateway.store.deliveries.find_by_id(payload["sub"])
        if doc:
            return DeliveryAgentPrincipal.from_document(doc)
    else:
        doc = await gateway.store.users.find_by_id(payload["sub"])
        if doc:
            return UserPrincipal.from_document(doc)

    raise AuthenticationError("Invalid token")
