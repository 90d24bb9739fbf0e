import logging

from fastapi import APIRouter, Depends

from app.auth.deps import get_current_principal, get_gateway
from app.auth.errors import AuthenticationError
from app.auth.gateway import AuthGateway
from app.auth.models import (
    AuthResponse,
    ForgetPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    VerifyResponse,
)
from app.auth.principals import Principal
from app.auth.resolver import Rejected
from app.auth.validation import comprehensive_login_validation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

# =========================
# REGISTER
# =========================

@router.post(
    "/register",
    status_code=201,
    response_model=RegisterResponse,
    response_model_exclude_none=True,
)
async def register(data: RegisterRequest, gateway: AuthGateway = Depends(get_gateway)):
    result = await gateway.registration.register(data.model_dump())
    return {
        "message": result.message,
        "token": result.token,
        "user": result.principal.public(),
    }


# =========================
# LOGIN
# =========================

@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
async def login(data: LoginRequest, gateway: AuthGateway = Depends(get_gateway)):
    validation = comprehensive_login_validation(data.model_dump())
    validation.raise_for_error()

    if validation.security_checks["isCommonPassword"]:
        logger.info("Login attempt with a common password")

    outcome = await gateway.resolver.resolve_login(validation.sanitized_data)
    if isinstance(outcome, Rejected):
        raise AuthenticationError(outcome.reason, timestamp=validation.timestamp)

    return {
        "token": gateway.issuer.issue(outcome.principal, outcome.role),
        "user": outcome.principal.public(),
    }


# =========================
# PASSWORD RESET
# =========================

@router.post("/forget-password", response_model=MessageResponse)
async def forget_password(data: ForgetPasswordRequest, gateway: AuthGateway = Depends(get_gateway)):
    message = await gateway.reset.request_reset(data.email)
    return {"message": message}


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(data: ResetPasswordRequest, gateway: AuthGateway = Depends(get_gateway)):
    message = await gateway.reset.confirm_reset(data.email, data.otp, data.newPassword)
    return {"message": message}


# =========================
# TOKEN CHECK
# =========================

@router.get("/verify", response_model=VerifyResponse, response_model_exclude_none=True)
async def verify(principal: Principal = Depends(get_current_principal)):
    return {"user": principal.public()}
