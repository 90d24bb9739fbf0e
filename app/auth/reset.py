"""
OTP based password reset.

Per user, keyed by email::

    no pending reset -> OTP issued (expires after ``otp_ttl_minutes``)
                     -> consumed | expired | superseded

The ticket lives on the user document itself (``resetOtp`` + ``otpExpire``),
so a user has at most one outstanding reset and a new request supersedes the
previous one. A ticket is usable only while its value matches AND the clock
is before its expiry. Consuming it is one guarded update that writes the new
hash and removes both ticket fields together.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from app.auth.crud import CredentialStore, PasswordHasher
from app.auth.errors import NotFoundError, ResetError, ValidationError
from app.auth.validation import sanitize_email, validate_email, validate_password
from app.config import Settings
from utils.mailer import Mailer

UNIFORM_REQUEST_MESSAGE = "If an account exists for this email, an OTP has been sent"
OTP_SENT_MESSAGE = "OTP sent to your email"
RESET_DONE_MESSAGE = "Password reset successful"
OTP_SUBJECT = "Password Reset OTP"


def generate_otp() -> str:
    return str(100000 + secrets.randbelow(900000))


def _otp_matches(stored: Any, supplied: str) -> bool:
    if not isinstance(stored, str) or not stored:
        return False
    return secrets.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))


class PasswordResetFlow:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        mailer: Mailer,
        settings: Settings,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.hasher = hasher
        self.mailer = mailer
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock

    async def request_reset(self, raw_email: Any) -> str:
        email = sanitize_email(raw_email)
        check = validate_email(email)
        if not check.is_valid:
            raise ValidationError(check.error, field="email")

        doc = await self.store.users.find_by_email(email)
        if doc is None:
            if self.settings.reset_reveals_unknown_email:
                raise NotFoundError("User not found")
            self.logger.info("Password reset requested for an unknown email")
            return UNIFORM_REQUEST_MESSAGE

        ttl = self.settings.otp_ttl_minutes
        otp = generate_otp()
        await self.store.users.save(
            doc["_id"],
            {"resetOtp": otp, "otpExpire": self.clock() + timedelta(minutes=ttl)},
        )
        await self.mailer.send(email, OTP_SUBJECT, f"Your OTP is: {otp}. Valid for {ttl} minutes.")
        self.logger.info("Issued password reset OTP for user %s", doc["_id"])

        if self.settings.reset_reveals_unknown_email:
            return OTP_SENT_MESSAGE
        return UNIFORM_REQUEST_MESSAGE

    async def confirm_reset(self, raw_email: Any, raw_otp: Any, raw_password: Any) -> str:
        if not raw_email or not raw_otp or not raw_password:
            raise ValidationError("Email, OTP, and new password are required")

        email = sanitize_email(raw_email)
        otp = str(raw_otp).strip()
        new_password = raw_password.strip() if isinstance(raw_password, str) else raw_password

        check = validate_password(new_password)
        if not check.is_valid:
            raise ValidationError(check.error, field="newPassword")

        doc = await self.store.users.find_by_email(email)
        if doc is None:
            if self.settings.reset_reveals_unknown_email:
                raise NotFoundError("User not found")
            raise ResetError()

        expires_at = doc.get("otpExpire")
        if not _otp_matches(doc.get("resetOtp"), otp) or expires_at is None:
            raise ResetError()
        if self.clock() >= expires_at:
            raise ResetError()

        consumed = await self.store.users.save(
            doc["_id"],
            {"passwordHash": await self.hasher.hash(new_password)},
            unset_fields=("resetOtp", "otpExpire"),
            guard={"resetOtp": doc["resetOtp"], "otpExpire": expires_at},
        )
        if not consumed:
            # consumed or superseded by a concurrent request
            raise ResetError()

        self.logger.info("Password reset completed for user %s", doc["_id"])
        return RESET_DONE_MESSAGE
