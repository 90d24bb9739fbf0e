import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# ================= DEFAULTS =================

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://localhost:5175",
    "http://localhost:5176",
    "https://foodztrain-frontend-dq6o.vercel.app",
]


@dataclass
class Settings:
    """Everything the gateway needs from the environment, read once at start-up."""

    jwt_secret: str
    environment: str = "production"
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "trainfood"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7
    bcrypt_rounds: int = 10
    otp_ttl_minutes: int = 10
    reset_reveals_unknown_email: bool = False
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from: Optional[str] = None
    cors_allow_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    def __post_init__(self) -> None:
        if not self.jwt_secret:
            raise RuntimeError("JWT_SECRET is not configured")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            cors = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            cors = list(DEFAULT_CORS_ORIGINS)

        return cls(
            jwt_secret=_get("JWT_SECRET"),
            environment=os.getenv("APP_ENV", "production"),
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_db_name=os.getenv("MONGO_DB_NAME", "trainfood"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expire_minutes=_get_int("JWT_EXPIRE_MINUTES", default=60 * 24 * 7),
            bcrypt_rounds=_get_int("BCRYPT_ROUNDS", default=10),
            otp_ttl_minutes=_get_int("OTP_TTL_MINUTES", default=10),
            reset_reveals_unknown_email=_get_bool("RESET_REVEALS_UNKNOWN_EMAIL"),
            smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=_get_int("SMTP_PORT", default=587),
            smtp_user=os.getenv("SMTP_USER"),
            smtp_password=os.getenv("SMTP_PASS"),
            smtp_from=os.getenv("SMTP_FROM") or os.getenv("SMTP_USER"),
            cors_allow_origins=cors,
        )


def _get(key: str) -> str:
    value = os.getenv(key)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {key}")
    return value


def _get_int(key: str, default: Optional[int] = None) -> int:
    value = os.getenv(key)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing required environment variable: {key}")
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {key} must be an integer") from exc


def _get_bool(key: str) -> bool:
    return os.getenv(key, "false").strip().lower() in ("1", "true", "yes")
