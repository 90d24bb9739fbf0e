import pytest

from app.config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    for key in ("JWT_SECRET", "BCRYPT_ROUNDS", "OTP_TTL_MINUTES", "RESET_REVEALS_UNKNOWN_EMAIL",
                "CORS_ALLOW_ORIGINS", "APP_ENV", "SMTP_USER", "SMTP_PASS"):
        monkeypatch.delenv(key, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.setattr("app.config.load_dotenv", lambda: None)
    return monkeypatch


def test_missing_signing_secret_is_fatal(clean_env):
    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        Settings.from_env()


def test_empty_secret_is_fatal_when_built_directly():
    with pytest.raises(RuntimeError):
        Settings(jwt_secret="")


def test_defaults(clean_env):
    clean_env.setenv("JWT_SECRET", "s3cret")

    settings = Settings.from_env()

    assert settings.bcrypt_rounds == 10
    assert settings.otp_ttl_minutes == 10
    assert settings.reset_reveals_unknown_email is False
    assert settings.is_development is False
    assert settings.smtp_configured is False


def test_overrides(clean_env):
    clean_env.setenv("JWT_SECRET", "s3cret")
    clean_env.setenv("APP_ENV", "development")
    clean_env.setenv("RESET_REVEALS_UNKNOWN_EMAIL", "true")
    clean_env.setenv("CORS_ALLOW_ORIGINS", "https://a.example.com, https://b.example.com")

    settings = Settings.from_env()

    assert settings.is_development
    assert settings.reset_reveals_unknown_email
    assert settings.cors_allow_origins == ["https://a.example.com", "https://b.example.com"]


def test_non_integer_setting_is_fatal(clean_env):
    clean_env.setenv("JWT_SECRET", "s3cret")
    clean_env.setenv("BCRYPT_ROUNDS", "ten")

    with pytest.raises(RuntimeError, match="BCRYPT_ROUNDS"):
        Settings.from_env()
