"""
Application configuration settings.
Loads from .env file first (overrides shell env for local dev), then pydantic reads from environment.
Production: set env vars in the platform (Docker, K8s, etc.); .env is optional.

All backend-related configs and constants are centralized here.
"""
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env path: backend/.env (absolute path, works regardless of cwd)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = (_BASE_DIR / ".env").resolve()

# Load .env into environment BEFORE pydantic reads.
# When .env doesn't exist (prod), this is a no-op; platform env vars are used.
if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE, override=True)


class Settings(BaseSettings):
    """Application settings. Source: env vars (after dotenv load)."""

    # App
    app_name: str = "Freelance Marketplace"
    app_version: str = "1.0.0"
    port: int = 4000

    # Database
    database_url: str = "sqlite:///./marketplace.db"

    # Auth
    jwt_secret: str = "dev-secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7
    password_hash_rounds: int = 10

    # Password reset (one-time code)
    otp_expire_minutes: int = 5

    # Admin
    admin_bootstrap_token: str = ""
    admin_email: str = ""
    admin_password: str = ""
    admin_name: str = ""

    # Mail (SMTP)
    mail_service: str = ""
    mail_user: str = ""
    mail_pass: str = ""
    mail_from: str = ""
    mail_host: str = "smtp.gmail.com"
    mail_port: int = 465
    mail_secure: bool = True
    mail_timeout: int = 20

    # Redis
    redis_url: str = ""

    # Cache TTLs (seconds)
    employer_dashboard_cache_ttl: int = 120
    employer_dashboard_recent_limit: int = 5

    # Applications: accepting one application declines the other open ones
    auto_decline_on_accept: bool = False

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


# --- Constants (non-env, business config) ---

# Gmail is the only named mail service the mailer knows how to resolve
MAIL_SERVICE_HOSTS: dict[str, str] = {
    "gmail": "smtp.gmail.com",
}
