import os
import yaml

ROOT_PATH = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_FILE_PATH = os.environ.get("GREENLIGHT_CONFIG", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _secret(value) -> bytes:
    if isinstance(value, bytes):
        return value
    return str(value).encode("utf-8")


class ApplicationConfig:
    VERSION = data.get("VERSION", "1.0.0")
    ENVIRONMENT = data.get("ENVIRONMENT", "development")

    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./greenlight.db")
    DB_TIMEOUT_SECONDS = float(data.get("DB_TIMEOUT_SECONDS", 3))

    API_PREFIX = data.get("API_PREFIX", "/v1")
    API_PORT = data.get("API_PORT", 4000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Session tokens (stateless, HS256). Loaded once; never logged.
    JWT_SECRET = _secret(
        data.get("JWT_SECRET", "dev-secret-key-change-in-production-0123456789")
    )
    JWT_ISSUER = data.get("JWT_ISSUER", "greenlight.local")
    JWT_AUDIENCE = data.get("JWT_AUDIENCE", "greenlight.local")
    SESSION_TOKEN_TTL_HOURS = float(data.get("SESSION_TOKEN_TTL_HOURS", 24))

    # Credential hashing
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))

    # Opaque tokens
    ACTIVATION_TOKEN_TTL_HOURS = float(data.get("ACTIVATION_TOKEN_TTL_HOURS", 72))
    PASSWORD_RESET_TOKEN_TTL_HOURS = float(data.get("PASSWORD_RESET_TOKEN_TTL_HOURS", 24))

    # Mail delivery
    SMTP_HOST = data.get("SMTP_HOST", "localhost")
    SMTP_PORT = int(data.get("SMTP_PORT", 25))
    SMTP_USERNAME = data.get("SMTP_USERNAME", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_SENDER = data.get("SMTP_SENDER", "Greenlight <no-reply@greenlight.local>")
    SMTP_TIMEOUT_SECONDS = float(data.get("SMTP_TIMEOUT_SECONDS", 5))
    SMTP_STARTTLS = bool(data.get("SMTP_STARTTLS", False))

    BACKGROUND_MAX_CONCURRENCY = int(data.get("BACKGROUND_MAX_CONCURRENCY", 8))
