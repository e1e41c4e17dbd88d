import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # memory | redis
    CACHE_BACKEND = data.get("CACHE_BACKEND", "memory")

    # Access tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = data.get("JWT_ISSUER", "identity-service")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(data.get("ACCESS_TOKEN_EXPIRE_MINUTES", 15))
    REFRESH_TOKEN_EXPIRE_DAYS = int(data.get("REFRESH_TOKEN_EXPIRE_DAYS", 7))

    # One-time codes
    OTP_LENGTH = int(data.get("OTP_LENGTH", 6))
    OTP_EXPIRATION_MINUTES = int(data.get("OTP_EXPIRATION_MINUTES", 5))
    OTP_MAX_ATTEMPTS = int(data.get("OTP_MAX_ATTEMPTS", 3))
    OTP_RATE_LIMIT_MINUTES = int(data.get("OTP_RATE_LIMIT_MINUTES", 1))
    PHONE_OTP_PENDING_MINUTES = int(data.get("PHONE_OTP_PENDING_MINUTES", 10))
    EXTERNAL_CALL_TIMEOUT_SECONDS = float(data.get("EXTERNAL_CALL_TIMEOUT_SECONDS", 10))

    # stub | twilio
    OTP_PROVIDER = data.get("OTP_PROVIDER", "stub")
    STUB_OTP_CODE = str(data.get("STUB_OTP_CODE", "123456"))
    TWILIO_ACCOUNT_SID = data.get("TWILIO_ACCOUNT_SID", "")
    TWILIO_AUTH_TOKEN = data.get("TWILIO_AUTH_TOKEN", "")
    TWILIO_VERIFY_SERVICE_SID = data.get("TWILIO_VERIFY_SERVICE_SID", "")

    # Federated login; empty disables it
    GOOGLE_CLIENT_IDS = data.get("GOOGLE_CLIENT_IDS", [])

    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
