import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./notemitra.db")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    API_PORT = data.get("API_PORT", 5000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", ["http://localhost:3000"])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_REFRESH_SECRET = data.get("JWT_REFRESH_SECRET", "dev-refresh-secret-change-in-production")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(data.get("ACCESS_TOKEN_EXPIRE_MINUTES", 15))
    REFRESH_TOKEN_EXPIRE_DAYS = int(data.get("REFRESH_TOKEN_EXPIRE_DAYS", 7))
    PASSWORD_RESET_EXPIRE_MINUTES = int(data.get("PASSWORD_RESET_EXPIRE_MINUTES", 15))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))

    ALLOWED_EMAIL_DOMAIN = data.get("ALLOWED_EMAIL_DOMAIN", "mictech.edu.in")
    FRONTEND_URL = data.get("FRONTEND_URL", "http://localhost:3000")

    # Mail transport; without SMTP_USER/SMTP_PASS emails are logged instead of sent
    SMTP_HOST = data.get("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_SECURE = bool(data.get("SMTP_SECURE", False))
    SMTP_USER = data.get("SMTP_USER", "")
    SMTP_PASS = data.get("SMTP_PASS", "")
    SMTP_TIMEOUT = int(data.get("SMTP_TIMEOUT", 15))
    MAIL_FROM_NAME = data.get("MAIL_FROM_NAME", "NoteMitra")

    # Background maintenance
    RATE_LIMIT_SWEEP_SECONDS = int(data.get("RATE_LIMIT_SWEEP_SECONDS", 60))
    TOKEN_PURGE_SECONDS = int(data.get("TOKEN_PURGE_SECONDS", 3600))
