from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- DB ---
    DATABASE_URL: str = "sqlite:///./tournament.sqlite"

    # --- Sessions ---
    SESSION_SECRET: str = "change-me-session-secret"
    SESSION_ALG: str = "HS256"
    SESSION_EXPIRE_MIN: int = 1440  # 24 horas
    SESSION_COOKIE_NAME: str = "tournament-session"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_BACKEND: str = "sql"  # "sql" | "memory"

    # --- Uploads ---
    UPLOAD_DIR: str = "./uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    ALLOWED_PROOF_EXTENSIONS: list[str] = [".jpg", ".jpeg", ".png", ".gif", ".webp", ".pdf"]

    # --- Torneo ---
    MAX_TEAM_MEMBERS: int = 5
    REGISTRATION_OPEN_ON_BOOT: Optional[bool] = None

    # --- Admin inicial (rotar en cuanto se despliegue) ---
    DEFAULT_ADMIN_EMAIL: str = "admin@tournament.com"
    DEFAULT_ADMIN_PASSWORD: str = "admin123!"

    # --- Rate limit (por IP) ---
    RATE_LIMIT_ENABLED: bool = True
    SIGNUP_RATE_LIMIT: str = "5/15minutes"

    LOG_LEVEL: str = "INFO"

    # --- Servidor ---
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Le dice a Pydantic que lea del archivo .env
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Instancia global para importar en el resto del proyecto
settings = Settings()
