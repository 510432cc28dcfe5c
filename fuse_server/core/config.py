# fuse_server/core/config.py
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
import os
from typing import Annotated, Optional

from fastapi import Depends, Request

load_dotenv()

# Only symmetric MAC algorithms are accepted for access tokens
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class Settings(BaseSettings):
    # --- Application Settings ---
    app_name: str = "Fuse Workflows API"
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", 8080))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")  # comma separated

    # --- Database ---
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./fuse.db")
    # When DB_HOST is set the PostgreSQL URL is composed from the parts below
    db_host: Optional[str] = os.getenv("DB_HOST")
    db_port: int = int(os.getenv("DB_PORT", 5432))
    db_user: Optional[str] = os.getenv("DB_USER")
    db_password: Optional[str] = os.getenv("DB_PASSWORD")
    db_name: Optional[str] = os.getenv("DB_NAME")
    sql_echo: bool = False

    # --- Security & Auth ---
    jwt_secret_key: str = os.getenv("JWT_SECRET_KEY", "default_jwt_secret_key_change_me")
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))

    # --- AI suggestion service ---
    ai_service_url: Optional[str] = os.getenv("AI_SERVICE")
    ai_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("algorithm")
    @classmethod
    def check_algorithm(cls, value: str) -> str:
        if value not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported token algorithm {value!r}, expected one of {HMAC_ALGORITHMS}")
        return value

    @property
    def sqlalchemy_url(self) -> str:
        if self.db_host:
            return (
                f"postgresql+psycopg2://{self.db_user}:{self.db_password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )
        return self.database_url

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_settings)]
