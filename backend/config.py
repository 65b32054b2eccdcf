# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./appliance_store.db"

    # Admin token signing
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ADMIN_TOKEN_EXPIRE_MINUTES: int = 24 * 60

    # Single back-office account
    ADMIN_USERNAME: str = "knet"
    ADMIN_PASSWORD: str = "root"

    FRONTEND_URL: Optional[str] = None

    # Image assets
    UPLOAD_DIR: str = "static/uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024

    # Checkout pricing, whole KES
    FREE_SHIPPING_THRESHOLD: int = 20000
    SHIPPING_FEE: int = 150

    CART_COOKIE_NAME: str = "cart_id"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
