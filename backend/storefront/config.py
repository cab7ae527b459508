from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    RESET_DB: bool = False
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    FRONTEND_ORIGINS: List[str] = ["http://localhost:5173"]

    # stand-in for the hosted auth session guarding /api/admin
    ADMIN_TOKEN: str = "change-this-admin-token"
    ADMIN_EMAIL: str = "admin@example.com"

    # EmailJS; the mock notifier is used while SERVICE_ID is unset
    EMAILJS_API_URL: str = "https://api.emailjs.com/api/v1.0/email/send"
    EMAILJS_SERVICE_ID: Optional[str] = None
    EMAILJS_PUBLIC_KEY: Optional[str] = None
    EMAILJS_TEMPLATE_ID_BUYER: str = "template_buyer"
    EMAILJS_TEMPLATE_ID_ADMIN: str = "template_admin"
    NOTIFY_TIMEOUT_SECONDS: float = 10.0

    # carts kept in memory; older ones reload from the db on next access
    MAX_CARTS_IN_MEMORY: int = 1000

    FREE_SHIPPING_THRESHOLD: float = 999
    SHIPPING_COST: float = 99
    DEFAULT_COUNTRY: str = "India"

    MEDIA_DIR: str = "./media"
    MEDIA_URL: str = "/media"

    ENABLE_SCHEDULER: bool = True
    ADMIN_POLL_SECONDS: int = 30

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
