from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_KEY: str = ""
    ORDERS_TABLE: str = "orders"

    REDIS_URL: str = "redis://localhost:6379"

    # "push" listens on Redis pub/sub, "poll" re-reads the order store
    ORDER_UPDATES_TRANSPORT: str = "push"
    ORDER_POLL_SECONDS: float = 5.0

    SUPPORT_EMAIL: str = "customercontact@bhopalbazaar.com"
    SUPPORT_PHONE: Optional[str] = None

    RESEND_API_KEY: str = ""
    FEEDBACK_FROM_EMAIL: str = "noreply@bhopalbazaar.com"

    DISPLAY_TIMEZONE: str = "Asia/Kolkata"

    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
