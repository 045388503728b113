import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://127.0.0.1:8000/api")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./raza_session.db")
    SESSION_STORAGE_KEY: str = os.getenv("SESSION_STORAGE_KEY", "auth_user")
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "30"))
    # a discount larger than the line base yields a negative total unless clamped
    CLAMP_NEGATIVE_TOTALS: bool = os.getenv("CLAMP_NEGATIVE_TOTALS", "false").lower() in ("1", "true", "yes")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        extra = "ignore"

    def refresh(self):
        """Reload environment variables"""
        load_dotenv(override=True)
        return Settings()

settings = Settings()
