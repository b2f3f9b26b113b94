# backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

# Export .env into the process environment as well (alembic, uvicorn reload workers)
load_dotenv(env_path)

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    DATABASE_URL: str = "sqlite:///./inventory_ledger.db"

    # Extra CORS origin for the deployed frontend
    FRONTEND_URL: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    # Products at or below this stock are reported as low stock
    LOW_STOCK_THRESHOLD: int = 10

    # When false, goods-out entries leave product counters untouched
    GOODS_OUT_ADJUSTS_STOCK: bool = True

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

settings = Settings()
