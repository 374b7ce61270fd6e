# partnerhub/core/config.py
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, field_validator, model_validator
from pathlib import Path
from loguru import logger
from typing import Annotated, Any, Optional, List
import sys

# --- Constants ---
DEFAULT_DB_NAME = "partnerhub_db"

class Settings(BaseSettings):
    # --- Core App Settings ---
    APP_NAME: str = "PartnerHub Back Office"
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # --- CORS ---
    # Example: "http://localhost:3000,https://backoffice.example.com"
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(["*"], description="List of allowed CORS origins. Use '*' for dev ONLY.")

    # --- Database (MongoDB) ---
    # Multi-document transactions need a replica set or sharded cluster
    MONGODB_URI: str = Field(..., description="MongoDB connection string - REQUIRED")
    MONGO_DB_NAME: Optional[str] = None # Derived from URI if not set

    # --- Audit Log Settings ---
    AUDIT_LOG_ENABLED: bool = True
    AUDIT_LOG_MONGO_COLLECTION: str = "audit_logs"

    # --- Wallet / Ledger ---
    WALLET_SUMMARY_DOC_ID: str = "summary"
    DEFAULT_CURRENCY: str = "INR"

    # --- Human-readable code prefixes ---
    ENQUIRY_CODE_PREFIX: str = "ENQ-"
    CUSTOMER_CODE_PREFIX: str = "CD"
    PAYMENT_TXN_PREFIX: str = "PAY"

    # --- Rate limiting (public enquiry form) ---
    ENQUIRY_SUBMIT_RATE_LIMIT: str = "30/minute"

    # --- Local dev server ---
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = False

    model_config = SettingsConfigDict(
        env_file=str(Path.cwd() / ".env"), # Single .env file at the root
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator('ALLOWED_ORIGINS', mode='before')
    @classmethod
    def split_origins(cls, v: Any) -> Any:
        # Convert comma-separated origins to list
        if isinstance(v, str):
            return [o.strip() for o in v.split(',') if o.strip()]
        return v

    @model_validator(mode='after')
    def process_and_validate(self) -> 'Settings':
        # Derive DB name if needed
        if self.MONGO_DB_NAME is None and self.MONGODB_URI:
            db_name = self.MONGODB_URI.split('/')[-1].split('?')[0] if self.MONGODB_URI.count('/') >= 3 else ""
            self.MONGO_DB_NAME = db_name or DEFAULT_DB_NAME
            logger.info(f"Derived MONGO_DB_NAME: {self.MONGO_DB_NAME}")

        if not self.MONGODB_URI: raise ValueError("MONGODB_URI environment variable is required.")

        return self

# --- Global Settings Instance ---
try:
    settings = Settings()
    logger.info(f"Settings loaded for {settings.APP_NAME}")
    logger.info(f"Log Level: {settings.LOG_LEVEL}")
    logger.info(f"MongoDB DB: {settings.MONGO_DB_NAME}")
    logger.info(f"CORS Origins: {settings.ALLOWED_ORIGINS}")
    logger.info(f"Audit Log: {'Enabled' if settings.AUDIT_LOG_ENABLED else 'Disabled'}")
except ValueError as e:
    logger.critical(f"CONFIGURATION ERROR: {e}")
    sys.exit(f"Configuration Error: {e}")
