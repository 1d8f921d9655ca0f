"""
Application settings using Pydantic BaseSettings.
"""

from typing import List, Optional, Union

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "Contractor Marketplace Scheduling Service"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    # API Configuration
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_PREFIX: str = "/api/v1"
    CORS_ORIGINS: Union[str, List[str]] = "*"

    # Database
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_ECHO: bool = False
    DATABASE_POOL_TIMEOUT: int = 30
    DATABASE_POOL_RECYCLE: int = 3600

    # Redis / Queue
    REDIS_URL: str = "redis://localhost:6379/0"
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/0"
    CELERY_TASK_REJECT_ON_WORKER_LOST: bool = True
    CELERY_TASK_TIME_LIMIT: int = 120
    CELERY_TASK_SOFT_TIME_LIMIT: int = 90
    CELERY_OFFER_TASK_TIME_LIMIT: int = 300  # staggered calls run for minutes

    # Scheduling
    SCHEDULING_TIMEZONE: str = "UTC"
    DEFAULT_PRIORITY: str = "NORMAL"
    HORIZON_DAYS_EMERGENCY: int = 1
    HORIZON_DAYS_URGENT: int = 2
    HORIZON_DAYS_NORMAL: int = 7
    HORIZON_DAYS_LOW: int = 14
    CANDIDATE_DURATION_MINUTES: int = 120
    DEFAULT_APPOINTMENT_MINUTES: int = 120
    MIN_APPOINTMENT_MINUTES: int = 60
    MAX_APPOINTMENT_MINUTES: int = 480
    MAX_CLAIM_ATTEMPTS: int = 3

    # Outbound offers
    MAX_OFFER_CALLS: int = 5
    OFFER_CALL_STAGGER_SECONDS: int = 30
    AUTO_DISPATCH_OFFERS: bool = True

    # Voice collaborator
    VOICE_API_BASE_URL: str = "https://api.vapi.ai"
    VOICE_API_KEY: Optional[str] = None
    VOICE_PHONE_NUMBER_ID: Optional[str] = None
    VOICE_JOB_OFFER_ASSISTANT_ID: Optional[str] = None
    VOICE_CUSTOMER_ASSISTANT_ID: Optional[str] = None
    VOICE_REQUEST_TIMEOUT: int = 15
    VOICE_MAX_RETRIES: int = 2
    DEFAULT_COUNTRY_CODE: str = "+1"

    # AI collaborator
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_REQUEST_TIMEOUT: int = 60
    ENRICHMENT_BATCH_SIZE: int = 5

    # Monitoring
    ENABLE_METRICS: bool = True
    HEALTH_CHECK_TIMEOUT: int = 5

    # Background Jobs
    OUTBOX_BATCH_SIZE: int = 50
    OUTBOX_MAX_RETRIES: int = 3
    CELERY_ENRICH_ISSUES_INTERVAL_SECONDS: int = 60
    CELERY_PROCESS_NOTIFICATIONS_INTERVAL_SECONDS: int = 30
    CELERY_CLEANUP_OUTBOX_EVENTS_INTERVAL_HOURS: int = 6
    OUTBOX_RETENTION_DAYS: int = 7

    # Development
    MOCK_VOICE: bool = False
    MOCK_ENRICHMENT: bool = False

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            if v == "*":
                return ["*"]
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, list):
            return v
        return ["*"]

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> str:
        if isinstance(v, str):
            return v
        # Build from individual components if DATABASE_URL is not provided
        user = info.data.get("POSTGRES_USER") or "marketplace"
        password = info.data.get("POSTGRES_PASSWORD") or "marketplace"
        host = info.data.get("POSTGRES_SERVER") or "localhost"
        db = info.data.get("POSTGRES_DB") or "marketplace"
        return f"postgresql+asyncpg://{user}:{password}@{host}:5432/{db}"

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ["development", "staging", "production", "test"]:
            raise ValueError(
                "Environment must be one of: development, staging, production, test"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("DEFAULT_PRIORITY")
    @classmethod
    def validate_default_priority(cls, v: str) -> str:
        if v.upper() not in ["EMERGENCY", "URGENT", "NORMAL", "LOW"]:
            raise ValueError("Default priority must be EMERGENCY, URGENT, NORMAL or LOW")
        return v.upper()

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}


# Global settings instance
settings = Settings()
