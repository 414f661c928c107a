from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Unrelated keys in a shared .env are ignored
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "WrapCommand Quote Service"
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    RESEND_API_KEY: Optional[str] = None
    RESEND_API_URL: str = "https://api.resend.com/emails"
    QUOTE_FROM_EMAIL: str = "WePrintWraps <hello@weprintwraps.com>"
    DEFAULT_ORGANIZATION_ID: str = "51aa96db-c06d-41ae-b3cb-25b045c75caf"
    FOLLOWUP_OWNER: str = "alex_morgan"
    FOLLOWUP_HIGH_PRIORITY_THRESHOLD: float = 1500
    FOLLOWUP_DUE_DAYS: int = 2
    VEHICLE_SYNC_BATCH_SIZE: int = 200
    HTTP_TIMEOUT_SECONDS: float = 15.0
    LOG_DIR: str = "logs"
    LOG_FILE_NAME: str = "app.log"
    LOG_LEVEL: str = "INFO"
    LOG_MAX_BYTES: int = 2_000_000
    LOG_BACKUP_COUNT: int = 3

settings = Settings()
