import logging
from typing import Dict
from pydantic_settings import BaseSettings
from pydantic import model_validator

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Runtime settings stored in the server_settings table.
# Values are kept as strings; the type is inferred from the default.
DEFAULT_SETTINGS: Dict[str, str] = {
    "REGISTER_ENDPOINT_ENABLED": "true",
    "SALE_REGISTRATION_ENABLED": "true",
}


class Settings(BaseSettings):
    """
    Application settings.
    Values are loaded from environment variables and/or a .env file.
    """

    # Core FastAPI settings
    PROJECT_NAME: str = "Picture Token Market API"
    API_V1_STR: str = "/api"  # Consistent API prefix
    DEBUG: bool = False

    # JWT settings
    SECRET_KEY: str  # No default, must be set in environment
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day

    # Database settings
    DB_USER: str = "your_db_user"
    DB_PASSWORD: str = "your_db_password"
    DB_HOST: str = "localhost"
    DB_PORT: str = "3306"
    DB_NAME: str = "picture_market"
    SQLALCHEMY_DATABASE_URL: str | None = None  # Will be constructed

    # Database connection pool settings (ignored for SQLite)
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600  # In seconds
    DB_POOL_PRE_PING: bool = True
    DB_CONNECT_TIMEOUT: int = 10  # In seconds

    # CORS settings
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Pagination (first/last query parameters)
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Interval for reloading the server_settings table, 0 disables it
    SETTINGS_RELOAD_INTERVAL_SECONDS: int = 300

    @model_validator(mode='after')
    def assemble_db_connection(self) -> "Settings":
        if self.SQLALCHEMY_DATABASE_URL:
            return self
        parts = [self.DB_USER, self.DB_PASSWORD, self.DB_HOST, self.DB_PORT, self.DB_NAME]
        if all(parts):
            self.SQLALCHEMY_DATABASE_URL = (
                f"mysql+mysqlconnector://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return self

    class Config:
        env_file = ".env"  # Load .env file if present
        env_file_encoding = 'utf-8'
        case_sensitive = True  # Environment variable names are case-sensitive


# Instantiate settings
settings = Settings()

# Log essential settings on startup (never the credentials)
logger.info(f"Project Name: {settings.PROJECT_NAME}")
logger.info(f"API Prefix: {settings.API_V1_STR}")
logger.info(f"Debug Mode: {settings.DEBUG}")
if settings.SQLALCHEMY_DATABASE_URL:
    db_url_parts = settings.SQLALCHEMY_DATABASE_URL.split('@')
    logger.info(f"Database URL (host/db): {db_url_parts[1] if len(db_url_parts) > 1 else db_url_parts[0]}")
else:
    logger.info("Database URL: Not set or not all components provided")
logger.info(f"CORS Origins: {settings.CORS_ORIGINS}")
