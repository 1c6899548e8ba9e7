"""
Core configuration module for the Flights and Packages search service.
Settings come from environment variables (and .env) with sensible defaults.
"""

from pydantic_settings import BaseSettings
import logging

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # Application
    app_name: str = "Flights and Packages Search"
    app_version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False

    # Database (source catalog is owned by the storefront)
    database_url: str = "sqlite:///./flights_packages.db"
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_pool_recycle: int = 1800  # Recycle connections after 30 min
    database_pool_pre_ping: bool = True

    # API Configuration
    api_prefix: str = "/api"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 2

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # CORS - storefront origins (extend via .env)
    cors_origins: list = ["http://localhost:5000", "http://127.0.0.1:5000"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list = ["GET", "POST", "OPTIONS"]
    cors_allow_headers: list = ["Content-Type", "Accept", "X-API-Key"]

    # Text search
    search_fuzzy_threshold: float = 0.3
    search_default_max_results: int = 20
    search_max_results_limit: int = 100
    search_min_score: float = 0.1
    search_max_suggestions: int = 5
    search_min_query_length: int = 2

    # Holiday-type search
    holiday_search_max_results: int = 50

    # Keyword index
    keyword_index_build_on_startup: bool = True
    keyword_index_refresh_minutes: int = 0  # 0 = rebuild only on demand

    # Admin API key for the reindex endpoint (MUST be set via .env in production)
    admin_api_key: str = "CHANGE-ME-IN-DOTENV"

    # When True, endpoints return 503 if the DB is unavailable instead of
    # empty results.
    enforce_real_data: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
