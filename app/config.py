"""
Configuration management for the KPI Dashboard backend
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "KPI Dashboard"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = True

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    frontend_url: str = "http://localhost:3000"  # CORS origin for the dashboard UI

    # Google Analytics 4
    ga4_property_id: str = ""
    ga4_credentials_path: str = "./credentials/ga4-credentials.json"

    # Dashboard queries
    job_page_keyword: str = "job"  # pagePath substring for the job pages list
    top_entries_limit: int = 5  # traffic sources, top pages, top job pages
    category_sample_limit: int = 100  # page paths sampled for the category rollup

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
