"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for development and static production builds.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any, List, Literal
from enum import Enum
from pathlib import Path


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StorageSettings(BaseSettings):
    """Flat JSON file locations"""

    data_dir: str = Field(default="public/data", description="Directory holding all JSON data files")
    pois_subdir: str = Field(default="pois")
    bundle_file: str = Field(default="all-pois.json", description="Compiled POI bundle used by static builds")
    neighborhoods_file: str = Field(default="graetzl_wien2025.json")
    categories_file: str = Field(default="categories.json")
    tags_file: str = Field(default="tags.json")
    lists_file: str = Field(default="lists.json")
    walkthroughs_file: str = Field(default="walkthroughs.json")

    uploads_dir: str = Field(default="public/uploads")
    uploads_url_prefix: str = Field(default="/uploads")
    max_upload_size_mb: int = Field(default=10, ge=1, le=100)
    dist_dir: str = Field(default="dist")

    def data_path(self, name: str) -> Path:
        return Path(self.data_dir) / name

    @property
    def pois_dir(self) -> Path:
        return self.data_path(self.pois_subdir)

    @property
    def bundle_path(self) -> Path:
        return self.data_path(self.bundle_file)

    @property
    def neighborhoods_path(self) -> Path:
        return self.data_path(self.neighborhoods_file)

    model_config = {"env_prefix": "STORAGE_"}


class I18nSettings(BaseSettings):
    """Language configuration"""

    default_language: str = Field(default="de")
    supported_languages: List[str] = Field(default_factory=lambda: ["de", "en"])

    @field_validator('supported_languages', mode='before')
    @classmethod
    def parse_languages(cls, v):
        """Parse languages from a comma separated environment variable"""
        if isinstance(v, str):
            return [lang.strip().lower() for lang in v.split(",") if lang.strip()]
        return v

    model_config = {"env_prefix": "I18N_"}


class MapSettings(BaseSettings):
    """Map defaults and geometry tuning"""

    # GeoJSON order: [lng, lat]
    default_center: List[float] = Field(default_factory=lambda: [16.3738, 48.2082])
    default_zoom: int = Field(default=14, ge=1, le=19)
    near_radius_km: float = Field(default=0.5, gt=0.0, le=50.0)
    simplify_tolerance: float = Field(default=0.0001, gt=0.0)
    simplify_min_nodes: int = Field(default=20, ge=4)

    model_config = {"env_prefix": "MAP_"}


class SecuritySettings(BaseSettings):
    """CORS configuration"""

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or list"""
        if isinstance(v, str):
            origin_list = v.split(",")
            return [origin.strip() for origin in origin_list if origin.strip()]
        return v or ["*"]

    model_config = {"env_prefix": "SECURITY_"}


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="Grätzlmap")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4321, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: Literal["json", "text"] = Field(default="json")
    log_line_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    log_file: Optional[str] = Field(default=None)

    # Nested Settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    i18n: I18nSettings = Field(default_factory=I18nSettings)
    map: MapSettings = Field(default_factory=MapSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def serves_cms_api(self) -> bool:
        """Production is the static build: CMS and CRUD routes are not served"""
        return not self.is_production()

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
