"""
Configuration loader utility for environment-specific settings.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional
from .settings import Settings, Environment

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file = Path(f".env.{env.value}")

        if env_file.exists():
            return Settings(_env_file=str(env_file), environment=env)

        logger.warning(f"Environment file {env_file} not found, using default settings")
        return Settings(environment=env)

    @staticmethod
    def get_available_environments() -> List[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            env_name = env_file.name.replace(".env.", "")
            if env_name.endswith(".sample"):
                continue
            env_files.append(env_name)
        return sorted(env_files)

    @staticmethod
    def validate_environment_config(environment: str) -> bool:
        """
        Validate that an environment configuration exists and is valid.

        Args:
            environment: Environment name to validate

        Returns:
            True if configuration is valid, False otherwise
        """
        try:
            env = Environment(environment.lower())
        except ValueError:
            return False

        if not Path(f".env.{env.value}").exists():
            return False

        try:
            settings = ConfigLoader.load_environment_config(environment)
        except ValueError as e:
            logger.error(f"Invalid configuration for {environment}: {e}")
            return False

        required_settings = [
            settings.app_name,
            settings.environment,
            settings.host,
            settings.port,
            settings.storage.data_dir,
        ]
        return all(setting is not None for setting in required_settings)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        defaults = Settings()

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
APP_NAME={defaults.app_name}
APP_VERSION={defaults.app_version}
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}

# Server Configuration
HOST={defaults.host}
PORT={defaults.port}
RELOAD={'true' if env == Environment.DEVELOPMENT else 'false'}
WORKERS=1

# Logging Configuration
LOG_LEVEL={defaults.log_level.value}
LOG_FORMAT={'text' if env == Environment.DEVELOPMENT else 'json'}

# Storage Configuration
STORAGE_DATA_DIR={defaults.storage.data_dir}
STORAGE_NEIGHBORHOODS_FILE={defaults.storage.neighborhoods_file}
STORAGE_UPLOADS_DIR={defaults.storage.uploads_dir}
STORAGE_MAX_UPLOAD_SIZE_MB={defaults.storage.max_upload_size_mb}

# Language Configuration
I18N_DEFAULT_LANGUAGE={defaults.i18n.default_language}
I18N_SUPPORTED_LANGUAGES={','.join(defaults.i18n.supported_languages)}

# Map Configuration
MAP_NEAR_RADIUS_KM={defaults.map.near_radius_km}
MAP_SIMPLIFY_TOLERANCE={defaults.map.simplify_tolerance}

# Security Configuration
SECURITY_CORS_ORIGINS=*
"""

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(sample_content)

        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
