"""
Configuration settings for the SQCB tracker.
Load configuration from environment variables or a project-root .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_file = Path(__file__).parent.parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)


class Settings:
    """Application settings loaded from environment variables."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = Path(os.getenv('LOG_DIR', str(PROJECT_ROOT / 'logs')))

    # ============================================================================
    # SQCB API Configuration
    # ============================================================================
    SQCB_API_BASE_URL = os.getenv('SQCB_API_BASE_URL', 'https://attakan.pythonanywhere.com')
    SQCB_API_TOKEN = os.getenv('SQCB_API_TOKEN', '')
    SQCB_API_TIMEOUT = int(os.getenv('SQCB_API_TIMEOUT', '30'))
    SQCB_API_RETRY_ATTEMPTS = int(os.getenv('SQCB_API_RETRY_ATTEMPTS', '3'))
    SQCB_API_RETRY_DELAY = int(os.getenv('SQCB_API_RETRY_DELAY', '1'))

    # ============================================================================
    # Classification
    # ============================================================================
    # Labelled "6 working days" on the dashboard, counted as calendar days
    SQCB_TARGET_WINDOW_DAYS = int(os.getenv('SQCB_TARGET_WINDOW_DAYS', '6'))
    SQCB_DEFAULT_SITE = os.getenv('SQCB_DEFAULT_SITE', 'all')

    @classmethod
    def validate_required_settings(cls) -> list[str]:
        """
        Validate that all required settings are configured.
        Returns list of missing required settings.
        """
        missing = []

        if not cls.SQCB_API_BASE_URL:
            missing.append('SQCB_API_BASE_URL')

        return missing


# Create settings instance
settings = Settings()
