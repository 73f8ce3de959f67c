"""
Application settings and configuration
"""

import os
from pathlib import Path
from dotenv import load_dotenv
from typing import Optional

from taskmaster.config.constants import (
    DEFAULT_DATA_PATH,
    DEFAULT_BACKUP_DIR,
    BACKUP_KEEP_COUNT,
)

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings:
    """Application settings loaded from environment variables"""
    
    # Storage
    DATA_PATH: str = os.getenv("TASKMASTER_DATA_PATH", DEFAULT_DATA_PATH)
    BACKUP_DIR: str = os.getenv("TASKMASTER_BACKUP_DIR", DEFAULT_BACKUP_DIR)
    BACKUP_KEEP_VALUE: str = os.getenv("TASKMASTER_BACKUP_KEEP", str(BACKUP_KEEP_COUNT))
    BACKUP_KEEP: int = BACKUP_KEEP_COUNT
    
    # Application
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE", None)
    
    @classmethod
    def validate(cls) -> bool:
        """Validate that settings have usable values"""
        if not cls.DATA_PATH:
            raise ValueError("TASKMASTER_DATA_PATH must not be empty")
        
        if not cls.BACKUP_DIR:
            raise ValueError("TASKMASTER_BACKUP_DIR must not be empty")
        
        try:
            backup_keep = int(cls.BACKUP_KEEP_VALUE)
        except ValueError:
            raise ValueError(
                f"TASKMASTER_BACKUP_KEEP must be an integer, got '{cls.BACKUP_KEEP_VALUE}'"
            ) from None
        
        if backup_keep < 1:
            raise ValueError(
                f"TASKMASTER_BACKUP_KEEP must be at least 1, got {backup_keep}"
            )
        cls.BACKUP_KEEP = backup_keep
        
        return True


# Global settings instance
settings = Settings()
