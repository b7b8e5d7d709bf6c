"""
Configuration management for Frame Studio
Loads settings from YAML files with environment variable overrides
"""

import os
import yaml
from pathlib import Path
from typing import Dict, List
from pydantic import BaseModel, Field
from loguru import logger


class AppConfig(BaseModel):
    """Main application configuration"""

    # Flask settings
    SECRET_KEY: str = Field(default_factory=lambda: os.urandom(24).hex())
    FLASK_ENV: str = "development"
    DEBUG: bool = True

    # Paths
    TEMP_FOLDER: str = "tmp"
    CATALOG_FILE: str = "config/catalog.yaml"
    TEXTURE_DIR: str = "assets/textures"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    # Uploads
    MAX_UPLOAD_SIZE: int = 20 * 1024 * 1024  # 20MB
    ALLOWED_EXTENSIONS: List[str] = [".jpg", ".jpeg", ".png", ".webp", ".tif", ".tiff"]

    # Preview rendering
    PREVIEW_CANVAS_WIDTH: int = Field(default=400, ge=1)
    PREVIEW_CANVAS_HEIGHT: int = Field(default=400, ge=1)
    PX_PER_INCH_DISPLAY: float = 20.0
    FRAME_FILL_RATIO: float = Field(default=0.8, gt=0, le=1)
    PREVIEW_DEBOUNCE_MS: int = Field(default=150, ge=0)
    TEXTURE_SEED: int = 1337


def load_yaml_config(file_path: str) -> Dict:
    """Load configuration from YAML file"""
    path = Path(file_path)
    if not path.exists():
        logger.warning(f"Config file not found: {file_path}")
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except Exception as e:
        logger.error(f"Error loading config file {file_path}: {e}")
        return {}


def load_config(environment: str = "development") -> AppConfig:
    """Load configuration with environment-specific overrides"""

    base_config = load_yaml_config("config/settings.yaml")
    env_config = load_yaml_config(f"config/settings_{environment}.yaml")

    # env overrides base
    config_dict = {**base_config, **env_config}

    env_overrides = {
        'FLASK_ENV': os.getenv('FLASK_ENV', environment),
        'LOG_LEVEL': os.getenv('LOG_LEVEL'),
        'SECRET_KEY': os.getenv('SECRET_KEY'),
        'TEXTURE_DIR': os.getenv('TEXTURE_DIR'),
        'CATALOG_FILE': os.getenv('CATALOG_FILE'),
    }

    env_overrides = {k: v for k, v in env_overrides.items() if v is not None}
    config_dict.update(env_overrides)

    if 'FLASK_ENV' in config_dict:
        config_dict['DEBUG'] = config_dict['FLASK_ENV'] == 'development'

    try:
        return AppConfig(**config_dict)
    except Exception as e:
        logger.error(f"Configuration validation error: {e}")
        return AppConfig()

