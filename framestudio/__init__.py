"""
Frame Studio - Flask Application Factory
Live preview, catalog and pricing service for the custom framing storefront
"""

import os
from pathlib import Path
from flask import Flask
from loguru import logger
from dotenv import load_dotenv

from .config import AppConfig, load_config


def create_app(config_overrides=None):
    """Flask application factory"""

    load_dotenv()

    app = Flask(__name__)

    environment = os.getenv('FLASK_ENV', 'development')
    config = load_config(environment)
    app.config.update(config.model_dump())
    if config_overrides:
        app.config.update(config_overrides)

    setup_logging(app)
    setup_directories(app)
    setup_services(app)

    from . import routes
    app.register_blueprint(routes.bp)

    logger.info(f"Frame Studio initialized in {app.config.get('FLASK_ENV', environment)} mode")

    return app


def setup_logging(app):
    """Configure loguru logging"""
    log_level = app.config.get('LOG_LEVEL', 'INFO')
    log_file = app.config.get('LOG_FILE', 'logs/app.log')

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        rotation="1 day",
        retention="30 days",
        level=log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}"
    )


def setup_directories(app):
    """Ensure required directories exist"""
    dirs = [
        app.config.get('TEMP_FOLDER', 'tmp'),
        app.config.get('TEXTURE_DIR', 'assets/textures'),
    ]

    for dir_path in dirs:
        Path(dir_path).mkdir(parents=True, exist_ok=True)


def setup_services(app):
    """Build the catalog and compositor the routes share"""
    from .catalog import load_catalog
    from .errors import ConfigurationError
    from .compositor import CompositorSettings, PreviewCompositor

    settings = AppConfig(**{k: v for k, v in app.config.items() if k in AppConfig.model_fields})

    catalog = load_catalog(settings.CATALOG_FILE)
    if not (catalog.sizes and catalog.materials and catalog.thicknesses):
        raise ConfigurationError(
            f"Frame catalog has no usable sizes, materials or thicknesses: {settings.CATALOG_FILE}",
            details={'catalog_file': settings.CATALOG_FILE},
            suggestions=["Check CATALOG_FILE in settings.yaml", "See the error log for skipped entries"]
        )

    app.extensions['frame_catalog'] = catalog
    app.extensions['preview_compositor'] = PreviewCompositor(CompositorSettings.from_config(settings))
