"""
Favicon Forge - Configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration."""
    APP_NAME = os.environ.get('FAVICON_APP_NAME', 'Favicon Forge')

    # Upload
    MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB
    ALLOWED_MIME_TYPES = ('image/png', 'image/jpeg', 'image/webp', 'image/svg+xml')
    SVG_MIN_RASTER_SIZE = int(os.environ.get('FAVICON_SVG_MIN_RASTER_SIZE', '512'))

    # Rendering
    FONT_PATH = os.environ.get('FAVICON_FONT_PATH') or None
    RENDER_WORKERS = int(os.environ.get('FAVICON_RENDER_WORKERS', '6'))
    PREVIEW_MAX_SIZE = 64

    # Output
    ARCHIVE_FILENAME = os.environ.get('FAVICON_ARCHIVE_FILENAME', 'favicons.zip')

    LOG_LEVEL = os.environ.get('FAVICON_LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration."""
    LOG_LEVEL = os.environ.get('FAVICON_LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    """Testing configuration."""
    FONT_PATH = None
    RENDER_WORKERS = 1
    LOG_LEVEL = 'WARNING'


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'default': Config,
}


def get_config(name=None):
    """Return the config class for `name` (falls back to FAVICON_ENV)."""
    name = name or os.environ.get('FAVICON_ENV', 'default')
    return config.get(name, Config)
