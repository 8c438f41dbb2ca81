"""Server configuration. Every value can be overridden through the environment."""
import os


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'y', 't')


# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
DEBUG_APP = _env_bool('DEBUG_APP', False)

# Database
SQL_USER = os.getenv('SQL_USER', 'thumbswitch')
SQL_PASSWORD = os.getenv('SQL_PASSWORD', '')
SQL_HOST = os.getenv('SQL_HOST', 'localhost')
SQL_PORT = int(os.getenv('SQL_PORT', '3306'))
SQL_DATABASE = os.getenv('SQL_DATABASE', 'thumbswitch')
TABLE_PREFIX = os.getenv('TABLE_PREFIX', 'ts_')

# Storage layout
BASE_DIR = os.getenv('BASE_DIR', 'attachments')
ORIG_DIR = os.getenv('ORIG_DIR', 'originals')
THUMB_DIR = os.getenv('THUMB_DIR', 'thumbnails')
ALLOW_STATIC_FILE_ACCESS = _env_bool('ALLOW_STATIC_FILE_ACCESS', True)

# Mime types that can be turned into derivative sizes
CAN_THUMBNAIL = {'image/jpeg', 'image/png', 'image/gif', 'image/webp'}

# Auth. Set KEY to None to disable token checks entirely.
KEY = os.getenv('ATTACHMENT_KEY') or None
TIME_TOLERANCE = int(os.getenv('TIME_TOLERANCE', '600'))
REQUIRE_KEY_FOR_GET = _env_bool('REQUIRE_KEY_FOR_GET', False)

# Web server
PORT = int(os.getenv('PORT', '8080'))
SERVER = os.getenv('SERVER', 'wsgiref')

# Size origin detection
THEME_NAME = os.getenv('THEME_NAME', 'Twenty Twenty')
THEME_TEXT_DOMAIN = os.getenv('THEME_TEXT_DOMAIN', 'twentytwenty')
ACTIVE_PLUGINS = [p.strip() for p in os.getenv('ACTIVE_PLUGINS', '').split(',') if p.strip()]

# Thumbnail switch behaviour
SIZES_CACHE_TTL = int(os.getenv('SIZES_CACHE_TTL', '3600'))
REGENERATE_PER_PAGE = int(os.getenv('REGENERATE_PER_PAGE', '10'))
JPEG_QUALITY = int(os.getenv('JPEG_QUALITY', '82'))
