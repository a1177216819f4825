"""
Constants and configuration values for device-faker-templates.

This module contains the repository coordinates, URLs, timeouts, category
definitions and other constants used throughout the package.
"""

APP_NAME = "device-faker-templates"

# Remote template repository (Gitee mirror)
DEFAULT_REPO_OWNER = "Seyud"
DEFAULT_REPO_NAME = "device_faker_config_mirror"
DEFAULT_REPO_BRANCH = "main"
DEFAULT_API_BASE = "https://gitee.com/api/v5"
DEFAULT_WEB_BASE = "https://gitee.com"

# Layout of the template tree
TEMPLATES_ROOT = "templates"
TEMPLATE_EXTENSION = ".toml"
HIDDEN_ENTRY_PREFIX = "."
TEMPLATES_TABLE_KEY = "templates"

# Category identifiers and their human-readable labels
CATEGORY_LABELS = {
    "common": "Common devices",
    "gaming": "Gaming devices",
    "transcend": "Transcend devices",
}

# Network settings (in seconds)
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_MAX_CONCURRENT = 5
DEFAULT_CONNECTOR_LIMIT = 10
HTTP_STATUS_ERROR_THRESHOLD = 400

# On-device conversion tool used to import a template from a URL
DEFAULT_CLI_PATH = "/data/adb/modules/device_faker/bin/device_faker_cli"
DEFAULT_TEMP_DIR = "/data/local/tmp"
TEMP_FILE_PREFIX = "template_"

# Configuration
CONFIG_FILE_NAME = "config.yaml"
ENV_VAR_PREFIX = "DEVICE_FAKER_TEMPLATES_"

# Logging configuration
LOGGER_NAME = "device_faker_templates"
LOG_FILE_NAME = "device_faker_templates.log"
LOG_LEVEL_ENV_VAR = f"{ENV_VAR_PREFIX}LOG_LEVEL"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5

# Discovery strategy names used in logs and errors
STRATEGY_API = "api"
STRATEGY_HTML = "html"
