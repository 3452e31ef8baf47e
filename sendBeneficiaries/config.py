"""
Configuration settings for the sendBeneficiaries package.

Configuration can be set via:
1. Command-line arguments (highest priority)
2. Environment variables (AWX_ prefix) and the .env file
3. Configuration files (YAML/JSON)
4. Default values (lowest priority)
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv, set_key

from sendBeneficiaries.errors import ConfigurationError

# Set up logger
logger = logging.getLogger(__name__)

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

# Default configuration paths
DEFAULT_CONFIG_PATHS = [
    Path.cwd() / "sendbeneficiaries.yml",
    Path.cwd() / "sendbeneficiaries.yaml",
    Path.cwd() / "sendbeneficiaries.json",
    Path.home() / ".config" / "sendbeneficiaries.yml",
    Path.home() / ".config" / "sendbeneficiaries.yaml",
    Path.home() / ".config" / "sendbeneficiaries.json",
]

# API settings
DEMO_BASE_URL = "https://api-demo.airwallex.com"
PROD_BASE_URL = "https://api.airwallex.com"

LOGIN_PATH = "/api/v1/authentication/login"
VALIDATE_PATH = "/api/v1/beneficiaries/validate"
CREATE_PATH = "/api/v1/beneficiaries/create"

USER_AGENT = "awx-support-bene-upload/1.0"
DEFAULT_TIMEOUT = 30.0

# Default HTTP headers for API requests
DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "User-Agent": USER_AGENT,
}

# Credentials in the environment / .env file
ENV_FILE = ".env"
CLIENT_ID_VAR = "CLIENT_ID"
API_KEY_VAR = "API_KEY"
TOKEN_VAR = "AIRWALLEX_TOKEN"

# Input / output files
CSV_ENCODING = "utf-8-sig"
VALIDATION_RESULTS_FILE = "validation_results.json"
VALIDATION_ERRORS_FILE = "validation_errors.csv"
CREATE_RESULTS_FILE = "beneficiary_create_result.json"


class ConfigManager:
    """
    Configuration manager that handles loading and accessing configuration
    from files, environment variables, and default settings.
    """

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        profile: str = "default",
        env_prefix: str = "AWX_"
    ):
        """
        Initialize the configuration manager.

        Args:
            config_file: Optional path to a configuration file
            profile: Configuration profile to use (for multi-environment setups)
            env_prefix: Prefix for environment variables
        """
        self.config_file = config_file
        self.profile = profile
        self.env_prefix = env_prefix
        self.config_data: dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from the first available configuration file."""
        if self.config_file:
            config_path = Path(self.config_file)
            if not config_path.exists():
                raise ConfigurationError(f"Specified config file not found: {config_path}")
            self._load_config_file(config_path)
        else:
            for path in DEFAULT_CONFIG_PATHS:
                if path.exists():
                    logger.debug("Loading configuration from: %s", path)
                    try:
                        self._load_config_file(path)
                    except ConfigurationError as e:
                        logger.warning(e.message)
                    break

    def _load_config_file(self, config_path: Path) -> None:
        """
        Load configuration from a file.

        Args:
            config_path: Path to configuration file (YAML or JSON)

        Raises:
            ConfigurationError: If the file cannot be parsed
        """
        extension = config_path.suffix.lower()
        try:
            if extension in ['.yml', '.yaml']:
                with open(config_path, 'r', encoding='utf-8') as f:
                    config_data = yaml.safe_load(f)
            elif extension == '.json':
                with open(config_path, 'r', encoding='utf-8') as f:
                    config_data = json.load(f)
            else:
                logger.warning("Unsupported config file format: %s", extension)
                return
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Error loading config file {config_path}: {e}") from e

        if not config_data:
            logger.warning("Empty configuration file: %s", config_path)
            return

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        # Handle profiles
        if 'profiles' in config_data:
            profiles = config_data.get('profiles') or {}
            if not isinstance(profiles, dict):
                raise ConfigurationError(f"'profiles' in {config_path} must be a mapping of profile names")

            name = self.profile
            if name not in profiles:
                logger.warning("Profile '%s' not found in config file", name)
                if 'default' not in profiles:
                    return
                name = 'default'
                logger.debug("Loaded 'default' profile as fallback")

            profile_data = profiles[name] or {}
            if not isinstance(profile_data, dict):
                raise ConfigurationError(f"Profile '{name}' in {config_path} must be a mapping")
            self.config_data = profile_data
            logger.debug("Loaded configuration profile: %s", name)
        else:
            self.config_data = config_data

        logger.debug("Successfully loaded configuration from %s", config_path)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value with fallback to environment and default.

        Args:
            key: Configuration key
            default: Default value if not found in config or environment

        Returns:
            Configuration value
        """
        env_value = os.getenv(f"{self.env_prefix}{key.upper()}")
        if env_value is not None:
            return self._convert_value(env_value)

        if key in self.config_data:
            return self.config_data[key]

        return default

    def _convert_value(self, value: str) -> Any:
        """
        Convert string values from environment variables to appropriate types.

        Args:
            value: String value from environment variable

        Returns:
            Converted value (bool, int, float, or original string)
        """
        lower_val = value.lower()
        if lower_val in ['true', 'yes']:
            return True
        if lower_val in ['false', 'no']:
            return False

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            return value


# Create a default config manager instance for package-level access
config_manager = ConfigManager()


def get_config(key: str, default: Any = None) -> Any:
    """Get a configuration value."""
    return config_manager.get(key, default)


def get_base_url(prod: bool = False) -> str:
    """
    Get the API base URL.

    A configured `base_url` only replaces the demo URL; `--prod` always
    targets production.
    """
    if prod:
        return PROD_BASE_URL
    base_url = get_config("base_url")
    return str(base_url).rstrip("/") if base_url else DEMO_BASE_URL


def get_timeout() -> float:
    """Get the outbound request timeout in seconds."""
    return float(get_config("timeout", DEFAULT_TIMEOUT))


def load_env_file(env_path: Union[str, Path] = ENV_FILE) -> Path:
    """
    Load a .env file into the process environment.

    Values from the file override variables already set in the environment.

    Raises:
        ConfigurationError: If the file does not exist
    """
    path = Path(env_path)
    if not path.is_file():
        raise ConfigurationError(f"Error loading .env file from {path}: file not found")
    load_dotenv(path, override=True)
    logger.debug("Loaded environment from %s", path)
    return path


def get_credentials() -> tuple[str, str]:
    """
    Return the (client_id, api_key) pair used to log in.

    Raises:
        ConfigurationError: If either value is missing
    """
    client_id = os.getenv(CLIENT_ID_VAR, "")
    api_key = os.getenv(API_KEY_VAR, "")
    if not client_id or not api_key:
        raise ConfigurationError(f"Missing {CLIENT_ID_VAR} or {API_KEY_VAR} in .env file")
    return client_id, api_key


def get_token() -> str:
    """
    Return the bearer token from the environment.

    Raises:
        ConfigurationError: If the token is not set
    """
    token = os.getenv(TOKEN_VAR, "")
    if not token:
        raise ConfigurationError(f"Missing {TOKEN_VAR} in .env file")
    return token


def save_token(token: str, env_path: Union[str, Path] = ENV_FILE) -> None:
    """Write the token into the .env file and the current process environment."""
    set_key(str(env_path), TOKEN_VAR, token, quote_mode="never")
    os.environ[TOKEN_VAR] = token
    logger.debug("Saved %s to %s", TOKEN_VAR, env_path)
