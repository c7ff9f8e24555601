import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Type

import yaml
from cryptography.fernet import Fernet
from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel

from omnihr.errors import ConfigurationError
from pydantic_models.config.api_config import ApiConfig, ApiCredentials
from pydantic_models.config.directory_config import DirectoryConfig
from pydantic_models.config.floater_config import FloaterConfig
from pydantic_models.config.google_sheets_config import GoogleSheetsConfig
from pydantic_models.config.logging_config import LoggingConfig
from pydantic_models.config.period_config import PeriodConfig
from pydantic_models.config.structure_config import StructureConfig
from pydantic_models.config.time_sheet_config import TimeSheetConfig

CONFIG_ENV_VAR = "LEAVE_SYNC_CONFIG"
DEFAULT_CONFIG_PATH = Path(".config") / "leave_sync_config.yaml"


class Config:
    """
    Loads the YAML configuration and validates every section with its
    pydantic model. One instance is built per entry point and handed to
    each component explicitly.

    A missing config file is not an error: every section has defaults, so
    the tool also runs from environment variables alone.
    """

    def __init__(self, config_path: Optional[Path] = None, raw_config: Optional[Dict[str, Any]] = None):
        # Fallback logger for errors while loading the config
        logger.remove()
        logger.add(sys.stderr, level="WARNING")
        load_dotenv()
        self.config_path = config_path
        try:
            self.raw_config: Dict[str, Any] = raw_config if raw_config is not None else self._load_config()
            self.logging = self._parse_section(self.raw_config, "logging", LoggingConfig)
            self._setup_logging()
            logger.debug(f"Loaded configuration from {config_path}")
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise

        self.structure = self._parse_section(self.raw_config, "structure", StructureConfig)
        self.api = self._parse_section(self.raw_config, "api", ApiConfig)
        self.period = self._parse_section(self.raw_config, "period", PeriodConfig)
        self.directory = self._parse_section(self.raw_config, "directory", DirectoryConfig)
        self.time_sheet = self._parse_section(self.raw_config, "time_sheet", TimeSheetConfig)
        self.floater = self._parse_section(self.raw_config, "floater", FloaterConfig)
        self.google_sheets = self._parse_section(self.raw_config, "google_sheets", GoogleSheetsConfig)

        self._validate_structure()
        logger.debug("Configuration loaded and validated.")

    @classmethod
    def from_cli(cls, config_arg: Optional[str] = None) -> "Config":
        """
        Resolves the config path from --config, then $LEAVE_SYNC_CONFIG, then
        .config/leave_sync_config.yaml below the working directory.
        """
        raw = config_arg or os.getenv(CONFIG_ENV_VAR)
        return cls(Path(raw) if raw else DEFAULT_CONFIG_PATH)

    def _setup_logging(self) -> None:
        """
        Configures loguru from the `logging` section.
        """
        logger.remove()
        log_file = getattr(self.logging, "log_file", None)
        log_level = getattr(self.logging, "log_level", "INFO")
        if log_file:
            logger.add(log_file, level=log_level)
        logger.add(sys.stderr, level=log_level)

    def _load_config(self) -> Dict[str, Any]:
        """
        Reads the YAML file; returns an empty dict when it does not exist.
        """
        if self.config_path is None or not Path(self.config_path).exists():
            return {}
        with open(self.config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _parse_section(self, config: Dict[str, Any], section: str, model: Type[BaseModel]) -> Any:
        data = config.get(section) or {}
        logger.debug(f"Parsing section '{section}': {data}")
        return model(**data)

    def _validate_structure(self) -> None:
        prj_root = self.prj_root
        if not prj_root.exists():
            logger.error(f"Project root does not exist: {prj_root}")
            raise ConfigurationError(f"Project root not found: {prj_root}")

    # ------------------------------------------------------------------ #
    # Paths
    # ------------------------------------------------------------------ #

    @property
    def prj_root(self) -> Path:
        return Path(self.structure.prj_root).expanduser().resolve()

    @property
    def data_dir(self) -> Path:
        return self.prj_root / (self.structure.data_path or "data")

    @property
    def output_dir(self) -> Path:
        return self.prj_root / (self.structure.output_path or "output")

    @property
    def template_dir(self) -> Path:
        return self.prj_root / (self.structure.template_path or "templates")

    # ------------------------------------------------------------------ #
    # Secrets
    # ------------------------------------------------------------------ #

    def get_secret(self, key: str, default: Any = None) -> Optional[str]:
        """
        Returns a secret (password, API key) from the environment.
        """
        logger.debug(f"Reading secret '{key}' from environment.")
        return os.getenv(key, default)

    def get_decrypted_secret(
        self, key: str, fernet_key_env: str = "FERNET_KEY", default: Any = None
    ) -> Optional[str]:
        """
        Reads an encrypted secret from the environment and decrypts it with Fernet.
        """
        encrypted = os.getenv(key)
        fernet_key = os.getenv(fernet_key_env)
        logger.debug(f"Trying to decrypt secret '{key}' with Fernet key '{fernet_key_env}'.")
        if not encrypted or not fernet_key:
            logger.debug("No secret or key found, returning default.")
            return default
        try:
            f = Fernet(fernet_key.encode())
            decrypted = f.decrypt(encrypted.encode())
            logger.debug("Secret decrypted.")
            return decrypted.decode()
        except Exception as e:
            logger.error(f"Decryption failed: {e}")
            raise ConfigurationError(f"Decryption failed: {e}") from e

    def api_credentials(self) -> ApiCredentials:
        """
        Collects the OmniHR login data from the environment.
        OMNIHR_PASSWORD_ENC (Fernet) takes precedence over OMNIHR_PASSWORD.

        Raises:
            ConfigurationError: If username, password or subdomain are missing.
        """
        username = self.get_secret("OMNIHR_USERNAME")
        password = self.get_decrypted_secret("OMNIHR_PASSWORD_ENC") or self.get_secret("OMNIHR_PASSWORD")
        subdomain = self.get_secret("OMNIHR_SUBDOMAIN")
        if not username or not password:
            logger.error("OMNIHR_USERNAME and OMNIHR_PASSWORD are not set.")
            raise ConfigurationError("OMNIHR_USERNAME and OMNIHR_PASSWORD environment variables are required")
        if not subdomain:
            logger.error("OMNIHR_SUBDOMAIN is not set.")
            raise ConfigurationError("OMNIHR_SUBDOMAIN environment variable is required")
        return ApiCredentials(
            base_url=self.get_secret("OMNIHR_BASE_URL") or self.api.base_url,
            subdomain=subdomain,
            username=username,
            password=password,
        )
