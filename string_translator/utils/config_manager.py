"""
Configuration manager for loading and saving settings from YAML/JSON files.
"""
import yaml
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, asdict
import os
from dotenv import load_dotenv

from ..core.exceptions import ConfigurationError
from ..core.models import default_target_language


@dataclass
class EngineConfig:
    """Configuration for the translation service."""
    api_key: Optional[str] = None
    api_host: str = "google-translate1.p.rapidapi.com"
    api_url: str = "https://google-translate1.p.rapidapi.com/language/translate/v2"
    timeout: float = 10.0


@dataclass
class CacheConfig:
    """Configuration for cache storage."""
    backend: str = "sqlite"  # sqlite, json
    db_path: str = "data/translations.db"
    directory: str = "data/translations"


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    log_dir: str = "logs"
    log_level: str = "INFO"
    console_level: str = "WARNING"
    max_bytes: int = 10_000_000
    backup_count: int = 5
    use_colors: bool = True


@dataclass
class AppConfig:
    """Main application configuration."""
    engine: EngineConfig = field(default_factory=EngineConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # General settings
    source_language: str = "en"
    target_language: str = field(default_factory=default_target_language)
    strings_file: Optional[str] = None


_SECTIONS = {
    'engine': EngineConfig,
    'cache': CacheConfig,
    'logging': LoggingConfig,
}
_GENERAL_KEYS = ('source_language', 'target_language', 'strings_file')


class ConfigManager:
    """
    Configuration manager for loading/saving application settings.
    Supports YAML and JSON formats, environment variables, and defaults.
    """

    def __init__(self, config_path: Optional[Path] = None, create_if_missing: bool = True):
        """
        Initialize config manager.

        Args:
            config_path: Path to config file (YAML or JSON)
            create_if_missing: Write the defaults when the file does not exist
        """
        self.config_path = Path(config_path) if config_path else Path("config.yaml")
        self.config: AppConfig = AppConfig()

        # Load environment variables
        load_dotenv()

        if self.config_path.exists():
            self.load()
        else:
            if create_if_missing:
                self.save()
            self._apply_env_vars()

    def load(self) -> AppConfig:
        """
        Load configuration from file.

        Returns:
            AppConfig instance
        """
        if not self.config_path.exists():
            return self.config

        if self.config_path.suffix in ['.yaml', '.yml']:
            data = self._load_yaml()
        elif self.config_path.suffix == '.json':
            data = self._load_json()
        else:
            raise ConfigurationError(f"Unsupported config format: {self.config_path.suffix}", component="config")

        self.config = self._parse_config(data)

        # Override with environment variables
        self._apply_env_vars()

        return self.config

    def save(self, config: Optional[AppConfig] = None):
        """
        Save configuration to file.

        Args:
            config: Config to save (uses current if None)
        """
        if config:
            self.config = config

        data = asdict(self.config)

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.suffix in ['.yaml', '.yml']:
            self._save_yaml(data)
        elif self.config_path.suffix == '.json':
            self._save_json(data)
        else:
            raise ConfigurationError(f"Unsupported config format: {self.config_path.suffix}", component="config")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot notation key.

        Args:
            key: Configuration key (e.g., 'engine.api_key', 'cache.backend')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self.config

        for part in key.split('.'):
            if hasattr(value, part):
                value = getattr(value, part)
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """
        Set configuration value by dot notation key.

        Args:
            key: Configuration key
            value: Value to set
        """
        parts = key.split('.')
        obj = self.config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise KeyError(f"Invalid config key: {key}")

        if not hasattr(obj, parts[-1]):
            raise KeyError(f"Invalid config key: {key}")
        setattr(obj, parts[-1], value)

    def _load_yaml(self) -> Dict[str, Any]:
        """Load YAML config file."""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}", component="config")

    def _load_json(self) -> Dict[str, Any]:
        """Load JSON config file."""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {self.config_path}: {e}", component="config")

    def _save_yaml(self, data: Dict[str, Any]):
        """Save config as YAML."""
        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True, indent=2, sort_keys=False)

    def _save_json(self, data: Dict[str, Any]):
        """Save config as JSON."""
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def _parse_config(self, data: Dict[str, Any]) -> AppConfig:
        """Parse dictionary to AppConfig."""
        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping", component="config")

        config = AppConfig()

        for section, section_class in _SECTIONS.items():
            if section in data:
                try:
                    setattr(config, section, section_class(**(data[section] or {})))
                except TypeError as e:
                    raise ConfigurationError(f"Invalid '{section}' section: {e}", component="config")

        for key in _GENERAL_KEYS:
            if key in data:
                setattr(config, key, data[key])

        return config

    def _apply_env_vars(self):
        """Override config with environment variables."""
        if os.getenv('RAPIDAPI_KEY'):
            self.config.engine.api_key = os.getenv('RAPIDAPI_KEY')

        if os.getenv('TRANSLATOR_SOURCE_LANG'):
            self.config.source_language = os.getenv('TRANSLATOR_SOURCE_LANG')
        if os.getenv('TRANSLATOR_TARGET_LANG'):
            self.config.target_language = os.getenv('TRANSLATOR_TARGET_LANG')

        if os.getenv('TRANSLATOR_CACHE_BACKEND'):
            self.config.cache.backend = os.getenv('TRANSLATOR_CACHE_BACKEND')

        if os.getenv('LOG_LEVEL'):
            self.config.logging.log_level = os.getenv('LOG_LEVEL')

    def export_template(self, output_path: Path):
        """
        Export configuration template with comments.

        Args:
            output_path: Path to save template
        """
        template = """# String Translator Configuration

# Translation Service Settings (Google Translate through RapidAPI)
engine:
  api_key: null             # RapidAPI key (or use env var RAPIDAPI_KEY)
  api_host: google-translate1.p.rapidapi.com
  api_url: https://google-translate1.p.rapidapi.com/language/translate/v2
  timeout: 10               # Request timeout in seconds

# Cache Settings
cache:
  backend: sqlite           # Backend: sqlite, json
  db_path: data/translations.db     # SQLite database path
  directory: data/translations      # Directory for the json backend

# Logging Settings
logging:
  log_dir: logs             # Log directory
  log_level: INFO           # File log level
  console_level: WARNING    # Console output level
  max_bytes: 10000000       # Max log file size (10MB)
  backup_count: 5           # Number of backup files
  use_colors: true          # Colored console output

# General Settings
source_language: en         # Language of the input strings
target_language: it         # Language to translate to
strings_file: null          # Default .strings or .json input file
"""

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(template)


# ===== Global Config Instance =====

_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_path: Optional[Path] = None) -> ConfigManager:
    """
    Get global config manager instance.

    Args:
        config_path: Path to config file

    Returns:
        ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_path)
    return _config_manager


def get_config() -> AppConfig:
    """Get current application configuration."""
    return get_config_manager().config
