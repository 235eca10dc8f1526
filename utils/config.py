import json
import os
from dataclasses import dataclass
from pathlib import Path

from transeditor.errors import ConfigurationError
from transeditor.translation_file_format import DEFAULT_FORMAT, TranslationFileFormat
from utils.logging_setup import get_logger

logger = get_logger("config")

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent / "configs"
CONFIG_SECTION = "transeditor"


class ConfigManager:
    """Loads the JSON configuration, merging the user config over the defaults."""

    def __init__(self, config_dir=None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.default_config_path = self.config_dir / "default_config.json"
        self.user_config_path = self.config_dir / "user_config.json"
        self.config = self.load_config()

    def load_config(self):
        """Load configuration from files, merging user config with defaults."""
        default_config = self._load_json(self.default_config_path)
        user_config = self._load_json(self.user_config_path)
        return self.merge_configs(default_config, user_config)

    def _load_json(self, path: Path) -> dict:
        if not path.exists():
            logger.debug(f"No config file at {path}")
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Could not load config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        return data

    def merge_configs(self, default, user):
        """Recursively merge user config with default config."""
        merged = default.copy()

        for key, value in user.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self.merge_configs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def get(self, key, default=None):
        """Get a configuration value using dot notation."""
        try:
            value = self.config
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default


def expand_path(location: str) -> str:
    location = location.strip()
    if "{HOME}" in location:
        location = location.replace("{HOME}", os.path.expanduser("~"))
    return os.path.abspath(os.path.expanduser(location))


@dataclass(frozen=True)
class TransEditorConfig:
    """Explicit configuration handed to the scanner and the translation file manager."""
    language_file_path: str
    fallback_locale: str
    file_format: str = DEFAULT_FORMAT

    def __post_init__(self):
        if not isinstance(self.language_file_path, str):
            raise ConfigurationError(f"language_file_path must be a string, found {self.language_file_path!r}")
        if not self.language_file_path.strip():
            raise ConfigurationError("language_file_path is required")
        if not isinstance(self.fallback_locale, str):
            raise ConfigurationError(f"fallback_locale must be a string, found {self.fallback_locale!r}")
        if not self.fallback_locale.strip():
            raise ConfigurationError("fallback_locale is required")
        if self.file_format not in TranslationFileFormat.names():
            raise ConfigurationError(
                f"Unsupported file_format {self.file_format!r}, expected one of {TranslationFileFormat.names()}")
        object.__setattr__(self, "language_file_path", expand_path(self.language_file_path))
        object.__setattr__(self, "fallback_locale", self.fallback_locale.strip())

    @classmethod
    def from_config_manager(cls, config_manager: ConfigManager, **overrides) -> 'TransEditorConfig':
        """Build the configuration from the ``transeditor`` config section.

        Keyword overrides that are not None take precedence over file values.
        """
        values = {
            "language_file_path": config_manager.get(f"{CONFIG_SECTION}.language_file_path"),
            "fallback_locale": config_manager.get(f"{CONFIG_SECTION}.fallback_locale"),
            "file_format": config_manager.get(f"{CONFIG_SECTION}.file_format", DEFAULT_FORMAT),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        for required in ("language_file_path", "fallback_locale"):
            if not values.get(required):
                raise ConfigurationError(
                    f"Missing required option '{CONFIG_SECTION}.{required}' in {config_manager.config_dir}")
        return cls(**values)
