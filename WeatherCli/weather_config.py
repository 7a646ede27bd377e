"""Persistent CLI settings: API key per provider and the selected provider."""
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from weather_errors import ConfigLoadError, ConfigStoreError
from weather_provider import Provider

APP_NAME = "weather"
CONFIG_FILE_NAME = "default-config.json"


def default_config_path() -> str:
    """Settings file location, honouring WEATHER_CONFIG_DIR and XDG_CONFIG_HOME."""
    config_dir = os.getenv("WEATHER_CONFIG_DIR")
    if not config_dir:
        base = os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
        config_dir = os.path.join(base, APP_NAME)
    return os.path.join(config_dir, CONFIG_FILE_NAME)


@dataclass
class Settings:
    """API keys per provider plus the provider `get` uses."""
    provider_keys: Dict[Provider, str] = field(default_factory=dict)
    selected_provider: Optional[Provider] = None

    def get_selected_provider_api_key(self) -> Optional[Tuple[Provider, Optional[str]]]:
        """
        None when no provider is selected, otherwise the provider and its key
        (None if no key has been configured for it).
        """
        if self.selected_provider is None:
            return None
        return self.selected_provider, self.provider_keys.get(self.selected_provider)

    def get_selected_provider(self) -> Optional[Provider]:
        return self.selected_provider

    def set_api_key(self, provider: Provider, key: str) -> None:
        self.provider_keys[provider] = key

    def set_selected_provider(self, provider: Optional[Provider]) -> None:
        self.selected_provider = provider

    def to_dict(self) -> dict:
        return {
            "provider_keys": {str(p): key for p, key in self.provider_keys.items()},
            "selected_provider": str(self.selected_provider) if self.selected_provider else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        keys = data.get("provider_keys")
        if keys is None:
            keys = {}
        elif not isinstance(keys, dict):
            raise TypeError("'provider_keys' must be an object")
        for key in keys.values():
            if not isinstance(key, str):
                raise TypeError("API keys must be strings")
        selected = data.get("selected_provider")
        return cls(
            provider_keys={Provider.from_name(name): key for name, key in keys.items()},
            selected_provider=Provider.from_name(selected) if selected is not None else None,
        )


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings, or defaults if nothing has been stored yet.

    Raises:
        ConfigLoadError: If the file exists but cannot be read or parsed
    """
    path = path or default_config_path()
    if not os.path.exists(path):
        logging.debug(f"No settings at {path}, using defaults")
        return Settings()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError("settings must be a JSON object")
        settings = Settings.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        raise ConfigLoadError(f"Failed to load a config from {path}: {e}") from e

    logging.debug(f"Loaded settings from {path}")
    return settings


def store_settings(settings: Settings, path: Optional[str] = None) -> None:
    """
    Overwrite the settings file with `settings`.

    The file is written next to the target and then renamed over it, so a
    failed write leaves the previous settings intact.

    Raises:
        ConfigStoreError: If the file cannot be written
    """
    path = path or default_config_path()
    directory = os.path.dirname(path) or "."
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".settings-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(settings.to_dict(), f, indent=2)
            os.replace(tmp_path, path)
        except OSError:
            os.unlink(tmp_path)
            raise
    except OSError as e:
        raise ConfigStoreError(f"Failed to store a config to {path}: {e}") from e

    logging.debug(f"Stored settings to {path}")
