import json
from pathlib import Path
from typing import Any, Dict

CONFIG_FILENAME = "sigsync.json"

_DEFAULTS: Dict[str, Any] = {
    'implicit_return_type': 'Unit',
    'log_file': 'SigSync.log',
    'log_level': 'DEBUG',
}


class SigSyncConfig:
    _instance = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load_config()
        return cls._instance

    @staticmethod
    def get_config_path() -> Path:
        return Path(__file__).parent.parent / CONFIG_FILENAME

    def _load_config(self):
        self._config = dict(_DEFAULTS)

        config_path = self.get_config_path()
        if not config_path.exists():
            return

        with open(config_path, 'r') as f:
            overrides = json.load(f)
        if not isinstance(overrides, dict):
            raise ValueError(f"{CONFIG_FILENAME} must contain a JSON object, got {type(overrides).__name__}")
        self._config.update(overrides)

    @classmethod
    def reset(cls):
        """Drop the cached instance so the next access reloads sigsync.json."""
        cls._instance = None

    def get(self, key: str) -> Any:
        if key not in self._config:
            raise KeyError(f"Setting '{key}' not found in {CONFIG_FILENAME}")
        return self._config[key]

    @property
    def implicit_return_type(self) -> str:
        return self.get('implicit_return_type')

    @property
    def log_file(self) -> str:
        return self.get('log_file')

    @property
    def log_level(self) -> str:
        return self.get('log_level')
