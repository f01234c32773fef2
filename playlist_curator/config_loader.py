"""
Configuration Loader - Manages YAML configuration and environment variables
"""
import os
from typing import Any, Dict, Optional

import yaml

from .playlist.config import GenerationOptions


class Config:
    """Configuration manager for the playlist curator"""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = config_path
        self.config = self._load_config()
        self._validate_config()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> "Config":
        """Build a Config from an in-memory mapping (no file)"""
        instance = cls.__new__(cls)
        instance.config_path = "<memory>"
        instance.config = dict(data or {})
        instance._validate_config()
        return instance

    def _load_config(self) -> dict:
        """Load configuration from YAML file"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def _validate_config(self):
        """Validate section types and the generation options"""
        if not isinstance(self.config, dict):
            raise ValueError(f"Configuration root must be a mapping: {self.config_path}")

        for section in ('library', 'output', 'generation', 'logging'):
            value = self.config.get(section)
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"Configuration section '{section}' must be a mapping")

        # Raises ValueError on unknown keys or inconsistent sizes
        _ = self.generation_options

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            section: Configuration section
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        if not self.config.get(section):
            return default
        return self.config[section].get(key, default)

    @property
    def music_directory(self) -> str:
        """Get music directory path (MUSIC_DIR overrides)"""
        return os.getenv('MUSIC_DIR') or self.get('library', 'music_directory', './music')

    @property
    def playlists_directory(self) -> str:
        """Get playlist output directory (PLAYLISTS_DIR overrides)"""
        return os.getenv('PLAYLISTS_DIR') or self.get('output', 'playlists_dir', './playlists')

    @property
    def save_file_name(self) -> str:
        """Get name of the JSON save document written next to the M3U files"""
        return self.get('output', 'save_file', 'playlists.json')

    @property
    def log_level(self) -> str:
        return self.get('logging', 'level', 'INFO')

    @property
    def log_file(self) -> Optional[str]:
        return self.get('logging', 'file', None)

    @property
    def random_seed(self) -> Optional[int]:
        """Seed for shuffling/sampling; None means nondeterministic"""
        seed = self.config.get('random_seed')
        return int(seed) if seed is not None else None

    @property
    def disabled_generators(self) -> list:
        """Names of generator strategies to disable at startup"""
        return list(self.get('generation', 'disabled_generators', []) or [])

    @property
    def generation_options(self) -> GenerationOptions:
        """Build validated generation options from the 'generation' section"""
        section = dict(self.config.get('generation') or {})
        section.pop('disabled_generators', None)
        return GenerationOptions.from_mapping(section)
