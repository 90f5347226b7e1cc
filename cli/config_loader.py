#!/usr/bin/env python3
"""
Unified Configuration Loader
Loads converter configuration from config.yaml and .env files
"""

import logging
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv

from conversion import ChecklistPolicy, ConversionSettings

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_CONFIG = {
    "org_dir": "org",
    "denote_dir": "denote",
    "org_file": "ticktick-backup.org",
    "archive_file": "ticktick-backup_archive.org",
    "max_concurrent": 8,
    "fail_on_write_error": False,
}

TRUE_VALUES = {"1", "true", "yes", "on", "y"}


class ConfigLoader:
    """Loads configuration from config.yaml and .env files"""

    def __init__(self, config_path: str = None, env_path: str = None):
        # Default to parent directory for config files
        if config_path is None:
            config_path = Path(__file__).parent.parent / "config.yaml"
        if env_path is None:
            env_path = Path(__file__).parent.parent / ".env"
        self.config_path = Path(config_path)
        self.env_path = Path(env_path)
        self.config_data = {}
        self.env_data = {}
        self._load_config()

    def _load_config(self):
        """Load configuration from both files"""
        # Load .env file
        if self.env_path.exists():
            load_dotenv(self.env_path)
        else:
            logger.debug(f"{self.env_path} not found, using environment variables only")
        self.env_data = dict(os.environ)

        # Load config.yaml
        if self.config_path.exists():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                self.config_data = yaml.safe_load(f) or {}
        else:
            logger.debug(f"{self.config_path} not found, using defaults")
            self.config_data = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with environment variable override support"""
        # Check for environment variable override first
        env_key = key.upper().replace('.', '_')
        if env_key in self.env_data:
            return self.env_data[env_key]

        # Navigate through nested config
        keys = key.split('.')
        value = self.config_data

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a flag; environment overrides arrive as strings"""
        value = self.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in TRUE_VALUES
        return bool(value)

    def get_conversion_settings(self) -> ConversionSettings:
        """Build pipeline settings from the converter section"""
        policy = str(self.get('converter.checklist_policy', ChecklistPolicy.TREE.value)).strip().lower()
        return ConversionSettings(
            checklist_policy=ChecklistPolicy(policy),
            checklist_folder=str(self.get('converter.checklist_folder', 'Checklists')),
            with_signature=self.get_bool('converter.with_signature', False),
            archive=self.get_bool('converter.archive', True),
        )

    def get_output_config(self) -> Dict[str, Any]:
        """Get output configuration merged over the defaults"""
        output_config = dict(DEFAULT_OUTPUT_CONFIG)
        for key, default in DEFAULT_OUTPUT_CONFIG.items():
            if isinstance(default, bool):
                output_config[key] = self.get_bool(f'output.{key}', default)
            elif isinstance(default, int):
                output_config[key] = int(self.get(f'output.{key}', default))
            else:
                output_config[key] = str(self.get(f'output.{key}', default))
        return output_config

    def validate_config(self) -> list:
        """Validate configuration and return list of errors"""
        errors = []

        policy = str(self.get('converter.checklist_policy', ChecklistPolicy.TREE.value)).strip().lower()
        valid_policies = [p.value for p in ChecklistPolicy]
        if policy not in valid_policies:
            errors.append(f"Unknown checklist policy '{policy}' (expected one of: {', '.join(valid_policies)})")

        try:
            if int(self.get('output.max_concurrent', DEFAULT_OUTPUT_CONFIG['max_concurrent'])) < 1:
                errors.append("output.max_concurrent must be at least 1")
        except (TypeError, ValueError):
            errors.append("output.max_concurrent must be an integer")

        for key in ('org_dir', 'denote_dir', 'org_file', 'archive_file'):
            if not str(self.get(f'output.{key}', DEFAULT_OUTPUT_CONFIG[key])).strip():
                errors.append(f"output.{key} must not be empty")

        return errors

# Global config loader instance
_config_loader: Optional[ConfigLoader] = None

def get_config_loader(config_path: str = None) -> ConfigLoader:
    """Get the global config loader instance"""
    global _config_loader
    if _config_loader is None or config_path is not None:
        _config_loader = ConfigLoader(config_path)
    return _config_loader

def reload_config():
    """Reload configuration from files"""
    global _config_loader
    _config_loader = None
    return get_config_loader()
