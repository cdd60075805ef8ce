"""
Configuration management for docx-vars.

Handles loading configuration from the YAML config file and environment
variables. Library callers may also build a DocxVarsConfig directly.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

TRUTHY = ('true', '1', 'yes', 'on')


@dataclass
class DocxVarsConfig:
    """Main configuration for docx-vars."""

    # Numbered parts are probed with suffixes "", 0 .. probe_limit - 1
    probe_limit: int = 100

    # Working copies
    work_dir: Optional[Path] = None
    temp_prefix: str = "."

    # Part text encoding
    encoding: str = "utf-8"

    # Raise TypeError on non-text substitution arguments instead of ignoring them
    strict_arguments: bool = False

    # Emit untagged leading text when recompiling a part
    preserve_leading_text: bool = False

    # CLI: strip leftover ${ and } after filling
    clean_after_fill: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'probe_limit': self.probe_limit,
            'work_dir': str(self.work_dir) if self.work_dir else None,
            'temp_prefix': self.temp_prefix,
            'encoding': self.encoding,
            'strict_arguments': self.strict_arguments,
            'preserve_leading_text': self.preserve_leading_text,
            'clean_after_fill': self.clean_after_fill,
        }


class ConfigManager:
    """Manages docx-vars configuration from multiple sources."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / '.docx-vars'
        self.config_file = self.config_dir / 'config.yaml'
        self._config: Optional[DocxVarsConfig] = None

    def load_config(self) -> DocxVarsConfig:
        """Load configuration from all sources."""
        if self._config:
            return self._config

        config = DocxVarsConfig()

        if self.config_file.exists():
            config = self._merge_configs(config, self._load_from_file())

        config = self._merge_configs(config, self._load_from_env())

        self._config = config
        return config

    def _load_from_file(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file {self.config_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_file}: expected a mapping")
            return {}
        return data

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        probe_limit = os.getenv('DOCX_VARS_PROBE_LIMIT')
        if probe_limit:
            try:
                env_config['probe_limit'] = int(probe_limit)
            except ValueError:
                logger.warning(f"Ignoring DOCX_VARS_PROBE_LIMIT={probe_limit!r}: not an integer")

        work_dir = os.getenv('DOCX_VARS_WORK_DIR')
        if work_dir:
            env_config['work_dir'] = work_dir

        encoding = os.getenv('DOCX_VARS_ENCODING')
        if encoding:
            env_config['encoding'] = encoding

        for key, env_var in [
            ('strict_arguments', 'DOCX_VARS_STRICT'),
            ('preserve_leading_text', 'DOCX_VARS_PRESERVE_LEADING_TEXT'),
        ]:
            value = os.getenv(env_var)
            if value:
                env_config[key] = value.lower() in TRUTHY

        return env_config

    def _merge_configs(self, base: DocxVarsConfig, override: Dict[str, Any]) -> DocxVarsConfig:
        """Merge an override dictionary into a config."""
        if 'probe_limit' in override:
            try:
                limit = int(override['probe_limit'])
            except (TypeError, ValueError):
                logger.warning(f"Ignoring probe_limit={override['probe_limit']!r}")
            else:
                if limit >= 0:
                    base.probe_limit = limit
                else:
                    logger.warning(f"Ignoring negative probe_limit={limit}")

        if override.get('work_dir'):
            base.work_dir = Path(override['work_dir']).expanduser()

        for key in ('temp_prefix', 'encoding'):
            if isinstance(override.get(key), str):
                setattr(base, key, override[key])

        for key in ('strict_arguments', 'preserve_leading_text', 'clean_after_fill'):
            if key in override:
                value = override[key]
                if isinstance(value, str):
                    value = value.lower() in TRUTHY
                setattr(base, key, bool(value))

        return base

    def save_config(self, config: DocxVarsConfig) -> None:
        """Save configuration to file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2)
        self._config = config

    def create_default_config(self) -> Path:
        """Create a default configuration file."""
        self.save_config(DocxVarsConfig())
        logger.info(f"Created default configuration at {self.config_file}")
        return self.config_file

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about current configuration."""
        config = self.load_config()
        info = {
            'config_file': str(self.config_file),
            'config_exists': self.config_file.exists(),
        }
        info.update(config.to_dict())
        return info


# Global config manager instance
_config_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager

def load_config() -> DocxVarsConfig:
    """Load the current configuration."""
    return get_config_manager().load_config()
