"""
Settings Manager for LearnerIndex.
Handles loading, saving, and managing library configuration.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional
from PySide6.QtCore import QObject, Signal

from ..utils.errors import ConfigurationError
from ..utils.logger import get_logger


_log = get_logger("settings")


class SettingsManager(QObject):
    """
    Manages library settings with JSON persistence.
    Emits a signal whenever a setting changes.
    """
    
    # Signals
    settings_changed = Signal(str, object)  # (key, value)
    
    def __init__(self, config_path: Optional[str] = None, user_config_path: Optional[str] = None):
        """
        Initialize the settings manager.
        
        Args:
            config_path: Path to the default settings JSON file. If None, uses the packaged one.
            user_config_path: Path to the user settings JSON file. If None, uses
                ``~/.learnerindex/settings.json``.
        """
        super().__init__()
        
        self.config_path = config_path or self._get_default_config_path()
        self.user_config_path = user_config_path or self._get_user_config_path()
        self.settings: Dict[str, Any] = {}
        self._load_default_settings()
        self.load_settings()
    
    def _get_default_config_path(self) -> str:
        """Get the default configuration file path."""
        config_dir = Path(__file__).parent
        return str(config_dir / "default_settings.json")
    
    def _get_user_config_path(self) -> str:
        """Get the user-specific configuration file path."""
        return str(Path.home() / ".learnerindex" / "settings.json")
    
    def _load_default_settings(self):
        """Load default settings from the default configuration file."""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                self.settings = json.load(f)
        except FileNotFoundError:
            _log.warning("Default settings file not found: %s", self.config_path)
            self.settings = self._get_fallback_settings()
        except json.JSONDecodeError as e:
            _log.warning("Error parsing default settings: %s", e)
            self.settings = self._get_fallback_settings()
    
    def _get_fallback_settings(self) -> Dict[str, Any]:
        """Return minimal fallback settings if config file is unavailable."""
        return {
            "application": {"name": "LearnerIndex", "version": "0.1.0"},
            "paths": {"logs_dir": "./logs"},
            "logging": {"level": "INFO", "console": True},
            "listing": {
                "quiet": True,
                "warn_missing_packages": True,
                "check_packages": True,
                "create": False,
                "print_rows": 6
            },
            "registry": {
                "discover_plugins": True,
                "entry_point_group": "learnerindex.learners"
            }
        }
    
    def load_settings(self):
        """Load user settings, merging with defaults."""
        if not os.path.exists(self.user_config_path):
            return

        try:
            with open(self.user_config_path, 'r', encoding='utf-8') as f:
                user_settings = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid user settings in {self.user_config_path}: {e}") from e

        if not isinstance(user_settings, dict):
            raise ConfigurationError(f"User settings in {self.user_config_path} must be a JSON object")

        # Merge user settings with defaults
        self._deep_merge(self.settings, user_settings)
    
    def save_settings(self) -> bool:
        """Save current settings to the user configuration file."""
        path = Path(self.user_config_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4)
            return True
        except OSError as e:
            _log.error("Error saving settings to %s: %s", path, e)
            return False
    
    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a setting value using dot notation.
        
        Args:
            key_path: Dot-separated path to the setting (e.g., "listing.quiet")
            default: Default value if key not found
            
        Returns:
            The setting value or default
        """
        keys = key_path.split('.')
        value = self.settings
        
        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default
    
    def set(self, key_path: str, value: Any, emit_signal: bool = True):
        """
        Set a setting value using dot notation.
        
        Args:
            key_path: Dot-separated path to the setting
            value: Value to set
            emit_signal: Whether to emit settings_changed signal
        """
        keys = key_path.split('.')
        settings = self.settings
        
        # Navigate to the parent of the target key
        for key in keys[:-1]:
            if key not in settings:
                settings[key] = {}
            settings = settings[key]
        
        settings[keys[-1]] = value
        
        if emit_signal:
            self.settings_changed.emit(key_path, value)
    
    def _deep_merge(self, base: Dict, updates: Dict):
        """
        Deep merge updates into base dictionary.
        
        Args:
            base: Base dictionary to merge into
            updates: Dictionary with updates
        """
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value
    
    def reset_to_defaults(self):
        """Reset all settings to default values."""
        self._load_default_settings()
        self.save_settings()
        self.settings_changed.emit("*", None)
    
    def get_all_settings(self) -> Dict[str, Any]:
        """Get a copy of all settings."""
        return self.settings.copy()
