"""
Configuration module for LearnerIndex.
Handles library settings and configuration management.
"""

from .settings import SettingsManager

__all__ = ['SettingsManager']
