"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Escape room rules and constants (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    GROUP_NAMES, BINARY_OPTIONS, MAX_STUDENTS, MIN_STUDENTS,
    group_sizes, validate_settings_integrity
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'GROUP_NAMES', 'BINARY_OPTIONS', 'MAX_STUDENTS', 'MIN_STUDENTS',
    'group_sizes', 'validate_settings_integrity'
]
