"""
Utility modules for PharmAssist
"""
from .config_loader import AppConfig, load_config

__all__ = [
    'AppConfig',
    'load_config',
]
