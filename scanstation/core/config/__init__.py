# (c) Copyright Datacraft, 2026
"""Configuration module for the scan station."""
from .settings import Settings, get_settings

__all__ = [
	'Settings',
	'get_settings',
]
