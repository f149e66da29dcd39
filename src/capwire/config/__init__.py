from .settings import WiringSettings, get_settings, reset_settings
from .setup import setup_logging

__all__ = [
    "WiringSettings",
    "get_settings",
    "reset_settings",
    "setup_logging",
]
