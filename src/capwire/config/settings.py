import pydantic
import pydantic_settings as settings
from cachetools import cached

_SETTINGS_CACHE: dict = {}


class WiringSettings(settings.BaseSettings):
    """
    Framework-wide naming conventions and limits.

    Values are read from ``CAPWIRE_*`` environment variables and the ``.env`` file.
    """
    model_config = settings.SettingsConfigDict(
        env_prefix="CAPWIRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True
    )

    properties_key: str = pydantic.Field(
        default="properties",
        description="Property key under which the whole property map is injected"
    )
    register_method: str = pydantic.Field(
        default="register",
        description="Name of the listener registration hook on implementations"
    )
    unregister_method: str = pydantic.Field(
        default="unregister",
        description="Name of the listener unregistration hook on implementations"
    )
    constructor_cache_size: int = pydantic.Field(
        default=256,
        gt=0,
        description="Maximum number of classes remembered by the constructor cache"
    )
    log_level: str = pydantic.Field(
        default="WARNING",
        description="Level used by setup_logging when none is given"
    )

    @pydantic.field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        return str(v).upper()


@cached(cache=_SETTINGS_CACHE)
def get_settings() -> WiringSettings:
    """Return the process-wide settings, loading them on first use."""
    return WiringSettings()


def reset_settings() -> None:
    """Forget the loaded settings so the next call to get_settings reloads them."""
    _SETTINGS_CACHE.clear()
