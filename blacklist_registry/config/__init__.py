from blacklist_registry.config.settings import RegistrySettings, get_settings, set_settings

__all__ = ["RegistrySettings", "get_settings", "set_settings"]
