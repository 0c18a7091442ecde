from comment_engine.config.settings import DEFAULT_PLUGIN_CONFIG, Settings, get_settings


__all__ = ["DEFAULT_PLUGIN_CONFIG", "Settings", "get_settings"]
