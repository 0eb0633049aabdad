from .loader import ConfigError, ImportConfig, load_config, resolve_timezone

__all__ = ["ConfigError", "ImportConfig", "load_config", "resolve_timezone"]
