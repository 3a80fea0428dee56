"""Configuration errors."""


class ConfigError(Exception):
    """Raised when the config file, an override source, or a merged value is invalid."""
