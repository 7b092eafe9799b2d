"""Configuration errors."""


class ConfigError(Exception):
    """Raised when the configuration file or an override cannot be used."""
