"""Configuration errors raised while building the plugin."""


class ConfigError(ValueError):
    """Base class for errors raised at construction time."""
    pass


class InvalidConfig(ConfigError):
    """Raised when the options record has the wrong shape or values."""
    pass


class MissingCredentials(ConfigError):
    """Raised when access key, secret, bucket or region is missing."""
    pass


class InvalidFormat(ConfigError):
    """Raised when `format` is neither digits nor a date pattern."""
    pass
