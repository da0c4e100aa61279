class ConfigurationError(ValueError):
    """Raised at startup when a required setting is missing or unusable."""
