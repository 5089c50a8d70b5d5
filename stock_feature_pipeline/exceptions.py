"""Error types raised by the feature set pipeline."""


class ConfigurationError(ValueError):
    """Malformed run configuration. Raised at startup, never per row."""


class SchemaError(ValueError):
    """A source table is missing columns the pipeline requires."""
