"""Domain errors raised by the portal services."""


class InvalidScaleConfig(ValueError):
    """Axis configuration that cannot produce ticks or coordinates."""


class RecordValidationError(ValueError):
    """A submitted record is missing a required field or names an unknown one."""


class UnsupportedDocument(ValueError):
    """An uploaded file type the work-history importer cannot handle."""
