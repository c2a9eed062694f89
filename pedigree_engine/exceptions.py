"""Custom exceptions for the pedigree_engine package."""


class PedigreeEngineError(Exception):
    """Base exception for pedigree_engine package."""
    pass


class ConfigurationError(PedigreeEngineError):
    """Configuration validation or loading error."""
    pass


class SnapshotError(PedigreeEngineError):
    """Animal snapshot could not be built from the supplied records."""
    pass
