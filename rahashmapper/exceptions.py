"""
Exception hierarchy for RA Hash Mapper.

Everything fatal to a run derives from RAHashMapperError so the CLI can catch
it in one place and turn it into a non-zero exit.
"""


class RAHashMapperError(Exception):
    """Base class for all fatal RA Hash Mapper errors."""


class ConfigError(RAHashMapperError):
    """Raised when the configuration file is missing, unreadable or invalid."""


class LibraryNotFoundError(RAHashMapperError):
    """Raised when the configured ROM library root does not exist."""


class OutputPathError(RAHashMapperError):
    """Raised when the output directory cannot be created."""


class HashToolError(RAHashMapperError):
    """Raised when the hashing tool is missing and cannot be downloaded."""


class CredentialError(RAHashMapperError):
    """Raised when the API key is rejected by the catalog service."""


class NoPlatformsError(RAHashMapperError):
    """Raised when no library folder resolves to a known platform."""


class CatalogError(RAHashMapperError):
    """Raised when the catalog service cannot be reached or returns garbage."""

    def __init__(self, message: str, url: str = "") -> None:
        self.url = url
        super().__init__(message)
