"""HTTP directory collaborators."""

from .client import DirectoryClient, RestDirectory, RestUnitSource
from .retry import retry_on_connection_error

__all__ = ["DirectoryClient", "RestDirectory", "RestUnitSource", "retry_on_connection_error"]
