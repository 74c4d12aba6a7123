"""Custom exception hierarchy for the Apisearch client.

These exceptions allow callers to discriminate error categories
and handle them appropriately while preserving the original context.
"""

from __future__ import annotations


class ApisearchError(Exception):
    """Base class for all Apisearch client exceptions."""


class ConfigError(ApisearchError):
    """Raised when client configuration is missing or invalid."""


class QueryBuildError(ApisearchError):
    """Raised when a query is assembled into a shape the service cannot run."""


class FormatError(ApisearchError):
    """Raised when a wire map lacks required keys or holds unknown enum values."""


class UUIDError(FormatError):
    """Raised when a composed identity string is not of the form ``type~id``."""


class TransportError(ApisearchError):
    """Raised when the remote service answers with an error or an unreadable body."""
