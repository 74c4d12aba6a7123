"""Transport to the remote search service."""

from .client import HttpClient
from .endpoints import Endpoints

__all__ = ["HttpClient", "Endpoints"]
