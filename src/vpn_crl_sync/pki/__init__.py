"""PKI service clients."""

from .mock import MockPKIService
from .vault import VaultPKIClient

__all__ = ["MockPKIService", "VaultPKIClient"]
