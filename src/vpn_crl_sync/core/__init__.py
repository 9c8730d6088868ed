"""Core functionality for vpn-crl-sync."""

from .config import GatewaySettings, SyncConfig, VaultSettings
from .errors import (
    CRLSyncError,
    ConfigurationError,
    EnumerationError,
    RevocationError,
    TransportError,
)
from .models import (
    CRLAbsent,
    CRLPresent,
    CertificateRef,
    InstalledCRL,
    PropagationResult,
    PropagationStatus,
    UserRecord,
)

__all__ = [
    # Config
    "GatewaySettings",
    "SyncConfig",
    "VaultSettings",
    # Errors
    "CRLSyncError",
    "ConfigurationError",
    "EnumerationError",
    "RevocationError",
    "TransportError",
    # Models
    "CRLAbsent",
    "CRLPresent",
    "CertificateRef",
    "InstalledCRL",
    "PropagationResult",
    "PropagationStatus",
    "UserRecord",
]
