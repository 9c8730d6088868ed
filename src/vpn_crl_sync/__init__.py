"""vpn-crl-sync - one live client certificate per VPN user, CRL kept in sync."""

from .core import (
    CRLAbsent,
    CRLPresent,
    CRLSyncError,
    CertificateRef,
    ConfigurationError,
    EnumerationError,
    PropagationResult,
    PropagationStatus,
    RevocationError,
    SyncConfig,
    TransportError,
    UserRecord,
)
from .gateway import ClientVPNGateway
from .pki import VaultPKIClient
from .sync import (
    converge_revocations,
    fetch_crl,
    propagate_crl,
    rotate_crl,
    select_revocations,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "CRLAbsent",
    "CRLPresent",
    "CertificateRef",
    "PropagationResult",
    "PropagationStatus",
    "SyncConfig",
    "UserRecord",
    # Errors
    "CRLSyncError",
    "ConfigurationError",
    "EnumerationError",
    "RevocationError",
    "TransportError",
    # Clients
    "ClientVPNGateway",
    "VaultPKIClient",
    # Operations
    "converge_revocations",
    "fetch_crl",
    "propagate_crl",
    "rotate_crl",
    "select_revocations",
]
