"""Exception hierarchy for vpn-crl-sync."""

from typing import Optional


class CRLSyncError(Exception):
    """Base exception for all vpn-crl-sync errors.

    Args:
        message: Human-readable description
        step: Name of the operation step that failed (e.g. "fetch", "push"),
            filled in by the orchestrating operation if not set at raise time
    """

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.step = step

    def __str__(self) -> str:
        message = super().__str__()
        if self.step:
            return f"[{self.step}] {message}"
        return message


# Collaborator errors
class TransportError(CRLSyncError):
    """Request to the PKI service or the gateway could not be completed."""

    pass


class RevocationError(CRLSyncError):
    """PKI service rejected a certificate revocation."""

    def __init__(self, message: str, serial_number: str, step: Optional[str] = None):
        super().__init__(message, step=step)
        self.serial_number = serial_number


class EnumerationError(CRLSyncError):
    """Users and their certificates could not be listed."""

    pass


# Configuration errors
class ConfigurationError(CRLSyncError):
    """Configuration file missing or invalid."""

    pass
