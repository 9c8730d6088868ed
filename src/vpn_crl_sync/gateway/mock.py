"""In-memory gateway for testing and examples."""

from typing import Optional

from ..core.errors import TransportError
from ..core.models import CRLAbsent, CRLPresent, InstalledCRL


class MockGateway:
    """Mock Client VPN endpoint that records every CRL pushed to it."""

    def __init__(self, installed: Optional[str] = None):
        """Initialize mock gateway.

        Args:
            installed: CRL already installed, None if never installed
        """
        self.installed = installed
        self.pushes: list[str] = []
        self.reads = 0

        # Failure injection
        self.fail_read = False
        self.fail_install = False

    def read_crl(self) -> InstalledCRL:
        """Return the installed CRL."""
        self.reads += 1
        if self.fail_read:
            raise TransportError("Exporting CRL failed: injected failure")
        if self.installed is None:
            return CRLAbsent()
        return CRLPresent(pem=self.installed)

    def install_crl(self, pem: str) -> None:
        """Install a CRL, replacing the current one."""
        if self.fail_install:
            raise TransportError("Importing CRL failed: injected failure")
        self.installed = pem
        self.pushes.append(pem)
