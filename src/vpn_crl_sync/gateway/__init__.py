"""CRL consumers (VPN gateways)."""

from .client_vpn import ClientVPNGateway
from .mock import MockGateway

__all__ = ["ClientVPNGateway", "MockGateway"]
