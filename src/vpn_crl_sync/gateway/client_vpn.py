"""AWS Client VPN endpoint as the CRL consumer."""

import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.config import GatewaySettings
from ..core.errors import ConfigurationError, TransportError
from ..core.models import CRLAbsent, CRLPresent, InstalledCRL

logger = logging.getLogger(__name__)


class ClientVPNGateway:
    """Reads and installs the client certificate CRL of a Client VPN endpoint."""

    def __init__(
        self,
        endpoint_id: str,
        region: Optional[str] = None,
        ec2_client: Optional[Any] = None,
    ):
        """Initialize gateway.

        Args:
            endpoint_id: Client VPN endpoint ID (cvpn-endpoint-...)
            region: AWS region (default: boto3 configuration chain)
            ec2_client: Optional boto3 EC2 client to use
        """
        self.endpoint_id = endpoint_id
        if ec2_client is None:
            try:
                ec2_client = boto3.client("ec2", region_name=region)
            except (BotoCoreError, ClientError) as e:
                raise ConfigurationError(f"Cannot create EC2 client: {e}") from e
        self._ec2 = ec2_client

    @classmethod
    def from_settings(cls, settings: GatewaySettings) -> "ClientVPNGateway":
        """Build a gateway from the gateway section of the config file."""
        return cls(endpoint_id=settings.client_vpn_endpoint_id, region=settings.region)

    def read_crl(self) -> InstalledCRL:
        """Export the CRL currently installed on the endpoint.

        Returns:
            CRLAbsent if the endpoint never had a CRL imported, CRLPresent
            otherwise (even when the installed CRL is an empty string)

        Raises:
            TransportError: If the export call fails
        """
        try:
            response = self._ec2.export_client_vpn_client_certificate_revocation_list(
                ClientVpnEndpointId=self.endpoint_id
            )
        except (BotoCoreError, ClientError) as e:
            raise TransportError(
                f"Exporting CRL from {self.endpoint_id} failed: {e}"
            ) from e

        pem = response.get("CertificateRevocationList")
        if pem is None:
            return CRLAbsent()
        return CRLPresent(pem=pem)

    def install_crl(self, pem: str) -> None:
        """Import a CRL into the endpoint, replacing any installed one.

        Raises:
            TransportError: If the import call fails
        """
        try:
            self._ec2.import_client_vpn_client_certificate_revocation_list(
                ClientVpnEndpointId=self.endpoint_id,
                CertificateRevocationList=pem,
            )
        except (BotoCoreError, ClientError) as e:
            raise TransportError(
                f"Importing CRL into {self.endpoint_id} failed: {e}"
            ) from e
        logger.debug("Imported %d byte CRL into %s", len(pem), self.endpoint_id)
