"""Tests for the AWS Client VPN gateway."""

import boto3
import pytest
from botocore.stub import Stubber

from vpn_crl_sync import (
    CRLAbsent,
    CRLPresent,
    ConfigurationError,
    PropagationStatus,
    TransportError,
)
from vpn_crl_sync.gateway import ClientVPNGateway
from vpn_crl_sync.pki import MockPKIService
from vpn_crl_sync.sync import propagate_crl

ENDPOINT_ID = "cvpn-endpoint-0123456789abcdef0"
EXPORT = "export_client_vpn_client_certificate_revocation_list"
IMPORT = "import_client_vpn_client_certificate_revocation_list"


@pytest.fixture
def ec2():
    return boto3.client(
        "ec2",
        region_name="eu-west-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


def test_missing_region_is_configuration_error(monkeypatch, tmp_path):
    """Creating the EC2 client without a region raises ConfigurationError."""
    for name in ("AWS_DEFAULT_REGION", "AWS_REGION", "AWS_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "no-aws-config"))

    with pytest.raises(ConfigurationError, match="region"):
        ClientVPNGateway(ENDPOINT_ID)


def test_read_crl_absent(ec2):
    """Export without a CRL field means nothing is installed."""
    gateway = ClientVPNGateway(ENDPOINT_ID, ec2_client=ec2)

    with Stubber(ec2) as stubber:
        stubber.add_response(
            EXPORT, {"Status": {"Code": "pending"}}, {"ClientVpnEndpointId": ENDPOINT_ID}
        )
        installed = gateway.read_crl()

    assert isinstance(installed, CRLAbsent)


def test_read_crl_empty_string_is_present(ec2):
    """An empty installed CRL is still an installed CRL."""
    gateway = ClientVPNGateway(ENDPOINT_ID, ec2_client=ec2)

    with Stubber(ec2) as stubber:
        stubber.add_response(
            EXPORT, {"CertificateRevocationList": ""}, {"ClientVpnEndpointId": ENDPOINT_ID}
        )
        installed = gateway.read_crl()

    assert installed == CRLPresent(pem="")


def test_read_crl_present(ec2):
    """Installed CRL is returned as reported."""
    gateway = ClientVPNGateway(ENDPOINT_ID, ec2_client=ec2)
    pem = "-----BEGIN X509 CRL-----\nMIIB\n-----END X509 CRL-----\n"

    with Stubber(ec2) as stubber:
        stubber.add_response(
            EXPORT,
            {"CertificateRevocationList": pem, "Status": {"Code": "active"}},
            {"ClientVpnEndpointId": ENDPOINT_ID},
        )
        installed = gateway.read_crl()

    assert installed == CRLPresent(pem=pem)


def test_read_crl_client_error(ec2):
    """AWS errors become TransportError."""
    gateway = ClientVPNGateway(ENDPOINT_ID, ec2_client=ec2)

    with Stubber(ec2) as stubber:
        stubber.add_client_error(
            EXPORT,
            service_error_code="InvalidClientVpnEndpointId.NotFound",
            service_message="The Client VPN endpoint does not exist",
            http_status_code=400,
        )
        with pytest.raises(TransportError, match=ENDPOINT_ID):
            gateway.read_crl()


def test_install_crl(ec2):
    """Import sends the CRL for the endpoint."""
    gateway = ClientVPNGateway(ENDPOINT_ID, ec2_client=ec2)
    pem = "-----BEGIN X509 CRL-----\nMIIB\n-----END X509 CRL-----\n"

    with Stubber(ec2) as stubber:
        stubber.add_response(
            IMPORT,
            {"Return": True},
            {"ClientVpnEndpointId": ENDPOINT_ID, "CertificateRevocationList": pem},
        )
        gateway.install_crl(pem)
        stubber.assert_no_pending_responses()


def test_install_crl_client_error(ec2):
    """Import failure becomes TransportError."""
    gateway = ClientVPNGateway(ENDPOINT_ID, ec2_client=ec2)

    with Stubber(ec2) as stubber:
        stubber.add_client_error(IMPORT, service_error_code="UnauthorizedOperation")
        with pytest.raises(TransportError):
            gateway.install_crl("pem")


def test_propagate_first_upload_to_client_vpn(ec2):
    """End to end against the EC2 API: absent CRL triggers an import."""
    pki = MockPKIService()
    pki.issue("alice")
    crl = pki.fetch_crl().decode("ascii")
    gateway = ClientVPNGateway(ENDPOINT_ID, ec2_client=ec2)

    with Stubber(ec2) as stubber:
        stubber.add_response(EXPORT, {}, {"ClientVpnEndpointId": ENDPOINT_ID})
        stubber.add_response(
            IMPORT,
            {"Return": True},
            {"ClientVpnEndpointId": ENDPOINT_ID, "CertificateRevocationList": crl},
        )
        result = propagate_crl(pki, gateway)
        stubber.assert_no_pending_responses()

    assert result.status == PropagationStatus.FIRST_UPLOAD


def test_propagate_unchanged_on_client_vpn(ec2):
    """End to end: matching CRL means no import call."""
    pki = MockPKIService()
    pki.issue("alice")
    crl = pki.fetch_crl().decode("ascii")
    gateway = ClientVPNGateway(ENDPOINT_ID, ec2_client=ec2)

    with Stubber(ec2) as stubber:
        stubber.add_response(
            EXPORT, {"CertificateRevocationList": crl}, {"ClientVpnEndpointId": ENDPOINT_ID}
        )
        result = propagate_crl(pki, gateway)
        stubber.assert_no_pending_responses()

    assert result.status == PropagationStatus.UNCHANGED


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
