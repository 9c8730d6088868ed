"""Core data models for vpn-crl-sync."""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


class CertificateRef(BaseModel):
    """Reference to one certificate issued by the PKI service.

    The certificate content itself is owned by the PKI service; only the
    identifying data needed for revocation decisions is kept here.
    """

    serial_number: str = Field(description="PKI serial number (opaque identifier)")
    user: str = Field(description="User the certificate was issued to")
    issued_at: datetime = Field(description="Issuance time (certificate not_before)")
    revoked: bool = Field(default=False, description="Already revoked at enumeration")


class UserRecord(BaseModel):
    """A user and the certificates issued to them.

    Certificates are kept in issuance order, oldest first: the last element
    is the most recently issued one.
    """

    name: str = Field(description="User identity (certificate common name)")
    certificates: list[CertificateRef] = Field(
        default_factory=list, description="Certificates, oldest first"
    )
    deprovisioned: bool = Field(
        default=False, description="Revoke every certificate, including the latest"
    )

    def latest(self) -> Optional[CertificateRef]:
        """Return the most recently issued certificate.

        Ties on issued_at go to the later position in the list.
        """
        if not self.certificates:
            return None
        _, cert = max(
            enumerate(self.certificates),
            key=lambda item: (item[1].issued_at, item[0]),
        )
        return cert


class CRLAbsent(BaseModel):
    """Gateway has never had a CRL installed."""

    kind: Literal["absent"] = "absent"


class CRLPresent(BaseModel):
    """Gateway has a CRL installed (possibly an empty string)."""

    kind: Literal["present"] = "present"
    pem: str = Field(description="Installed CRL as reported by the gateway")


InstalledCRL = Union[CRLAbsent, CRLPresent]


class PropagationStatus(str, Enum):
    """Outcome of a CRL propagation run."""

    FIRST_UPLOAD = "first_upload"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class PropagationResult(BaseModel):
    """Result of pushing the PKI service's CRL to the gateway."""

    crl: bytes = Field(description="CRL fetched from the PKI service")
    status: PropagationStatus = Field(description="What happened on the gateway")
    revoked: list[str] = Field(
        default_factory=list, description="Serials revoked during convergence"
    )

    @property
    def pushed(self) -> bool:
        """Whether the gateway received a new CRL."""
        return self.status != PropagationStatus.UNCHANGED
