"""HashiCorp Vault PKI secrets engine client."""

import logging
from typing import Iterable, Optional

import httpx
from cryptography import x509
from cryptography.x509.oid import NameOID

from ..core.config import VaultSettings
from ..core.errors import (
    CRLSyncError,
    EnumerationError,
    RevocationError,
    TransportError,
)
from ..core.models import CertificateRef, UserRecord

logger = logging.getLogger(__name__)


def _vault_errors(response: httpx.Response) -> str:
    """Extract Vault's error list from a response, falling back to the body."""
    try:
        errors = response.json().get("errors")
    except (ValueError, AttributeError):
        errors = None
    if errors:
        return "; ".join(str(e) for e in errors)
    return response.text.strip() or response.reason_phrase


class VaultPKIClient:
    """Client for the PKI operations this tool needs from Vault.

    Covers reading and rotating the CRL, revoking certificates by serial and
    enumerating the certificates issued by the mount, grouped per user.
    """

    def __init__(
        self,
        address: str,
        pki_path: str,
        token: Optional[str] = None,
        namespace: Optional[str] = None,
        timeout: float = 10.0,
        verify: bool = True,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize Vault PKI client.

        Args:
            address: Vault base URL
            pki_path: PKI secrets engine mount path
            token: Vault token sent as X-Vault-Token
            namespace: Vault Enterprise namespace
            timeout: Request timeout in seconds
            verify: Verify TLS certificates
            http_client: Optional HTTP client to use
        """
        self.address = address.rstrip("/")
        self.pki_path = pki_path.strip("/")
        self._headers: dict[str, str] = {}
        if token:
            self._headers["X-Vault-Token"] = token
        if namespace:
            self._headers["X-Vault-Namespace"] = namespace
        self._http_client = http_client or httpx.Client(timeout=timeout, verify=verify)

    @classmethod
    def from_settings(cls, settings: VaultSettings) -> "VaultPKIClient":
        """Build a client from the vault section of the config file."""
        return cls(
            address=settings.address,
            pki_path=settings.pki_path,
            token=settings.token,
            namespace=settings.namespace,
            timeout=settings.timeout,
            verify=settings.verify,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http_client.close()

    def __enter__(self) -> "VaultPKIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _url(self, path: str) -> str:
        return f"{self.address}/v1/{self.pki_path}/{path}"

    def _request(
        self,
        method: str,
        path: str,
        error_cls: type[CRLSyncError] = TransportError,
        **kwargs,
    ) -> httpx.Response:
        """Send a request to the mount, raising error_cls if it cannot complete."""
        url = self._url(path)
        logger.debug("Vault request %s %s", method, url)
        try:
            return self._http_client.request(method, url, headers=self._headers, **kwargs)
        except httpx.HTTPError as e:
            raise error_cls(f"Vault request {method} {url} failed: {e}") from e

    def fetch_crl(self) -> bytes:
        """Fetch the current CRL in PEM form.

        Returns:
            Response body, unmodified

        Raises:
            TransportError: If the CRL cannot be read
        """
        response = self._request("GET", "crl/pem")
        if not response.is_success:
            raise TransportError(
                f"Reading CRL from {self.pki_path} failed "
                f"({response.status_code}): {_vault_errors(response)}"
            )
        return response.content

    def rotate_crl(self) -> None:
        """Ask Vault to regenerate the CRL.

        Raises:
            TransportError: If the rotate request fails
        """
        response = self._request("GET", "crl/rotate")
        if not response.is_success:
            raise TransportError(
                f"Rotating CRL of {self.pki_path} failed "
                f"({response.status_code}): {_vault_errors(response)}"
            )
        logger.info("Rotated CRL of %s", self.pki_path, extra={"event": "rotated"})

    def revoke_certificate(self, serial_number: str) -> None:
        """Revoke one certificate.

        Args:
            serial_number: Certificate serial as listed by Vault

        Raises:
            RevocationError: If Vault rejects the revocation
            TransportError: If the request cannot be completed
        """
        response = self._request(
            "POST", "revoke", json={"serial_number": serial_number}
        )
        if not response.is_success:
            raise RevocationError(
                f"Revoking {serial_number} failed "
                f"({response.status_code}): {_vault_errors(response)}",
                serial_number=serial_number,
            )

    def list_serials(self) -> list[str]:
        """List the serials of every certificate issued by the mount.

        Raises:
            EnumerationError: If the listing fails
        """
        response = self._request("LIST", "certs", error_cls=EnumerationError)
        # Vault answers 404 to a LIST with no keys
        if response.status_code == 404:
            return []
        if not response.is_success:
            raise EnumerationError(
                f"Listing certificates of {self.pki_path} failed "
                f"({response.status_code}): {_vault_errors(response)}"
            )
        try:
            return list(response.json()["data"]["keys"])
        except (ValueError, KeyError, TypeError) as e:
            raise EnumerationError(f"Unexpected certificate listing: {e}") from e

    def read_certificate(self, serial_number: str) -> Optional[CertificateRef]:
        """Read one certificate and turn it into a CertificateRef.

        Args:
            serial_number: Certificate serial

        Returns:
            CertificateRef, or None for CA certificates and certificates
            without a subject common name

        Raises:
            EnumerationError: If the certificate cannot be read or parsed
        """
        response = self._request(
            "GET", f"cert/{serial_number}", error_cls=EnumerationError
        )
        if not response.is_success:
            raise EnumerationError(
                f"Reading certificate {serial_number} failed "
                f"({response.status_code}): {_vault_errors(response)}"
            )

        try:
            data = response.json()["data"]
            cert = x509.load_pem_x509_certificate(data["certificate"].encode("ascii"))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise EnumerationError(
                f"Cannot parse certificate {serial_number}: {e}"
            ) from e

        try:
            extensions = cert.extensions
            names = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
        except (ValueError, x509.DuplicateExtension) as e:
            raise EnumerationError(
                f"Cannot parse certificate {serial_number}: {e}"
            ) from e

        try:
            constraints = extensions.get_extension_for_class(x509.BasicConstraints)
            if constraints.value.ca:
                return None
        except x509.ExtensionNotFound:
            pass

        if not names:
            logger.warning("Certificate %s has no common name, skipping", serial_number)
            return None

        return CertificateRef(
            serial_number=serial_number,
            user=str(names[0].value),
            issued_at=cert.not_valid_before_utc,
            revoked=bool(data.get("revocation_time")),
        )

    def list_users(self, deprovisioned: Iterable[str] = ()) -> list[UserRecord]:
        """Enumerate users and their certificates.

        Users are sorted by name. Each user's certificates are sorted oldest
        first; certificates with equal issuance time keep Vault's listing
        order.

        Args:
            deprovisioned: Users to flag for full revocation

        Raises:
            EnumerationError: If any certificate cannot be listed or read
        """
        deprovisioned = set(deprovisioned)
        by_user: dict[str, list[CertificateRef]] = {}
        for serial_number in self.list_serials():
            cert = self.read_certificate(serial_number)
            if cert is not None:
                by_user.setdefault(cert.user, []).append(cert)

        logger.debug("Enumerated %d users from %s", len(by_user), self.pki_path)
        return [
            UserRecord(
                name=name,
                certificates=sorted(certs, key=lambda c: c.issued_at),
                deprovisioned=name in deprovisioned,
            )
            for name, certs in sorted(by_user.items())
        ]
