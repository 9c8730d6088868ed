"""In-memory PKI service for testing and examples."""

import base64
import json
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..core.errors import EnumerationError, RevocationError, TransportError
from ..core.models import CertificateRef, UserRecord


class MockPKIService:
    """Mock implementation of the Vault PKI client for testing.

    The rendered CRL depends only on the CRL number and the set of revoked
    serials, so it changes after a revocation or a rotation and stays
    byte-identical otherwise.
    """

    def __init__(self):
        """Initialize mock PKI with no certificates."""
        self._certs: dict[str, CertificateRef] = {}
        self._order: list[str] = []
        self._next_serial = 1
        self.crl_number = 1
        self.calls: list[str] = []

        # Failure injection
        self.fail_list = False
        self.fail_fetch = False
        self.fail_rotate = False
        self.fail_revoke: set[str] = set()

    def issue(
        self,
        user: str,
        issued_at: Optional[datetime] = None,
        serial_number: Optional[str] = None,
    ) -> str:
        """Issue a certificate to a user and return its serial."""
        if serial_number is None:
            serial_number = f"{self._next_serial:02x}"
            self._next_serial += 1
        self._certs[serial_number] = CertificateRef(
            serial_number=serial_number,
            user=user,
            issued_at=issued_at or datetime.now(timezone.utc),
        )
        self._order.append(serial_number)
        return serial_number

    def is_revoked(self, serial_number: str) -> bool:
        """Check if a certificate is revoked."""
        return self._certs[serial_number].revoked

    def live_serials(self, user: str) -> list[str]:
        """Serials of a user's certificates that are not revoked."""
        return [
            serial
            for serial in self._order
            if self._certs[serial].user == user and not self._certs[serial].revoked
        ]

    def revoked_serials(self) -> list[str]:
        """All revoked serials, sorted."""
        return sorted(s for s, cert in self._certs.items() if cert.revoked)

    def revoke_certificate(self, serial_number: str) -> None:
        """Revoke a certificate."""
        self.calls.append(f"revoke:{serial_number}")
        if serial_number in self.fail_revoke:
            raise RevocationError(
                f"Revoking {serial_number} failed (500): injected failure",
                serial_number=serial_number,
            )
        cert = self._certs.get(serial_number)
        if cert is None:
            raise RevocationError(
                f"Revoking {serial_number} failed (400): certificate not found",
                serial_number=serial_number,
            )
        self._certs[serial_number] = cert.model_copy(update={"revoked": True})

    def rotate_crl(self) -> None:
        """Regenerate the CRL with a new CRL number."""
        self.calls.append("rotate")
        if self.fail_rotate:
            raise TransportError("Rotating CRL failed (503): injected failure")
        self.crl_number += 1

    def fetch_crl(self) -> bytes:
        """Render the current CRL as a PEM block."""
        self.calls.append("fetch")
        if self.fail_fetch:
            raise TransportError("Reading CRL failed (503): injected failure")
        body = json.dumps(
            {"crl_number": self.crl_number, "revoked": self.revoked_serials()},
            sort_keys=True,
        ).encode("utf-8")
        encoded = base64.b64encode(body).decode("ascii")
        return (
            "-----BEGIN X509 CRL-----\n"
            f"{encoded}\n"
            "-----END X509 CRL-----\n"
        ).encode("ascii")

    def list_users(self, deprovisioned: Iterable[str] = ()) -> list[UserRecord]:
        """Enumerate users with certificates in issuance order."""
        self.calls.append("list")
        if self.fail_list:
            raise EnumerationError("Listing certificates failed (500): injected failure")

        deprovisioned = set(deprovisioned)
        by_user: dict[str, list[CertificateRef]] = {}
        for serial in self._order:
            cert = self._certs[serial]
            by_user.setdefault(cert.user, []).append(cert)

        return [
            UserRecord(
                name=name,
                certificates=sorted(certs, key=lambda c: c.issued_at),
                deprovisioned=name in deprovisioned,
            )
            for name, certs in sorted(by_user.items())
        ]
