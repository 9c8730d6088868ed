"""Revocation convergence: keep one live certificate per user."""

import logging
from typing import Iterable

from ..core.models import CertificateRef, UserRecord

logger = logging.getLogger(__name__)


def select_revocations(user: UserRecord, keep_newest: bool = True) -> list[CertificateRef]:
    """Choose which of a user's certificates must be revoked.

    With keep_newest, every certificate except the latest is selected; the
    latest is the one with the greatest issued_at, and on equal timestamps
    the one that comes last in the user's list. Without keep_newest, or for
    a deprovisioned user, every certificate is selected. Certificates that
    are already revoked are never selected.

    Args:
        user: User and their certificates
        keep_newest: Spare the latest certificate

    Returns:
        Certificates to revoke, in the user's list order
    """
    if not user.certificates:
        return []

    keep = None
    if keep_newest and not user.deprovisioned:
        keep = user.latest()

    return [
        cert
        for cert in user.certificates
        if cert is not keep and not cert.revoked
    ]


def converge_revocations(
    pki, users: Iterable[UserRecord], keep_newest: bool = True
) -> list[str]:
    """Revoke superseded certificates for every user.

    Revocations are issued one certificate at a time. The first failure
    aborts the run; certificates revoked before it stay revoked.

    Args:
        pki: PKI service exposing revoke_certificate(serial_number)
        users: Users to converge
        keep_newest: Spare each user's latest certificate

    Returns:
        Serials revoked, in the order they were revoked

    Raises:
        RevocationError: If the PKI service rejects a revocation
        TransportError: If the PKI service cannot be reached
    """
    revoked: list[str] = []
    for user in users:
        for cert in select_revocations(user, keep_newest=keep_newest):
            pki.revoke_certificate(cert.serial_number)
            revoked.append(cert.serial_number)
            logger.info(
                "Revoked certificate %s of %s",
                cert.serial_number,
                user.name,
                extra={"event": "revoked"},
            )

    logger.info("Convergence revoked %d certificates", len(revoked))
    return revoked
