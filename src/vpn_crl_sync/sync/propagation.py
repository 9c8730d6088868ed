"""CRL propagation from the PKI service to the gateway."""

import logging
from typing import Iterable

from ..core.errors import CRLSyncError
from ..core.models import CRLAbsent, PropagationResult, PropagationStatus
from .convergence import converge_revocations
from .steps import step

logger = logging.getLogger(__name__)


def fetch_crl(pki) -> bytes:
    """Fetch the PKI service's current CRL, verbatim and uncached."""
    return pki.fetch_crl()


def propagate_crl(pki, gateway, deprovisioned: Iterable[str] = ()) -> PropagationResult:
    """Converge revocations and bring the gateway's CRL up to date.

    The gateway is only written to when its installed CRL differs from the
    PKI service's, or when it has none at all. Every step depends on the
    previous one; the first failure aborts the run with the failing step
    recorded on the error.

    Args:
        pki: PKI service (list_users, revoke_certificate, fetch_crl)
        gateway: CRL consumer (read_crl, install_crl)
        deprovisioned: Users whose certificates must all be revoked

    Returns:
        PropagationResult with the fetched CRL and what was done with it

    Raises:
        EnumerationError: If users cannot be listed
        RevocationError: If a revocation is rejected
        TransportError: If either collaborator cannot be reached
    """
    with step("enumerate"):
        users = pki.list_users(deprovisioned)

    with step("revoke"):
        revoked = converge_revocations(pki, users, keep_newest=True)

    with step("fetch"):
        crl = fetch_crl(pki)

    with step("read"):
        installed = gateway.read_crl()

    with step("diff"):
        try:
            pem = crl.decode("ascii")
        except UnicodeDecodeError as e:
            raise CRLSyncError(f"CRL from PKI service is not PEM text: {e}") from e

    if isinstance(installed, CRLAbsent):
        status = PropagationStatus.FIRST_UPLOAD
    elif installed.pem != pem:
        status = PropagationStatus.UPDATED
    else:
        logger.info("CRL does not need to be updated", extra={"event": "no_update_needed"})
        return PropagationResult(crl=crl, status=PropagationStatus.UNCHANGED, revoked=revoked)

    with step("push"):
        gateway.install_crl(pem)

    if status == PropagationStatus.FIRST_UPLOAD:
        logger.info("First upload of CRL to the gateway", extra={"event": "first_upload"})
    else:
        logger.info("Updated CRL on the gateway", extra={"event": "updated"})
    return PropagationResult(crl=crl, status=status, revoked=revoked)
