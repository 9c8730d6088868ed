"""CRL rotation driver."""

from typing import Iterable

from ..core.models import PropagationResult
from .propagation import propagate_crl
from .steps import step


def rotate_crl(pki, gateway, deprovisioned: Iterable[str] = ()) -> PropagationResult:
    """Regenerate the PKI service's CRL and propagate it to the gateway.

    A rotation that succeeds is not undone if propagation then fails; the
    PKI service is left ahead of the gateway until propagation is re-run.

    Args:
        pki: PKI service (rotate_crl plus what propagate_crl needs)
        gateway: CRL consumer
        deprovisioned: Users whose certificates must all be revoked

    Returns:
        PropagationResult of the propagation run
    """
    with step("rotate"):
        pki.rotate_crl()

    return propagate_crl(pki, gateway, deprovisioned)
