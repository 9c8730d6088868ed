"""Revocation convergence and CRL propagation."""

from .convergence import converge_revocations, select_revocations
from .propagation import fetch_crl, propagate_crl
from .rotation import rotate_crl

__all__ = [
    "converge_revocations",
    "fetch_crl",
    "propagate_crl",
    "rotate_crl",
    "select_revocations",
]
