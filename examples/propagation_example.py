#!/usr/bin/env python3
"""CRL propagation example - one live certificate per user, synced to a gateway."""

from datetime import datetime, timedelta, timezone

from vpn_crl_sync import propagate_crl, rotate_crl
from vpn_crl_sync.gateway import MockGateway
from vpn_crl_sync.pki import MockPKIService


def main():
    print("=== CRL Propagation Example ===\n")

    now = datetime.now(timezone.utc)
    pki = MockPKIService()
    gateway = MockGateway()

    # Users rotate credentials over time
    print("1. Issuing certificates...")
    pki.issue("alice", now - timedelta(days=90), serial_number="a1")
    pki.issue("alice", now - timedelta(days=1), serial_number="a2")
    pki.issue("bob", now - timedelta(days=30), serial_number="b1")
    pki.issue("carol", now - timedelta(days=10), serial_number="c1")
    print("   ✓ alice: a1, a2 | bob: b1 | carol: c1\n")

    # First run: revoke superseded certs, carol has left
    print("2. Propagating (carol deprovisioned)...")
    result = propagate_crl(pki, gateway, deprovisioned=["carol"])
    print(f"   ✓ Revoked: {', '.join(result.revoked)}")
    print(f"   ✓ Gateway: {result.status.value}\n")

    # Nothing changed: no push
    print("3. Propagating again...")
    result = propagate_crl(pki, gateway, deprovisioned=["carol"])
    print(f"   ✓ Gateway: {result.status.value}\n")

    # Rotation regenerates the CRL, so the gateway is updated
    print("4. Rotating CRL...")
    result = rotate_crl(pki, gateway, deprovisioned=["carol"])
    print(f"   ✓ Gateway: {result.status.value}")
    print(f"   ✓ Pushes so far: {len(gateway.pushes)}")

    print("\n=== Live certificates ===")
    for user in ["alice", "bob", "carol"]:
        print(f"   • {user}: {pki.live_serials(user) or 'none'}")


if __name__ == "__main__":
    main()
