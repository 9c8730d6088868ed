"""Command-line UI for vpn-crl-sync."""

import argparse
import logging
import sys
from typing import Any, Optional, Sequence

from .core.config import SyncConfig
from .core.errors import CRLSyncError
from .gateway.client_vpn import ClientVPNGateway
from .pki.vault import VaultPKIClient
from .sync import fetch_crl, propagate_crl, rotate_crl

__all__ = ("main", "run_cli")

DEFAULT_CONFIG = "vpn-crl-sync.yaml"


def build_clients(config: SyncConfig) -> tuple[Any, Any]:
    """Create the PKI and gateway clients described by the config."""
    pki = VaultPKIClient.from_settings(config.vault)
    gateway = ClientVPNGateway.from_settings(config.gateway)
    return pki, gateway


#
# Commands
#


def update_command(args: argparse.Namespace, config: SyncConfig, pki, gateway) -> None:
    """Converge revocations and push the CRL if it changed."""
    result = propagate_crl(pki, gateway, config.deprovisioned_users)
    print(f"{result.status.value}: revoked {len(result.revoked)} certificates")


def rotate_command(args: argparse.Namespace, config: SyncConfig, pki, gateway) -> None:
    """Rotate the CRL, then converge and push."""
    result = rotate_crl(pki, gateway, config.deprovisioned_users)
    print(f"{result.status.value}: revoked {len(result.revoked)} certificates")


def show_crl_command(args: argparse.Namespace, config: SyncConfig, pki, gateway) -> None:
    """Print the current CRL."""
    sys.stdout.write(fetch_crl(pki).decode("ascii"))


def show_users_command(args: argparse.Namespace, config: SyncConfig, pki, gateway) -> None:
    """Print users and their certificates, oldest first."""
    for user in pki.list_users(config.deprovisioned_users):
        flag = " (deprovisioned)" if user.deprovisioned else ""
        print(f"{user.name}{flag}")
        for cert in user.certificates:
            state = "revoked" if cert.revoked else "live"
            print(f"  {cert.serial_number}  {cert.issued_at.isoformat()}  {state}")


#
# Argument parsing
#


def setup_args() -> argparse.ArgumentParser:
    """Create ArgumentParser."""
    top = argparse.ArgumentParser(
        prog="vpn-crl-sync",
        description="Keep one live client certificate per VPN user and "
        "sync the CA's CRL to the Client VPN endpoint.",
        allow_abbrev=False,
    )
    top.add_argument("-c", "--config", default=DEFAULT_CONFIG,
                     help=f"YAML config file.  Default: {DEFAULT_CONFIG}")
    top.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    top.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    sub = top.add_subparsers(metavar="COMMAND")

    p = sub.add_parser("update", help=update_command.__doc__)
    p.set_defaults(command=update_command)

    p = sub.add_parser("rotate", help=rotate_command.__doc__)
    p.set_defaults(command=rotate_command)

    p = sub.add_parser("show-crl", help=show_crl_command.__doc__)
    p.set_defaults(command=show_crl_command)

    p = sub.add_parser("show-users", help=show_users_command.__doc__)
    p.set_defaults(command=show_users_command)
    return top


def setup_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def run_cli(argv: Sequence[str]) -> int:
    """Parse arguments, run the selected command and return the exit code."""
    parser = setup_args()
    args = parser.parse_args(argv)
    if not hasattr(args, "command"):
        parser.print_usage(sys.stderr)
        sys.stderr.write("vpn-crl-sync: error: need command\n")
        return 2

    setup_logging(args)

    pki: Optional[Any] = None
    try:
        config = SyncConfig.from_config(args.config)
        pki, gateway = build_clients(config)
        args.command(args, config, pki, gateway)
    except CRLSyncError as e:
        sys.stderr.write(f"vpn-crl-sync: {e}\n")
        return 1
    finally:
        if pki is not None and hasattr(pki, "close"):
            pki.close()
    return 0


def main() -> None:
    """Command-line application entry point."""
    try:
        sys.exit(run_cli(sys.argv[1:]))
    except (BrokenPipeError, KeyboardInterrupt):
        sys.exit(1)


if __name__ == "__main__":
    main()
